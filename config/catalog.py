"""
Catalog reference data and storage constants.

Codes here are the values stored in the catalog table; display names are
what the dashboard shows in dropdowns.
"""

# =============================================================================
# MANUAL TYPES
# =============================================================================

MANUAL_TYPES = {
    "IM": "Instruction Manual",
    "SM": "Service Manual",
    "PM": "Parts Manual",
    "SPL": "Spare Parts List",
    "WP": "Wiring Plan",
    "TI": "Technical Information",
}


# =============================================================================
# LANGUAGES
# =============================================================================

# "ma-NY" marks a multi-language document
MANUAL_LANGUAGES = {
    "ma-NY": "All Languages",
    "en-GB": "English (UK)",
    "sv-SE": "Swedish",
    "de-DE": "German",
    "da-DK": "Danish",
    "es-ES": "Spanish",
    "fi-FI": "Finnish",
    "fr-FR": "French",
    "el-GR": "Greek",
    "it-IT": "Italian",
    "nl-NL": "Dutch",
    "no-NO": "Norwegian",
    "pt-PT": "Portuguese",
}


# =============================================================================
# PRODUCT CATEGORIES
# =============================================================================

# Category code doubles as the table PartitionKey
PRODUCT_CATEGORIES = {
    "arc": "Welding Equipment",
    "gas": "Gas Equipment",
    "wel": "Welding Automation",
    "pls": "Manual Plasma Cutting",
    "cut": "Cutting Automation",
    "ppe": "PPE / Safety",
    "aac": "Accessories and Consumables",
    "rob": "Robotics",
    "arx": "Carbon Arc Gouging / Exothermic Cutting",
}


# =============================================================================
# MARKET REGIONS
# =============================================================================

MARKET_REGIONS = {
    "EU": "Europe",
    "NA": "North America",
    "SA": "South America",
    "ME": "Middle East",
    "AS": "Asia",
    "AU": "Australia",
    "IN": "India",
}


# =============================================================================
# STORAGE
# =============================================================================

PUBLIC_CONTAINER = "instructionmanuals"
RESTRICTED_CONTAINER = "servicemanuals"

# Azure Table Storage returns at most 1000 entities per page
TABLE_PAGE_SIZE = 1000

ODATA_NO_METADATA = "application/json;odata=nometadata"


# =============================================================================
# UPLOAD PROGRESS
# =============================================================================

# File uploads fill the bar up to 80%, the catalog write starts at 90%
UPLOAD_PROGRESS_FILES_SHARE = 80
UPLOAD_PROGRESS_BEFORE_WRITE = 90
UPLOAD_PROGRESS_COMPLETE = 100
