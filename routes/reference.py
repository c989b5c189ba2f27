"""
Reference data routes.

Dropdown options for the dashboard forms.
"""

from fastapi import APIRouter

from config.catalog import MANUAL_LANGUAGES, MANUAL_TYPES, MARKET_REGIONS, PRODUCT_CATEGORIES

router = APIRouter()


def _options(mapping: dict[str, str]) -> list[dict]:
    return [{"value": code, "label": label} for code, label in mapping.items()]


@router.get("")
async def get_reference_data():
    """Manual types, languages, product categories and market regions."""
    return {
        "manual_types": _options(MANUAL_TYPES),
        "languages": _options(MANUAL_LANGUAGES),
        "product_categories": _options(PRODUCT_CATEGORIES),
        "market_regions": _options(MARKET_REGIONS),
    }
