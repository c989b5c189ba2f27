"""
Test suite for the Manuals Dashboard API.

Run all tests: pip install -e ".[test]" && pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_upload_service.py -v
"""
