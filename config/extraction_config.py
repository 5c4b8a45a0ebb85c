"""
Extraction Configuration
Centralized configuration for PDF text conversion, rule loading and pay data extraction
"""
import os

CONFIG_DIR = os.path.dirname(os.path.abspath(__file__))

EXTRACTION_CONFIG = {
    # How converted PDF text lays out table rows
    "text_layout": {
        "line_element_separator": " | ",  # between text runs on the same row
        "line_separator": "\n",           # between rows
        "y_tolerance": 3,                 # points; runs closer than this share a row
    },

    # PDF backends used to turn a file into text and positioned elements
    "pdf_backends": {
        "default": "pdfplumber",
        "available": ["pdfplumber", "pdfminer"],
    },

    # Pay data extraction strategies
    "strategies": {
        "default": "regex",
        "available": ["regex", "position-index"],
    },

    # Regex rule documents
    "rules": {
        "default_path": os.getenv(
            "PAYSTUB_RULES", os.path.join(CONFIG_DIR, "paystub_rules.json")
        ),
        "document_start_variable": "documentStart",
    },

    # Position-index strategy
    "position_index": {
        "page_number": 1,
        "anchor_text": "Earnings Statement",
        # Used when the employee did not work (hours) or was not paid (net pay)
        "zero_defaults": {
            "grossEarnings": {"hours": "0.00", "period": "0.00", "ytd": "", "regularRate": "0.00"},
            "taxes": {"period": "0.00", "ytd": ""},
            "deductions": {"period": "0.00", "ytd": ""},
            "deposits": {"total": "0.00"},
        },
    },

    # Output writers
    "output": {
        "default_file": "output.xls",
        "supported_extensions": [".json", ".xls", ".xlsx"],
    },
}
