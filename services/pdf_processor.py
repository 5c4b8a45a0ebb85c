"""
PDF Processing Service
Converts pay stub PDFs into delimited text and positioned elements with the
selected backend
"""
import os
import logging
from typing import Dict, Optional

from config.extraction_config import EXTRACTION_CONFIG
from services.extractors.base_extractor import BasePDFExtractor, DocumentContent
from services.extractors.pdfminer_extractor import PDFMinerExtractor
from services.extractors.pdfplumber_extractor import PDFPlumberExtractor

logger = logging.getLogger(__name__)

BACKENDS = {
    "pdfplumber": PDFPlumberExtractor,
    "pdfminer": PDFMinerExtractor,
}


class PDFProcessor:
    """Selects a conversion backend and runs it"""

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or EXTRACTION_CONFIG
        self.supported_extensions = ['.pdf']
        self.default_backend = self.config["pdf_backends"]["default"]

    def validate_file(self, filepath: str) -> bool:
        """Validate that the file exists and is a PDF"""
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"File not found: {filepath}")

        ext = os.path.splitext(filepath)[1].lower()
        if ext not in self.supported_extensions:
            raise ValueError(f"Unsupported file type: {ext}")

        return True

    def get_extractor(self, backend: Optional[str] = None) -> BasePDFExtractor:
        """
        Raises:
            ValueError: unknown backend name
        """
        backend = backend or self.default_backend
        available = self.config["pdf_backends"]["available"]
        if backend not in available or backend not in BACKENDS:
            raise ValueError(f"Unsupported PDF backend: {backend}. Available: {', '.join(available)}")
        return BACKENDS[backend](config=self.config)

    def process_pdf(self, filepath: str, backend: Optional[str] = None) -> DocumentContent:
        """
        Convert a PDF already checked with validate_file

        Args:
            filepath: path to the PDF file
            backend: "pdfplumber" or "pdfminer" (configured default if not provided)

        Returns:
            DocumentContent with delimited text and positioned elements
        """
        extractor = self.get_extractor(backend)
        logger.info(f"Converting {os.path.basename(filepath)} with {extractor.name}")
        return extractor.extract(filepath)
