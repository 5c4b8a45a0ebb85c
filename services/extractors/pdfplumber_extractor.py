"""
PDFPlumber-based PDF conversion
Best for clean digital pay stubs
"""
import pdfplumber
from typing import Dict, List, Optional
import logging

from .base_extractor import BasePDFExtractor, DocumentContent, DocumentPage, TextRun

logger = logging.getLogger(__name__)


class PDFPlumberExtractor(BasePDFExtractor):
    """
    PDF converter using pdfplumber
    Runs of text separated by column gaps become separate elements
    """

    def __init__(self, config: Optional[Dict] = None, x_tolerance: float = 3):
        """
        Initialize pdfplumber converter

        Args:
            config: configuration dict (uses EXTRACTION_CONFIG if not provided)
            x_tolerance: max horizontal gap between characters of one run
        """
        super().__init__(config)
        self.x_tolerance = x_tolerance

    @property
    def name(self) -> str:
        return "pdfplumber"

    def extract(self, filepath: str) -> DocumentContent:
        """Convert a PDF with pdfplumber"""
        pages: Dict[int, DocumentPage] = {}
        page_texts = []

        try:
            with pdfplumber.open(filepath) as pdf:
                for page_num, page in enumerate(pdf.pages, 1):
                    pages[page_num], text = self.convert_page(page_num, self.extract_runs(page))
                    page_texts.append(text)

            logger.info(f"PDFPlumber converted {len(pages)} pages, "
                        f"{sum(len(p.elements) for p in pages.values())} elements")

            return DocumentContent(
                text=self.config["text_layout"]["line_separator"].join(page_texts),
                pages=pages,
                extractor_name=self.name,
            )

        except Exception as e:
            logger.error(f"PDFPlumber conversion failed: {e}")
            raise

    def extract_runs(self, page) -> List[TextRun]:
        """Text runs of a page as (top, x0, width, height, text)"""
        words = page.extract_words(keep_blank_chars=True, x_tolerance=self.x_tolerance)
        return [
            (w['top'], w['x0'], w['x1'] - w['x0'], w['bottom'] - w['top'], w['text'].strip())
            for w in words
            if w['text'].strip()
        ]
