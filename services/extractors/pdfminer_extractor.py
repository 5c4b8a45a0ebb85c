"""
PDFMiner.six-based PDF conversion
Alternative backend for documents pdfplumber lays out poorly
"""
from pdfminer.high_level import extract_pages
from pdfminer.layout import LAParams, LTFigure, LTPage, LTTextLine
from typing import Dict, List, Optional
import logging

from .base_extractor import BasePDFExtractor, DocumentContent, DocumentPage, TextRun

logger = logging.getLogger(__name__)


class PDFMinerExtractor(BasePDFExtractor):
    """
    PDF converter using pdfminer.six
    Each layout text line becomes one element
    """

    def __init__(self, config: Optional[Dict] = None, line_overlap: float = 0.5,
                 char_margin: float = 2.0, word_margin: float = 0.1):
        """
        Initialize pdfminer.six converter with LAParams

        Args:
            config: configuration dict (uses EXTRACTION_CONFIG if not provided)
            line_overlap: Min overlap for line detection (0-1)
            char_margin: Max space between chars in same line
            word_margin: Max space between words in same line
        """
        super().__init__(config)
        # boxes_flow=None keeps column runs apart instead of merging them into paragraphs
        self.laparams = LAParams(
            line_overlap=line_overlap,
            char_margin=char_margin,
            word_margin=word_margin,
            boxes_flow=None,
        )

    @property
    def name(self) -> str:
        return "pdfminer"

    def extract(self, filepath: str) -> DocumentContent:
        """Convert a PDF with pdfminer.six"""
        pages: Dict[int, DocumentPage] = {}
        page_texts = []

        try:
            for page_num, page_layout in enumerate(extract_pages(filepath, laparams=self.laparams), 1):
                pages[page_num], text = self.convert_page(page_num, self.extract_runs(page_layout))
                page_texts.append(text)

            logger.info(f"PDFMiner converted {len(pages)} pages, "
                        f"{sum(len(p.elements) for p in pages.values())} elements")

            return DocumentContent(
                text=self.config["text_layout"]["line_separator"].join(page_texts),
                pages=pages,
                extractor_name=self.name,
            )

        except Exception as e:
            logger.error(f"PDFMiner conversion failed: {e}")
            raise

    def extract_runs(self, page_layout: LTPage) -> List[TextRun]:
        """
        Text lines of a page as (top, x0, width, height, text)

        PDF coordinates have their origin at bottom-left; top is measured from the
        top edge so rows sort the same way as with pdfplumber.
        """
        runs = []

        def collect(element):
            if isinstance(element, LTTextLine):
                text = element.get_text().strip()
                if text:
                    top = page_layout.height - element.y1
                    runs.append((top, element.x0, element.width, element.height, text))
            elif isinstance(element, LTFigure) or hasattr(element, '__iter__'):
                for child in element:
                    collect(child)

        collect(page_layout)
        return runs
