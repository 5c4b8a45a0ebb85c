"""
Base classes and interfaces for PDF conversion
A PDF becomes line-delimited text (for regex rules) and page-indexed
positioned text elements (for position-index rules)
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pdfplumber.utils import cluster_objects

from config.extraction_config import EXTRACTION_CONFIG

# (top, x0, width, height, text)
TextRun = Tuple[float, float, float, float, str]


@dataclass(frozen=True)
class PositionedTextElement:
    """A run of text on a page with its bounding box"""
    page_number: int
    item_number: int  # 1-based reading order within the page
    text: str
    x: float
    y: float
    w: float
    h: float


@dataclass
class DocumentPage:
    """Positioned elements of one page, keyed by item number"""
    page_number: int
    elements: Dict[int, PositionedTextElement] = field(default_factory=dict)

    def add_element(self, text: str, x: float, y: float, w: float, h: float) -> Optional[PositionedTextElement]:
        """
        Append an element in reading order

        Zero-height runs carry no visible text and are dropped without using an
        item number.
        """
        if not h:
            return None

        item_number = len(self.elements) + 1
        element = PositionedTextElement(
            page_number=self.page_number,
            item_number=item_number,
            text=text,
            x=x,
            y=y,
            w=w,
            h=h,
        )
        self.elements[item_number] = element
        return element

    def ordered(self) -> List[PositionedTextElement]:
        """Elements in item number order"""
        return [self.elements[n] for n in sorted(self.elements)]


PageIndex = Dict[int, DocumentPage]


def build_page_index(items: Iterable[Tuple[int, str, float, float, float, float]]) -> PageIndex:
    """
    Build a page index from (page_number, text, x, y, w, h) tuples in reading order
    """
    pages: PageIndex = {}
    for page_number, text, x, y, w, h in items:
        page = pages.setdefault(page_number, DocumentPage(page_number=page_number))
        page.add_element(text, x, y, w, h)
    return pages


@dataclass
class DocumentContent:
    """
    Result of converting a PDF: delimited text plus positioned elements
    """
    text: str
    pages: PageIndex = field(default_factory=dict)
    extractor_name: str = "unknown"


def join_lines(lines: List[List[str]], config: Optional[Dict] = None) -> str:
    """Join rows of text runs with the configured column and row delimiters"""
    layout = (config or EXTRACTION_CONFIG)["text_layout"]
    return layout["line_separator"].join(
        layout["line_element_separator"].join(runs) for runs in lines if runs
    )


class BasePDFExtractor(ABC):
    """
    Abstract base class for PDF conversion backends
    All backends (pdfplumber, pdfminer.six) implement this interface
    """

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or EXTRACTION_CONFIG
        self.y_tolerance = self.config["text_layout"]["y_tolerance"]

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this extractor"""
        pass

    @abstractmethod
    def extract(self, filepath: str) -> DocumentContent:
        """
        Convert a PDF file

        Args:
            filepath: Path to an existing PDF file

        Returns:
            DocumentContent with delimited text and positioned elements
        """
        pass

    def cluster_rows(self, runs: Sequence[TextRun]) -> List[List[TextRun]]:
        """
        Group runs into visual rows, top to bottom, each row left to right

        A run joins a row while its top is within y_tolerance of the previous
        run's top in that row.
        """
        rows = cluster_objects(list(runs), lambda run: run[0], self.y_tolerance)
        return [sorted(row, key=lambda run: run[1]) for row in rows]

    def order_runs(self, runs: Sequence[TextRun]) -> List[TextRun]:
        """Runs in reading order"""
        return [run for row in self.cluster_rows(runs) for run in row]

    def group_rows(self, runs: Sequence[TextRun]) -> List[List[str]]:
        """Row texts, top to bottom"""
        return [[run[-1] for run in row] for row in self.cluster_rows(runs)]

    def build_page(self, page_num: int, runs: Sequence[TextRun]) -> DocumentPage:
        """Page of positioned elements from runs already in reading order"""
        page = DocumentPage(page_number=page_num)
        for top, x0, width, height, text in runs:
            page.add_element(text, x0, top, width, height)
        return page

    def convert_page(self, page_num: int, runs: Sequence[TextRun]) -> Tuple[DocumentPage, str]:
        """Positioned elements and delimited text of one page"""
        ordered = self.order_runs(runs)
        return self.build_page(page_num, ordered), join_lines(self.group_rows(ordered), self.config)
