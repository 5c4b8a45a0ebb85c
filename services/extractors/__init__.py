"""
PDF Extractors Package
"""
from .base_extractor import (
    BasePDFExtractor,
    DocumentContent,
    DocumentPage,
    PageIndex,
    PositionedTextElement,
    build_page_index,
)

__all__ = [
    'BasePDFExtractor',
    'DocumentContent',
    'DocumentPage',
    'PageIndex',
    'PositionedTextElement',
    'build_page_index',
]
