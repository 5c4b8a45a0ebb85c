"""
Base classes for pay data extraction strategies
Every strategy turns one converted document into a PayData record
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional

from config.extraction_config import EXTRACTION_CONFIG
from models import PayData
from services.extractors.base_extractor import DocumentContent


class ExtractionStrategy(str, Enum):
    """Selectable pay data extraction strategies"""
    REGEX = "regex"
    POSITION_INDEX = "position-index"


class BasePayDataExtractor(ABC):
    """
    Abstract base class for pay data extraction strategies
    Strategies are built once per run and reused for every document
    """

    strategy: ExtractionStrategy

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or EXTRACTION_CONFIG

    @abstractmethod
    def extract(self, document: DocumentContent) -> PayData:
        """
        Extract pay data from one converted document

        Args:
            document: delimited text and positioned elements of one PDF

        Returns:
            PayData record

        Raises:
            PayDataError: on the first section or field that cannot be resolved
        """
        pass
