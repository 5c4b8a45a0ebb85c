"""
Pay Data Service
Runs the pipeline for a batch of pay stubs: convert each PDF, then extract its
pay data with the selected strategy. Files are processed one at a time.
"""
import os
import logging
from typing import Dict, Iterable, List, Optional, Union

from config.extraction_config import EXTRACTION_CONFIG
from models import PayData
from services.extractors.base_extractor import DocumentContent
from services.field_extractors.base_field_extractor import BasePayDataExtractor, ExtractionStrategy
from services.field_extractors.extractor_factory import get_pay_data_extractor, parse_strategy
from services.pdf_processor import PDFProcessor
from services.rules.rule_loader import load_rules
from services.rules.schema import PayDataRules, RuleDocument

logger = logging.getLogger(__name__)

RulesInput = Union[str, RuleDocument, PayDataRules, None]


def resolve_rules(rules: RulesInput, config: Optional[Dict] = None) -> Optional[PayDataRules]:
    """Load (if needed) and resolve a rules specifier, document or resolved rule set"""
    if rules is None or isinstance(rules, PayDataRules):
        return rules
    if isinstance(rules, str):
        rules = load_rules(rules)
    return rules.resolve(config=config)


class PayDataService:
    """
    Loads rules and builds the strategy extractor once, then reuses both for
    every document
    """

    def __init__(self, strategy: Union[str, ExtractionStrategy, None] = None, rules: RulesInput = None,
                 pdf_backend: Optional[str] = None, config: Optional[Dict] = None):
        """
        Args:
            strategy: "regex" or "position-index" (configured default if not provided)
            rules: rules file path, inline JSON, RuleDocument or PayDataRules;
                the regex strategy falls back to the configured rules file
            pdf_backend: "pdfplumber" or "pdfminer" (configured default if not provided)
            config: configuration dict (uses EXTRACTION_CONFIG if not provided)
        """
        self.config = config or EXTRACTION_CONFIG
        self.strategy = parse_strategy(strategy or self.config["strategies"]["default"])
        self.pdf_backend = pdf_backend or self.config["pdf_backends"]["default"]
        self.pdf_processor = PDFProcessor(self.config)

        if self.strategy == ExtractionStrategy.REGEX and rules is None:
            rules = self.config["rules"]["default_path"]
            logger.info(f"No rules given, using default rules file: {rules}")

        self.rules = resolve_rules(rules, self.config) if self.strategy == ExtractionStrategy.REGEX else None
        self.extractor: BasePayDataExtractor = get_pay_data_extractor(self.strategy, self.rules, self.config)

    def extract_document(self, document: Union[DocumentContent, str]) -> PayData:
        """Extract pay data from an already converted document"""
        return self.extractor.extract(document)

    def extract_file(self, filepath: str) -> PayData:
        """
        Convert and extract one pay stub

        Failures are logged with the step that failed and re-raised unchanged.
        """
        try:
            self.pdf_processor.validate_file(filepath)
        except Exception as e:
            logger.error(f"Error extracting data from file. step:[read file] file:[{filepath}] reason: {e}")
            raise

        try:
            document = self.pdf_processor.process_pdf(filepath, self.pdf_backend)
            logger.debug(f"Converted PDF content from file: {filepath}")
        except Exception as e:
            logger.error(f"Error extracting data from file. step:[parse pdf] file:[{filepath}] reason: {e}")
            raise

        try:
            pay_data = self.extract_document(document)
        except Exception as e:
            logger.error(f"Error extracting data from file. step:[parse pay data] file:[{filepath}] reason: {e}")
            raise

        logger.info(f"Extracted pay data for file: {os.path.basename(filepath)}")
        return pay_data

    def extract_files(self, files: Iterable[str]) -> List[PayData]:
        """Extract every file in order; the first failure stops the batch"""
        files = list(files)
        logger.info(f"Extracting data from {len(files)} files")

        results = []
        for index, filepath in enumerate(files, 1):
            logger.info(f"Extracting data from file ({index} of {len(files)}): {filepath}")
            results.append(self.extract_file(filepath))
        return results
