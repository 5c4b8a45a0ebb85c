"""
Pay data extraction strategy selection
"""
import logging
from typing import Dict, Optional, Union

from services.errors import RuleInputMissing, UnsupportedStrategy
from services.field_extractors.base_field_extractor import BasePayDataExtractor, ExtractionStrategy
from services.field_extractors.position_index_extractor import PositionIndexPayDataExtractor
from services.field_extractors.regex_extractor import RegexPayDataExtractor
from services.rules.schema import PayDataRules

logger = logging.getLogger(__name__)


def parse_strategy(strategy: Union[str, ExtractionStrategy]) -> ExtractionStrategy:
    """
    Raises:
        UnsupportedStrategy: strategy is not one of the ExtractionStrategy values
    """
    try:
        return ExtractionStrategy(strategy)
    except ValueError:
        raise UnsupportedStrategy(strategy, [s.value for s in ExtractionStrategy])


def get_pay_data_extractor(strategy: Union[str, ExtractionStrategy],
                           rules: Optional[PayDataRules] = None,
                           config: Optional[Dict] = None) -> BasePayDataExtractor:
    """
    Build the extractor for a strategy

    Args:
        strategy: "regex" or "position-index"
        rules: resolved rule set, required by the regex strategy
        config: configuration dict (uses EXTRACTION_CONFIG if not provided)

    Returns:
        BasePayDataExtractor implementation

    Raises:
        UnsupportedStrategy: unknown strategy
        RuleInputMissing: regex strategy without rules
    """
    selected = parse_strategy(strategy)
    logger.info(f"Using pay data extraction strategy: {selected.value}")

    if selected == ExtractionStrategy.REGEX:
        if rules is None:
            raise RuleInputMissing(rules)
        return RegexPayDataExtractor(rules, config=config)

    return PositionIndexPayDataExtractor(config=config)
