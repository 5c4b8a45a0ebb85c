"""
Regex pay data extraction
Each section is isolated as a table window between two header patterns, then
its fields are read from named capture groups
"""
import logging
import re
from functools import lru_cache
from typing import Dict, Optional, Pattern, Union

from models import PayData
from services.errors import FieldNotFound, PatternConfigError, RuleInputMissing, RuleSchemaError, TableNotFound
from services.extractors.base_extractor import DocumentContent
from services.field_extractors.base_field_extractor import BasePayDataExtractor, ExtractionStrategy
from services.rules.pattern_compiler import REGEX_ANY_TEXT, JoinType, PatternGroup, compile_pattern
from services.rules.schema import FieldRule, PayDataRules

logger = logging.getLogger(__name__)

# Case-insensitive; "." spans lines; ^/$ anchor at line boundaries
RULE_REGEX_FLAGS = re.IGNORECASE | re.DOTALL | re.MULTILINE

# "(?<name>" named groups written for other regex dialects; lookbehinds are left alone
FOREIGN_NAMED_GROUP = re.compile(r"\(\?<(?=[A-Za-z_])")


def normalize_group_syntax(pattern: str) -> str:
    """Rewrite (?<name>...) groups to Python's (?P<name>...)"""
    return FOREIGN_NAMED_GROUP.sub("(?P<", pattern)


@lru_cache(maxsize=512)
def compile_rule_regex(pattern: str) -> Pattern:
    """
    Compile rule regex source with the rule flags

    Raises:
        PatternConfigError: if the source is not a valid regular expression
    """
    try:
        return re.compile(normalize_group_syntax(pattern), RULE_REGEX_FLAGS)
    except re.error as e:
        raise PatternConfigError(pattern, f"invalid regular expression ({e})")


def build_window_pattern(document_start, table_header, next_table_header, separator: Optional[str] = None) -> str:
    """Regex source capturing one section's table window"""
    header = compile_pattern(table_header, separator=separator)
    next_header = compile_pattern(next_table_header, separator=separator)
    window = PatternGroup(
        values=(
            compile_pattern(document_start, separator=separator),
            REGEX_ANY_TEXT,
            "(?P<table>",
            ("(?P<table_header>", header, ")"),
            ("(?P<desired_values>", ".*", ")"),
            ")",
            ("(?P<next_table_header>", next_header, ")"),
        ),
        join=JoinType.NONE,
    )
    return compile_pattern(window, separator=separator)


def find_table_window(content: str, document_start, table_header, next_table_header,
                      separator: Optional[str] = None) -> str:
    """
    Isolate the text of one section

    The window starts at the section's header and stops right before the next
    section's header. Everything before the document start marker is ignored.

    Args:
        content: delimited document text
        document_start: pattern marking the start of valid content
        table_header: pattern of the section's header line
        next_table_header: pattern of the following section's header line
        separator: regex source for line-separator joins

    Returns:
        Window text

    Raises:
        TableNotFound: if the header, next header or start marker is missing
    """
    pattern = build_window_pattern(document_start, table_header, next_table_header, separator)
    match = compile_rule_regex(pattern).search(content)

    if match is None or match.group("table") is None:
        raise TableNotFound(
            compile_pattern(table_header, separator=separator),
            content,
            compile_pattern(next_table_header, separator=separator),
        )

    return match.group("table")


def extract_field(window: str, field_rule: FieldRule, shared_pattern=None,
                  field_name: str = "", separator: Optional[str] = None) -> str:
    """
    Read one field from a table window

    Lookup order: primary group, alternates in order, default value, then ""
    for optional fields. Trim is applied to whatever value was resolved.

    Raises:
        FieldNotFound: the field is required, nothing matched and there is no default
    """
    node = field_rule.pattern if field_rule.pattern is not None else shared_pattern
    pattern = compile_pattern(node, separator=separator) if node is not None else ""
    match = compile_rule_regex(pattern).search(window)

    value = None
    if match is not None:
        groups = match.groupdict()
        for group in field_rule.groups:
            if groups.get(group) is not None:
                value = groups[group]
                logger.debug(f"Field '{field_name or field_rule.group}' matched group '{group}'")
                break

    if value is None:
        if field_rule.default_value is not None:
            value = field_rule.default_value
        elif not field_rule.is_required:
            value = ""
        else:
            raise FieldNotFound(field_rule.group, pattern, window, field_name)

    return value.strip() if field_rule.trim else value


class RegexPayDataExtractor(BasePayDataExtractor):
    """
    Extracts pay data from delimited text using a resolved rule set
    Sections run in a fixed order and the first failure aborts the document
    """

    strategy = ExtractionStrategy.REGEX

    def __init__(self, rules: PayDataRules, config: Optional[Dict] = None, separator: Optional[str] = None):
        super().__init__(config)
        if rules is None:
            raise RuleInputMissing(rules)
        self.rules = rules
        self.separator = separator
        self._check_patterns()

    def _check_patterns(self):
        """Compile every window and field regex up front so bad rules fail at load time"""
        for name, section in self.rules.sections():
            try:
                compile_rule_regex(build_window_pattern(
                    self.rules.document_start, section.table_header, section.next_table_header, self.separator
                ))
            except PatternConfigError as e:
                raise RuleSchemaError(str(e), location=f"rules.{name}")

            for field_name, field_rule in section.find.items():
                node = field_rule.pattern if field_rule.pattern is not None else section.find_pattern
                try:
                    compiled = compile_rule_regex(compile_pattern(node, separator=self.separator))
                except PatternConfigError as e:
                    raise RuleSchemaError(str(e), location=f"rules.{name}.find.{field_name}")

                missing = [g for g in field_rule.groups if g not in compiled.groupindex]
                if missing:
                    logger.warning(f"Rule {name}.{field_name}: groups {missing} never appear in its pattern")

    def extract(self, document: Union[DocumentContent, str]) -> PayData:
        """
        Extract pay data from converted document text

        Args:
            document: DocumentContent or its delimited text

        Returns:
            PayData record
        """
        content = document.text if isinstance(document, DocumentContent) else document
        record = {}

        for name, section in self.rules.sections():
            logger.debug(f"Extracting section '{name}'")
            window = find_table_window(
                content,
                self.rules.document_start,
                section.table_header,
                section.next_table_header,
                self.separator,
            )

            record[name] = {
                field_name: extract_field(window, field_rule, section.find_pattern, field_name, self.separator)
                for field_name, field_rule in section.find.items()
            }

        return PayData.model_validate(record)
