"""
Pay data extraction errors
Every failure carries a stable category and enough context (group, pattern,
searched text) to diagnose a rule mismatch from the message alone
"""
from typing import Optional

# Searched text is clipped in messages so a whole document doesn't flood the log
MAX_CONTEXT_CHARS = 2000


def _clip(text: Optional[str]) -> str:
    if text is None:
        return ""
    if len(text) <= MAX_CONTEXT_CHARS:
        return text
    return text[:MAX_CONTEXT_CHARS] + f"... [{len(text) - MAX_CONTEXT_CHARS} more chars]"


class PayDataError(Exception):
    """Base class for all pay data extraction failures"""
    category = "pay_data_error"


class RuleInputMissing(PayDataError):
    """No rule specifier was supplied"""
    category = "rule_input_missing"

    def __init__(self, specifier=None):
        self.specifier = specifier
        super().__init__(
            "No parsing rules provided. Pass inline rules or a path to a rules file. "
            f"received:[{specifier!r}]"
        )


class RuleReadError(PayDataError):
    """Rule specifier names an existing file that could not be read"""
    category = "rule_read_error"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to read rules file. path:[{path}] reason: {reason}")


class RuleParseError(PayDataError):
    """Rule payload is not well-formed JSON"""
    category = "rule_parse_error"

    def __init__(self, reason: str, payload: str):
        self.reason = reason
        self.payload = payload
        super().__init__(f"Unable to parse rules. reason: {reason} payload:[{_clip(payload)}]")


class RuleSchemaError(PayDataError):
    """Rule payload parsed but does not describe a valid rule document"""
    category = "rule_schema_error"

    def __init__(self, reason: str, location: str = ""):
        self.reason = reason
        self.location = location
        where = f" location:[{location}]" if location else ""
        super().__init__(f"Invalid rules document.{where} reason: {reason}")


class PatternConfigError(PayDataError):
    """A pattern node is neither a string, a list, nor a well-formed composite"""
    category = "pattern_config_error"

    def __init__(self, node, reason: str = "don't know how to handle it"):
        self.node = node
        super().__init__(f"Invalid pattern format, {reason}. pattern:[{node!r}]")


class TableNotFound(PayDataError):
    """A section window could not be located in the document text"""
    category = "table_not_found"

    def __init__(self, table_header: str, content: str, next_table_header: str = ""):
        self.table_header = table_header
        self.next_table_header = next_table_header
        self.content = content
        super().__init__(
            f"Unable to extract pay data. tableHeader:[{table_header}] "
            f"nextTableHeader:[{next_table_header}] content:[{_clip(content)}]"
        )


class FieldNotFound(PayDataError):
    """A required field matched no group and has no default"""
    category = "field_not_found"

    def __init__(self, group: str, pattern: str, content: str, field_name: str = ""):
        self.group = group
        self.pattern = pattern
        self.content = content
        self.field_name = field_name or group
        super().__init__(
            f"Unable to extract pay data. field:[{self.field_name}] group:[{group}] "
            f"regex:[{pattern}] content:[{_clip(content)}]"
        )


class ElementNotFound(PayDataError):
    """Position-index lookup found no anchor or no element at the offset"""
    category = "element_not_found"

    def __init__(self, page_number, text: str = "", item_number: Optional[int] = None, reason: str = ""):
        self.page_number = page_number
        self.text = text
        self.item_number = item_number
        self.reason = reason
        details = f"page:[{page_number}]"
        if text:
            details += f" text:[{text}]"
        if item_number is not None:
            details += f" item:[{item_number}]"
        if reason:
            details += f" reason: {reason}"
        super().__init__(f"Unable to find pay data extraction rule element. {details}")


class UnsupportedStrategy(PayDataError):
    """An unrecognized extraction strategy was requested"""
    category = "unsupported_strategy"

    def __init__(self, strategy, valid):
        self.strategy = strategy
        self.valid = list(valid)
        super().__init__(
            f"Unknown pay data parser type. provided:[{strategy}] valid:[{', '.join(self.valid)}]"
        )
