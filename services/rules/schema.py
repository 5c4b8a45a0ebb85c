"""
Rule document models
Rule files are validated into these models once, at load time
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from config.extraction_config import EXTRACTION_CONFIG
from services.errors import PatternConfigError, RuleSchemaError
from services.rules.markers import resolve_markers
from services.rules.pattern_compiler import compile_pattern, parse_pattern

SECTION_NAMES = ("check", "grossEarnings", "taxes", "deductions", "deposits")


def _to_pattern(value):
    if value is None:
        return None
    try:
        return parse_pattern(value)
    except PatternConfigError as e:
        raise ValueError(str(e))


class FieldRule(BaseModel):
    """How to read one field out of a section window"""
    model_config = ConfigDict(populate_by_name=True, frozen=True, arbitrary_types_allowed=True)

    group: str = Field(..., min_length=1, description="Primary named capture group")
    alternate_group: List[str] = Field(default_factory=list, alias="alternateGroup")
    pattern: Optional[Any] = Field(None, description="Overrides the section find_pattern")
    is_required: bool = Field(True, alias="isRequired")
    trim: bool = False
    default_value: Optional[str] = Field(None, alias="defaultValue")

    @field_validator("alternate_group", mode="before")
    @classmethod
    def _alternates_as_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("pattern", mode="before")
    @classmethod
    def _parse_pattern(cls, value):
        return _to_pattern(value)

    @property
    def groups(self) -> List[str]:
        """Primary group followed by alternates, in lookup order"""
        return [self.group, *self.alternate_group]


class SectionRule(BaseModel):
    """Window markers and field rules for one pay stub section"""
    model_config = ConfigDict(populate_by_name=True, frozen=True, arbitrary_types_allowed=True)

    table_header: Any = Field(..., alias="tableHeader")
    next_table_header: Any = Field(..., alias="nextTableHeader")
    find: Dict[str, FieldRule]
    find_pattern: Optional[Any] = None

    @field_validator("find", mode="before")
    @classmethod
    def _expand_shorthand(cls, value):
        if isinstance(value, dict):
            return {
                name: {"group": rule} if isinstance(rule, str) else rule
                for name, rule in value.items()
            }
        return value

    @field_validator("table_header", "next_table_header", "find_pattern", mode="before")
    @classmethod
    def _parse_patterns(cls, value):
        return _to_pattern(value)

    @model_validator(mode="after")
    def _check_section(self):
        for name in ("table_header", "next_table_header"):
            value = getattr(self, name)
            if value is None or not compile_pattern(value):
                raise ValueError(f"'{name}' must compile to a non-empty pattern")

        if not self.find:
            raise ValueError("'find' must name at least one field")

        if self.find_pattern is None:
            missing = [name for name, rule in self.find.items() if rule.pattern is None]
            if missing:
                raise ValueError(f"fields {missing} have no pattern and the section has no find_pattern")
        return self


class PayDataRules(BaseModel):
    """Fully resolved rules for the five pay stub sections"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    document_start: str = Field(..., min_length=1)
    check: SectionRule
    gross_earnings: SectionRule = Field(..., alias="grossEarnings")
    taxes: SectionRule
    deductions: SectionRule
    deposits: SectionRule

    def sections(self):
        """(name, rule) pairs in extraction order"""
        return [
            ("check", self.check),
            ("grossEarnings", self.gross_earnings),
            ("taxes", self.taxes),
            ("deductions", self.deductions),
            ("deposits", self.deposits),
        ]


class RuleDocument(BaseModel):
    """Parsed rules file: reusable variables plus per-section rules"""
    model_config = ConfigDict(frozen=True)

    variables: Dict[str, Union[str, list, dict]] = Field(default_factory=dict)
    rules: Dict[str, Any]

    @field_validator("rules")
    @classmethod
    def _check_sections(cls, value):
        missing = [name for name in SECTION_NAMES if name not in value]
        if missing:
            raise ValueError(f"missing sections {missing}")
        return value

    def resolve(self, separator: Optional[str] = None, config: Optional[Dict] = None) -> PayDataRules:
        """
        Substitute variables into the rules and validate every section

        Args:
            separator: regex source for line-separator joins
            config: configuration dict (uses EXTRACTION_CONFIG if not provided)

        Returns:
            PayDataRules

        Raises:
            RuleSchemaError: if a section, field or pattern is malformed
        """
        config = config or EXTRACTION_CONFIG
        start_name = config["rules"]["document_start_variable"]

        try:
            flat, resolved = resolve_markers(dict(self.variables), dict(self.rules), separator)
        except PatternConfigError as e:
            raise RuleSchemaError(str(e), location="variables")

        if not flat.get(start_name):
            raise RuleSchemaError(
                f"variable '{start_name}' (document start marker) is required", location="variables"
            )

        try:
            return PayDataRules.model_validate({"document_start": flat[start_name], **resolved})
        except ValidationError as e:
            raise RuleSchemaError(describe_validation_error(e), location="rules")


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)
