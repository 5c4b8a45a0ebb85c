"""
Pattern Compiler
Turns a tree of regex fragments (strings, lists, join composites) into a single
regular-expression source string
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from config.extraction_config import EXTRACTION_CONFIG
from services.errors import PatternConfigError

REGEX_ANY_TEXT = ".*?"

# re.escape also escapes spaces; only these need it
REGEX_METACHARACTERS = re.compile(r"([.^$*+?{}\[\]\\|()])")


class JoinType(str, Enum):
    """How compiled child fragments are joined into their parent"""
    NONE = "none"
    SPACE = "space"
    ANY_TEXT = "any-text"
    LINE_SEPARATOR = "line-separator"
    LITERAL = "literal"


# Spellings accepted in rule files
JOIN_ALIASES = {
    "none": JoinType.NONE,
    "space": JoinType.SPACE,
    "any-text": JoinType.ANY_TEXT,
    "any": JoinType.ANY_TEXT,
    "line-separator": JoinType.LINE_SEPARATOR,
    "line-element": JoinType.LINE_SEPARATOR,
    "literal": JoinType.LITERAL,
}


@dataclass(frozen=True)
class PatternGroup:
    """A list of fragments with its own join rule"""
    values: Tuple["PatternNode", ...]
    join: Optional[JoinType] = None
    join_string: Optional[str] = None


PatternNode = Union[str, Tuple[Any, ...], PatternGroup]


def default_separator() -> str:
    """Regex form of the configured column delimiter (" | " -> " \\| ")"""
    return REGEX_METACHARACTERS.sub(r"\\\1", EXTRACTION_CONFIG["text_layout"]["line_element_separator"])


def parse_join(value) -> JoinType:
    if isinstance(value, JoinType):
        return value
    if isinstance(value, str) and value.lower() in JOIN_ALIASES:
        return JOIN_ALIASES[value.lower()]
    raise PatternConfigError(value, f"unknown join type, expected one of {sorted(JOIN_ALIASES)}")


def parse_pattern(raw: Any) -> PatternNode:
    """
    Convert a JSON-shaped pattern into an immutable PatternNode

    Args:
        raw: string, list, or {"join"|"join_type"|"join_string", "values"} mapping

    Returns:
        str, tuple of nodes, or PatternGroup

    Raises:
        PatternConfigError: for any other shape
    """
    if isinstance(raw, str):
        return raw

    if isinstance(raw, PatternGroup):
        return raw

    if isinstance(raw, (list, tuple)):
        return tuple(parse_pattern(item) for item in raw)

    if isinstance(raw, dict):
        values = raw.get("values")
        if not isinstance(values, (list, tuple)):
            raise PatternConfigError(raw, "composite pattern needs a 'values' list")

        unknown = set(raw) - {"values", "join", "join_type", "join_string"}
        if unknown:
            raise PatternConfigError(raw, f"unexpected keys {sorted(unknown)}")

        join_string = raw.get("join_string")
        if join_string is not None and not isinstance(join_string, str):
            raise PatternConfigError(raw, "'join_string' must be a string")

        join_value = raw.get("join", raw.get("join_type"))
        if join_string is not None:
            join = JoinType.LITERAL
        elif join_value is not None:
            join = parse_join(join_value)
            if join == JoinType.LITERAL:
                raise PatternConfigError(raw, "literal join needs a 'join_string'")
        else:
            join = None

        return PatternGroup(
            values=tuple(parse_pattern(item) for item in values),
            join=join,
            join_string=join_string,
        )

    raise PatternConfigError(raw)


def _joiner(join: JoinType, separator: str, join_string: Optional[str] = None) -> str:
    if join == JoinType.LITERAL:
        return join_string or ""
    if join == JoinType.ANY_TEXT:
        return REGEX_ANY_TEXT
    if join == JoinType.SPACE:
        return " "
    if join == JoinType.NONE:
        return ""
    return separator


def compile_pattern(
    node: Any,
    join: JoinType = JoinType.LINE_SEPARATOR,
    separator: Optional[str] = None,
    join_string: Optional[str] = None,
) -> str:
    """
    Compile a pattern tree into regex source

    Strings are returned unchanged (never escaped). Lists inherit the join of the
    nearest enclosing node; composites use their own join (or the enclosing one
    when they don't declare it).

    Args:
        node: PatternNode, or its JSON shape
        join: join inherited from the enclosing node
        separator: regex source for the line-separator join
        join_string: literal joiner inherited with a LITERAL join

    Returns:
        Regular expression source string
    """
    if separator is None:
        separator = default_separator()

    if isinstance(node, str):
        return node

    if isinstance(node, dict):
        node = parse_pattern(node)

    if isinstance(node, PatternGroup):
        own_join = node.join or join
        own_string = node.join_string if node.join is not None else join_string
        return _join_children(node.values, own_join, separator, own_string)

    if isinstance(node, (list, tuple)):
        return _join_children(node, join, separator, join_string)

    raise PatternConfigError(node)


def _join_children(values, join: JoinType, separator: str, join_string: Optional[str]) -> str:
    compiled = [compile_pattern(child, join, separator, join_string) for child in values]
    return _joiner(join, separator, join_string).join(compiled)
