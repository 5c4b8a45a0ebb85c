"""
Marker Substitution
Resolves {{name}} placeholders in a rules document from its variables
"""
import copy
import logging
import re
from typing import Any, Dict, Optional, Tuple

from services.rules.pattern_compiler import compile_pattern

logger = logging.getLogger(__name__)

MARKER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][\w.-]*)\s*\}\}")


def substitute_markers(value: Any, variables: Dict[str, Any]) -> Any:
    """
    Replace {{token}} in every string leaf of value

    Only string variables are substituted; tokens naming a missing or non-string
    variable are left verbatim. Replacement text is not scanned again.
    """
    if isinstance(value, str):
        def replace(match):
            replacement = variables.get(match.group(1))
            if isinstance(replacement, str):
                return replacement
            return match.group(0)

        return MARKER_PATTERN.sub(replace, value)

    if isinstance(value, list):
        return [substitute_markers(item, variables) for item in value]

    if isinstance(value, dict):
        return {key: substitute_markers(item, variables) for key, item in value.items()}

    return value


def resolve_markers(
    variables: Dict[str, Any],
    rules: Any,
    separator: Optional[str] = None,
) -> Tuple[Dict[str, str], Any]:
    """
    Resolve variables into themselves, flatten them, then substitute into rules

    Variables are resolved in declaration order in a single pass: a variable sees
    the already-resolved value of any variable declared before it, and the raw
    value of any declared after it.

    Args:
        variables: name -> string or pattern tree
        rules: nested rules structure
        separator: regex source for line-separator joins

    Returns:
        (flat variable map, rules with markers substituted)
    """
    working = copy.deepcopy(variables or {})

    # Step 1: variables into themselves
    for name in list(working):
        working[name] = substitute_markers(working[name], working)

    # Step 2: pattern trees become regex strings
    flat: Dict[str, str] = {}
    for name, value in working.items():
        flat[name] = value if isinstance(value, str) else compile_pattern(value, separator=separator)

    # Step 3: flat variables into the rules
    resolved = substitute_markers(copy.deepcopy(rules), flat)

    leftover = sorted(set(_find_markers(resolved)))
    if leftover:
        logger.debug(f"Unresolved rule markers left verbatim: {leftover}")

    return flat, resolved


def _find_markers(value: Any):
    if isinstance(value, str):
        for match in MARKER_PATTERN.finditer(value):
            yield match.group(1)
    elif isinstance(value, list):
        for item in value:
            yield from _find_markers(item)
    elif isinstance(value, dict):
        for item in value.values():
            yield from _find_markers(item)
