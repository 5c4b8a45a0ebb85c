"""
Pay stub file discovery
"""
import os
import re
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

# Single-letter regex flags accepted on the command line
REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def parse_regex_flags(flags: Optional[str]) -> int:
    """
    'im' -> re.IGNORECASE | re.MULTILINE

    Raises:
        ValueError: unknown flag letter
    """
    value = 0
    for letter in (flags or ""):
        if letter not in REGEX_FLAGS:
            raise ValueError(f"Unsupported regex flag: {letter}. Valid: {''.join(REGEX_FLAGS)}")
        value |= REGEX_FLAGS[letter]
    return value


def identify_pay_files(directory: str, file: Optional[str] = None,
                       pattern: Optional[str] = None, flags: Optional[str] = "") -> List[str]:
    """
    List the pay stub PDFs to process

    Args:
        directory: directory holding the pay stubs
        file: a single file name inside directory; skips the directory scan
        pattern: regex the full file path must contain a match for
        flags: regex flag letters for pattern (e.g. "im")

    Returns:
        File paths, sorted
    """
    if file:
        return [os.path.join(directory, file)]

    logger.info(f"Identifying files in directory: {directory}")

    files = sorted(
        os.path.join(directory, name)
        for name in os.listdir(directory)
        if os.path.isfile(os.path.join(directory, name))
        and os.path.splitext(name)[1].lower() == ".pdf"
    )

    if pattern:
        regex = re.compile(pattern, parse_regex_flags(flags))
        files = [path for path in files if regex.search(path)]

    logger.info(f"Found {len(files)} pay stub files")
    return files
