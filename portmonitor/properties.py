"""
Reader for line-oriented ``key = value`` properties files.
"""
import logging
from typing import Dict, Iterable

from .errors import FileUnreadable

logger = logging.getLogger(__name__)


def parse_properties(lines: Iterable[str]) -> Dict[str, str]:
    """
    Parses properties lines into a dict.

    Blank lines, ``#`` comments and lines without ``=`` are ignored. The first
    ``=`` splits key from value and both sides are stripped. When a key
    repeats, the last occurrence wins.
    """
    properties = {}
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key:
            properties[key] = value.strip()
    return properties


def read_properties_file(filename: str) -> Dict[str, str]:
    if not filename:
        return {}

    try:
        with open(filename, "r", encoding="utf-8") as f:
            properties = parse_properties(f)
    except (OSError, UnicodeDecodeError) as e:
        raise FileUnreadable(filename, str(e)) from e

    logger.debug("Loaded %d properties from %s", len(properties), filename)
    return properties
