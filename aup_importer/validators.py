"""Attribute value checks for the legacy project vocabulary.

Every tag attribute arrives as a raw string. The helpers here decide whether a
value is well formed and convert it to the type the entity expects. Parsing
helpers raise ``ValueError``; callers turn that into an
``InvalidAttributeError`` naming the tag and attribute.
"""
import math
import os
import re
from pathlib import Path
from typing import Iterable, Optional

DEFAULT_MAX_STRING_LENGTH = 4096

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

MIN_MAX_SAMPLES = 1024
MAX_MAX_SAMPLES = 64 * 1024 * 1024

_INT_RE = re.compile(r"^-?[0-9]+$")
_ALLOWED_CONTROLS = {"\t", "\n", "\r"}
_PATH_SEPARATORS = ("/", "\\")


def is_good_string(value: Optional[str], max_length: int = DEFAULT_MAX_STRING_LENGTH) -> bool:
    """
    Check that a string is safe to keep.

    Args:
        value: Raw attribute value
        max_length: Longest accepted string

    Returns:
        True if the value has no control characters and fits the length bound
    """
    if value is None or len(value) > max_length:
        return False
    for ch in value:
        if (ord(ch) < 0x20 and ch not in _ALLOWED_CONTROLS) or ord(ch) == 0x7F:
            return False
    return True


def is_good_file_string(value: Optional[str], max_length: int = DEFAULT_MAX_STRING_LENGTH) -> bool:
    """Good string that names a bare file (no directory part)."""
    if not is_good_string(value, max_length) or not value:
        return False
    return not any(sep in value for sep in _PATH_SEPARATORS)


def is_good_path_string(value: Optional[str], max_length: int = DEFAULT_MAX_STRING_LENGTH) -> bool:
    """Good string short enough to be a path."""
    return bool(value) and is_good_string(value, max_length)


def is_good_path_name(value: Optional[str], max_length: int = DEFAULT_MAX_STRING_LENGTH) -> bool:
    """Good path string naming an existing file."""
    return is_good_path_string(value, max_length) and os.path.isabs(value) and Path(value).is_file()


def is_good_file_name(value: Optional[str], directory: Optional[Path],
                      max_length: int = DEFAULT_MAX_STRING_LENGTH) -> bool:
    """Good file string naming an existing file inside ``directory``."""
    if directory is None or not is_good_file_string(value, max_length):
        return False
    return (Path(directory) / value).is_file()


def _is_good_integer(value: Optional[str], low: int, high: int) -> bool:
    if value is None or not _INT_RE.match(value):
        return False
    return low <= int(value) <= high


def is_good_int(value: Optional[str]) -> bool:
    """Decimal integer that fits in 32 bits."""
    return _is_good_integer(value, INT32_MIN, INT32_MAX)


def is_good_int64(value: Optional[str]) -> bool:
    """Decimal integer that fits in 64 bits."""
    return _is_good_integer(value, INT64_MIN, INT64_MAX)


def parse_int(value: str, allow_negative: bool = False) -> int:
    """Parse a 32-bit integer."""
    if not is_good_int(value):
        raise ValueError(f"not a 32-bit integer: {value!r}")
    result = int(value)
    if result < 0 and not allow_negative:
        raise ValueError(f"negative value: {value!r}")
    return result


def parse_count(value: str, positive: bool = False) -> int:
    """
    Parse a sample count or offset.

    Args:
        value: Raw attribute value
        positive: Require a strictly positive count

    Returns:
        Non-negative 64-bit integer
    """
    if not is_good_int64(value):
        raise ValueError(f"not a 64-bit integer: {value!r}")
    result = int(value)
    if result < 0 or (positive and result == 0):
        raise ValueError(f"count out of range: {value!r}")
    return result


def parse_bounded_count(value: str,
                        low: int = MIN_MAX_SAMPLES,
                        high: int = MAX_MAX_SAMPLES) -> int:
    """Parse a count that must also lie in ``[low, high]``."""
    result = parse_count(value)
    if result < low or result > high:
        raise ValueError(f"{result} outside [{low}, {high}]")
    return result


def parse_double(value: str, allow_negative: bool = False) -> float:
    """
    Parse a real number written with either '.' or ',' as decimal point.

    Raises:
        ValueError: If the value is malformed, not finite, or negative
            when negatives are not allowed
    """
    if value is None:
        raise ValueError("missing value")
    text = value.strip().replace(",", ".")
    result = float(text)
    if not math.isfinite(result):
        raise ValueError(f"not a finite number: {value!r}")
    if result < 0.0 and not allow_negative:
        raise ValueError(f"negative value: {value!r}")
    return result


def parse_flag(value: str, tokens: Iterable[str]) -> bool:
    """Map an enumerated token to a boolean; unknown tokens are False."""
    return value in set(tokens)


def parse_bool_int(value: str) -> bool:
    """Parse the 0/1 flags used by track attributes."""
    return parse_int(value, allow_negative=True) != 0
