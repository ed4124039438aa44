"""
Custom metadata header normalization

Headers whose names carry the provider prefix (``x-emc-``) are folded into
the string to sign. Names are lower-cased, values of a repeated header are
flattened onto one line, and the result is sorted by name.
"""

import re
from typing import Dict, List

from .types import AtmosHeaders, CustomHeaderPairs, HeaderMultimap

TWO_SPACES = "  "
NEWLINE_PATTERN = re.compile(r"\r?\n")


def normalize_header_value(value: str) -> str:
    """
    Collapse a header value onto a single line.

    Each non-overlapping pair of spaces becomes one space, then newlines are
    deleted outright (not replaced by a space).

    Args:
        value: Raw header value

    Returns:
        str: Normalized value
    """
    value = value.replace(TWO_SPACES, " ")
    return NEWLINE_PATTERN.sub("", value)


def canonicalize_custom_headers(
    headers: HeaderMultimap,
    prefix: str = AtmosHeaders.CUSTOM_PREFIX
) -> CustomHeaderPairs:
    """
    Select, normalize and sort the custom metadata headers.

    Args:
        headers: Request headers
        prefix: Case-insensitive header name prefix to select

    Returns:
        list: ``(lower-cased name, flattened value)`` pairs sorted by name
    """
    wanted = prefix.lower()
    grouped: Dict[str, List[str]] = {}
    for name, value in headers.items():
        lowered = name.lower()
        if lowered.startswith(wanted):
            grouped.setdefault(lowered, []).append(normalize_header_value(value))

    return [(name, " ".join(grouped[name])) for name in sorted(grouped)]


def format_custom_headers(pairs: CustomHeaderPairs) -> str:
    """Join normalized headers as ``name:value`` lines separated by newlines."""
    return "\n".join(f"{name}:{value}" for name, value in pairs)
