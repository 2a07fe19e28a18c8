"""Country extraction from "<Disease> - <Country>" bulletin titles."""

import re

UNKNOWN_COUNTRY = "Unknown"
GLOBAL_COUNTRY = "Global"

_SEPARATOR = re.compile(r"[-–—]")
_SPACED_SEPARATOR = re.compile(r"[-–—]\s")

_QUALIFIERS = [
    re.compile(r"\s*\(update\)", re.IGNORECASE),
    re.compile(r"\s*\(situation update\)", re.IGNORECASE),
    re.compile(r"\s*update$", re.IGNORECASE),
]
_TRAILING_GLOBAL = re.compile(r"global$", re.IGNORECASE)


def _last_separator_end(title: str) -> int:
    """Index just past the separator that introduces the country, or -1."""
    spaced = list(_SPACED_SEPARATOR.finditer(title))
    if spaced:
        return spaced[-1].start() + 1

    bare = list(_SEPARATOR.finditer(title))
    if bare:
        return bare[-1].end()

    return -1


def extract_country(title: str) -> str:
    """
    Return the country a bulletin title refers to.

    The country follows the last dash-like separator. A separator followed by
    whitespace wins over a bare hyphen so hyphenated names survive
    ("MERS-CoV - Saudi Arabia", "Cholera - Guinea-Bissau").
    """
    start = _last_separator_end(title)
    if start < 0:
        return UNKNOWN_COUNTRY

    country = title[start:].strip()
    for qualifier in _QUALIFIERS:
        country = qualifier.sub("", country, count=1)
    country = _TRAILING_GLOBAL.sub(GLOBAL_COUNTRY, country).strip()

    return country or UNKNOWN_COUNTRY


def is_global_country(country: str) -> bool:
    """Whether the extracted country marks a non-country-specific bulletin."""
    return country in (GLOBAL_COUNTRY, "Global update")
