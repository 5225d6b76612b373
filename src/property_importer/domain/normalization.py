"""Deterministic cleaning of raw spreadsheet cell text into canonical field values.

Every cleaner is total: blank input (``None``, empty or whitespace-only) and
input that cleans down to nothing both yield ``None``. Every cleaner is also
idempotent, ``clean(clean(value)) == clean(value)``, so values that were
already normalised (for example parsed fields read back from storage) pass
through unchanged.
"""

from __future__ import annotations

import re
from typing import Final

_WHITESPACE: Final = re.compile(r"\s+")
# a trailing run of punctuation (and any spaces mixed into it)
_TRAILING_PUNCTUATION: Final = re.compile(r"[.,;:][\s.,;:]*$")
_PUNCTUATION: Final = re.compile(r"[.,;:]")
_BUILDING_SUFFIX: Final = re.compile(r"\s+(?:(?:apt|unit)(?![a-z])|#).*$", re.IGNORECASE)
_FLOAT_ARTIFACT: Final = re.compile(r"\.0+$")
_UNIT_DISALLOWED: Final = re.compile(r"[^A-Za-z0-9_#-]")
_UNIT_PREFIX: Final = re.compile(r"apartment|suite|unit|apt|#", re.IGNORECASE)
_HYPHEN_RUN: Final = re.compile(r"-{2,}")
_NON_DIGITS: Final = re.compile(r"\D")

ZIP_CODE_LENGTH: Final = 5


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _or_none(value: str) -> str | None:
    return value or None


def clean_text(value: str | None) -> str | None:
    """Trim, collapse internal whitespace and drop trailing punctuation."""

    if value is None or _blank(value):
        return None
    text = _WHITESPACE.sub(" ", value.strip())
    text = _TRAILING_PUNCTUATION.sub("", text).strip()
    return _or_none(text)


def clean_title(value: str | None) -> str | None:
    text = clean_text(value)
    if text is None:
        return None
    return text.title()


def clean_building_name(value: str | None) -> str | None:
    """Clean a building name and cut any ``Apt``/``Unit``/``#`` suffix.

    ``"Maple Court Apt 4"`` and ``"Maple Court, #4"`` both become ``"Maple Court"``.
    """

    text = clean_text(value)
    if text is None:
        return None
    text = _WHITESPACE.sub(" ", _PUNCTUATION.sub("", text)).strip()
    text = _BUILDING_SUFFIX.sub("", text).strip()
    return _or_none(text)


def clean_street_address(value: str | None) -> str | None:
    return clean_text(value)


def clean_city(value: str | None) -> str | None:
    return clean_title(value)


def clean_state(value: str | None) -> str | None:
    """Trim and title-case; membership is checked against ``US_STATES`` later."""

    if value is None or _blank(value):
        return None
    return value.strip().title()


def clean_unit_number(value: str | None) -> str | None:
    """Reduce a unit cell to its bare label.

    Spreadsheet float artefacts (``"12.0"``), unit prefixes (``"Apt"``,
    ``"Suite"``, ``"#"``...), punctuation, leading zeros and stray hyphens are
    removed: ``"Apt. 004"`` becomes ``"4"`` and ``"#12-B"`` stays ``"12-B"``.
    """

    if value is None or _blank(value):
        return None
    text = _FLOAT_ARTIFACT.sub("", value.strip())
    text = _UNIT_DISALLOWED.sub("", text)
    # removing one prefix can expose another ("uniunitt")
    while (stripped := _UNIT_PREFIX.sub("", text)) != text:
        text = stripped
    text = _HYPHEN_RUN.sub("-", text)
    text = text.lstrip("0-").rstrip("-")
    return _or_none(text)


def clean_zip_code(value: str | None) -> str | None:
    if value is None or _blank(value):
        return None
    text = _FLOAT_ARTIFACT.sub("", value.strip())
    text = _NON_DIGITS.sub("", text)[:ZIP_CODE_LENGTH]
    return _or_none(text)
