"""The fixed enumeration of US states (plus DC) and lenient lookup."""

from __future__ import annotations

import re
from typing import Final

US_STATES: Final[tuple[str, ...]] = (
    "Alabama",
    "Alaska",
    "Arizona",
    "Arkansas",
    "California",
    "Colorado",
    "Connecticut",
    "Delaware",
    "Florida",
    "Georgia",
    "Hawaii",
    "Idaho",
    "Illinois",
    "Indiana",
    "Iowa",
    "Kansas",
    "Kentucky",
    "Louisiana",
    "Maine",
    "Maryland",
    "Massachusetts",
    "Michigan",
    "Minnesota",
    "Mississippi",
    "Missouri",
    "Montana",
    "Nebraska",
    "Nevada",
    "New Hampshire",
    "New Jersey",
    "New Mexico",
    "New York",
    "North Carolina",
    "North Dakota",
    "Ohio",
    "Oklahoma",
    "Oregon",
    "Pennsylvania",
    "Rhode Island",
    "South Carolina",
    "South Dakota",
    "Tennessee",
    "Texas",
    "Utah",
    "Vermont",
    "Virginia",
    "Washington",
    "West Virginia",
    "Wisconsin",
    "Wyoming",
    "District of Columbia",
)

STATE_CODES: Final[dict[str, str]] = dict(
    zip(
        (
            "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
            "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
            "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
            "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
            "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
            "DC",
        ),
        US_STATES,
        strict=True,
    )
)  # fmt: skip

# postal codes resolve too; the canonical spelling is always the full name
STATE_LOOKUP: Final[dict[str, str]] = {
    **STATE_CODES,
    **{name.upper(): name for name in US_STATES},
}

_NON_LETTERS = re.compile(r"[^A-Za-z\s]")
_WHITESPACE = re.compile(r"\s+")


def lookup_state(value: str | None) -> str | None:
    """Return the canonical spelling for ``value`` or ``None`` if unrecognised.

    Matching ignores case, surrounding/duplicate whitespace and any character
    that is not a letter, so ``" washington."`` resolves to ``"Washington"``.
    Two-letter postal codes resolve as well: ``"il"`` gives ``"Illinois"``.
    """

    if value is None:
        return None
    cleaned = _WHITESPACE.sub(" ", _NON_LETTERS.sub("", value)).strip().upper()
    if not cleaned:
        return None
    return STATE_LOOKUP.get(cleaned)
