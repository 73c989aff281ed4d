"""Canonical amount brackets used on periodic transaction reports.

Disclosures report a bracket label rather than an exact figure. Labels are
matched exactly; anything else keeps its text and gets zero bounds, so a
new or malformed label never blocks a trade from being recorded.
"""

from __future__ import annotations

from typing import NamedTuple

OVER_MILLION_SENTINEL = 999_999_999


class AmountRange(NamedTuple):
    range: str
    min: int
    max: int


AMOUNT_BRACKETS: dict[str, tuple[int, int]] = {
    "$1,001 - $15,000": (1_001, 15_000),
    "$15,001 - $50,000": (15_001, 50_000),
    "$50,001 - $100,000": (50_001, 100_000),
    "$100,001 - $250,000": (100_001, 250_000),
    "$250,001 - $500,000": (250_001, 500_000),
    "$500,001 - $1,000,000": (500_001, 1_000_000),
    "Over $1,000,000": (1_000_001, OVER_MILLION_SENTINEL),
}


def parse_amount_range(label: str) -> AmountRange:
    low, high = AMOUNT_BRACKETS.get(label, (0, 0))
    return AmountRange(range=label, min=low, max=high)
