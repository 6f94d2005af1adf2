"""Shared utilities for the darts scoring core."""

from __future__ import annotations

import math

__all__ = [
    "fmt_average",
    "fmt_count",
    "fmt_percentage",
]


def fmt_average(value: float) -> str:
    """Format an average with two decimals."""

    return f"{value:.2f}"


def fmt_percentage(value: float) -> str:
    """Format a percentage with one decimal and a percent sign."""

    return f"{value:.1f}%"


def fmt_count(value: float) -> str:
    """Format a tally, dropping any fractional part."""

    return str(math.floor(value))

