"""Calendar period labels and reporting frequencies.

A period label is one of ``"YYYY"`` (year), ``"YYYY-QN"`` (quarter) or
``"YYYY-MM"`` (month). Labels are only comparable after parsing into a
chronological index; plain string comparison mixes frequencies.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from budgetnorm.domain.models.base import ValueObject


class Frequency(str, Enum):
    """Reporting frequency of budget periods."""

    MONTH = "MONTH"
    QUARTER = "QUARTER"
    YEAR = "YEAR"


class PeriodInterval(ValueObject):
    """Inclusive interval between two period labels."""

    start: str = Field(..., description="First period label (YYYY, YYYY-MM or YYYY-QN)")
    end: str = Field(..., description="Last period label (YYYY, YYYY-MM or YYYY-QN)")


class PeriodSelection(ValueObject):
    """Either an interval or a list of discrete period labels."""

    interval: PeriodInterval | None = Field(default=None, description="Contiguous range")
    dates: list[str] | None = Field(default=None, description="Discrete period labels")


class ReportPeriod(ValueObject):
    """Reporting frequency plus the selected periods."""

    type: Frequency = Field(default=Frequency.YEAR, description="Reporting frequency")
    selection: PeriodSelection = Field(default_factory=PeriodSelection)


class YearRange(ValueObject):
    start_year: int
    end_year: int


def generate_period_labels(
    start_year: int, end_year: int, frequency: Frequency = Frequency.YEAR
) -> list[str]:
    """Enumerate every period label in ``[start_year, end_year]`` in chronological order.

    Args:
        start_year: First year (inclusive)
        end_year: Last year (inclusive)
        frequency: Target frequency for the labels

    Returns:
        Labels such as ``["2020", "2021"]``, ``["2020-Q1", ...]`` or ``["2020-01", ...]``
    """
    labels: list[str] = []
    for year in range(start_year, end_year + 1):
        if frequency == Frequency.MONTH:
            labels.extend(f"{year}-{month:02d}" for month in range(1, 13))
        elif frequency == Frequency.QUARTER:
            labels.extend(f"{year}-Q{quarter}" for quarter in range(1, 5))
        else:
            labels.append(str(year))
    return labels


def extract_year_from_label(label: str) -> int | None:
    """Return the year of a period label, or None when the first four chars are not digits."""
    if len(label) < 4:
        return None
    year_part = label[:4]
    if not year_part.isdigit():
        return None
    return int(year_part)


def parse_month_label(label: str) -> tuple[int, int] | None:
    """Parse ``YYYY-MM`` into ``(year, month)``."""
    if len(label) != 7 or label[4] != "-":
        return None
    year_part, month_part = label[:4], label[5:7]
    if not (year_part.isdigit() and month_part.isdigit()):
        return None
    month = int(month_part)
    if month < 1 or month > 12:
        return None
    return int(year_part), month


def parse_quarter_label(label: str) -> tuple[int, int] | None:
    """Parse ``YYYY-QN`` into ``(year, quarter)``."""
    if len(label) != 7 or label[4] != "-" or label[5] != "Q":
        return None
    year_part, quarter_part = label[:4], label[6]
    if not (year_part.isdigit() and quarter_part.isdigit()):
        return None
    quarter = int(quarter_part)
    if quarter < 1 or quarter > 4:
        return None
    return int(year_part), quarter


def parse_year_label(label: str) -> int | None:
    if len(label) != 4 or not label.isdigit():
        return None
    return int(label)


def period_index(label: str, frequency: Frequency) -> int | None:
    """Chronological index of a label at the given frequency.

    ``year*12+month`` for months, ``year*4+quarter`` for quarters and ``year``
    for years. Returns None when the label does not match the frequency.
    """
    if frequency == Frequency.MONTH:
        month = parse_month_label(label)
        return None if month is None else month[0] * 12 + month[1]
    if frequency == Frequency.QUARTER:
        quarter = parse_quarter_label(label)
        return None if quarter is None else quarter[0] * 4 + quarter[1]
    return parse_year_label(label)


def extract_year_range_from_selection(
    selection: PeriodSelection, fallback_year: int | None = None
) -> YearRange:
    """Derive the year range covered by a period selection.

    Unparseable bounds fall back to ``fallback_year`` (current year by default).
    """
    default_year = fallback_year if fallback_year is not None else datetime.now().year
    start_year = end_year = default_year

    if selection.interval is not None:
        parsed_start = extract_year_from_label(selection.interval.start)
        parsed_end = extract_year_from_label(selection.interval.end)
        if parsed_start is not None:
            start_year = parsed_start
        if parsed_end is not None:
            end_year = parsed_end
    elif selection.dates:
        years = [y for y in (extract_year_from_label(d) for d in selection.dates) if y is not None]
        if years:
            start_year, end_year = min(years), max(years)

    return YearRange(start_year=start_year, end_year=end_year)
