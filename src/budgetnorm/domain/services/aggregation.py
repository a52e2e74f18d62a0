"""Keyed accumulation of normalized classification rows."""

from __future__ import annotations

from collections.abc import Iterable

from budgetnorm.domain.models.classification import (
    AggregatedClassification,
    AggregateFilters,
    ClassificationPeriodRow,
)
from budgetnorm.domain.models.normalization import PeriodFactorMap


def aggregate_rows(
    rows: Iterable[ClassificationPeriodRow], multipliers: PeriodFactorMap | None
) -> list[AggregatedClassification]:
    """Normalize each row with its year's multiplier and sum by classification.

    Rows whose year has no multiplier are left unscaled. Output order follows
    first appearance of each (functional, economic) key; callers sort
    explicitly.
    """
    buckets: dict[tuple[str, str], AggregatedClassification] = {}

    for row in rows:
        amount = row.amount
        if multipliers is not None:
            multiplier = multipliers.get(str(row.year))
            if multiplier is not None:
                amount = amount * multiplier

        key = (row.functional_code, row.economic_code)
        existing = buckets.get(key)
        if existing is None:
            buckets[key] = AggregatedClassification(
                functional_code=row.functional_code,
                functional_name=row.functional_name,
                economic_code=row.economic_code,
                economic_name=row.economic_name,
                amount=amount,
                count=row.count,
            )
        else:
            existing.amount += amount
            existing.count += row.count

    return list(buckets.values())


def apply_aggregate_filters(
    items: Iterable[AggregatedClassification], filters: AggregateFilters | None
) -> list[AggregatedClassification]:
    if filters is None:
        return list(items)
    return [item for item in items if filters.accepts(item.amount)]


def sort_by_amount(items: Iterable[AggregatedClassification]) -> list[AggregatedClassification]:
    """Sort descending by normalized amount; ties keep their input order."""
    return sorted(items, key=lambda item: item.amount, reverse=True)
