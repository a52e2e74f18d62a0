"""Gap-filled factor maps from sparse yearly/quarterly/monthly datasets.

Resolution order for every period in the requested range, visited
chronologically:

1. exact match at the target frequency (monthly or quarterly dataset)
2. the yearly value for the period's year
3. carry-forward of the most recently resolved value

CPI and exchange rates do not reset between observations, so carrying the
last known value forward is closer to ground truth than defaulting to 1.
When nothing resolves at the start of the range, the carry-forward state is
seeded with the latest dataset entry strictly before ``start_year``. Periods
that still have no value are left out of the map.

Example:
    ```python
    datasets = FactorDatasets(
        yearly={"2023": Decimal("1.1"), "2024": Decimal("1.0")},
        monthly={"2024-01": Decimal("1.02"), "2024-02": Decimal("1.01")},
    )
    factors = generate_factor_map(Frequency.MONTH, 2023, 2024, datasets)
    # 2023-01 .. 2023-12 -> 1.1 (yearly fallback)
    # 2024-01 -> 1.02, 2024-02 -> 1.01 (monthly)
    # 2024-03 .. 2024-12 -> 1.0 (yearly fallback for 2024)
    ```
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal

import structlog

from budgetnorm.domain.models.datasets import DatasetPoint
from budgetnorm.domain.models.normalization import FactorDatasets, FactorMap
from budgetnorm.domain.models.periods import (
    Frequency,
    extract_year_from_label,
    generate_period_labels,
    period_index,
)

logger = structlog.get_logger(__name__)


def _range_start_index(start_year: int, frequency: Frequency) -> int:
    if frequency == Frequency.MONTH:
        return start_year * 12 + 1
    if frequency == Frequency.QUARTER:
        return start_year * 4 + 1
    return start_year


def find_latest_value_before(
    factors: Mapping[str, Decimal], start_year: int, frequency: Frequency
) -> Decimal | None:
    """Latest value whose period lies strictly before ``start_year``.

    Scans the whole mapping and compares chronological indices, so neither
    insertion order nor label string order matters. Labels that do not parse
    at ``frequency`` are ignored.
    """
    boundary = _range_start_index(start_year, frequency)
    latest_index: int | None = None
    latest_value: Decimal | None = None

    for label, value in factors.items():
        index = period_index(label, frequency)
        if index is None or index >= boundary:
            continue
        if latest_index is None or index > latest_index:
            latest_index = index
            latest_value = value

    return latest_value


class FactorMapGenerator:
    """Builds complete per-period factor maps at a target frequency."""

    def generate(
        self,
        frequency: Frequency,
        start_year: int,
        end_year: int,
        datasets: FactorDatasets,
    ) -> FactorMap:
        """Generate a gap-filled factor map for ``[start_year, end_year]``.

        Args:
            frequency: Target reporting frequency
            start_year: First year (inclusive)
            end_year: Last year (inclusive)
            datasets: Sparse source data for one dimension

        Returns:
            Mapping of period label to factor, in chronological insertion order.
            Periods with no resolvable value are omitted.
        """
        finer = self._finer_dataset(frequency, datasets)
        previous = self._seed(frequency, start_year, datasets, finer)

        result: FactorMap = {}
        for label in generate_period_labels(start_year, end_year, frequency):
            value = finer.get(label) if finer is not None else None
            if value is None:
                year = extract_year_from_label(label)
                value = datasets.yearly.get(str(year))
            if value is None:
                value = previous
            if value is not None:
                result[label] = value
                previous = value

        logger.debug(
            "Generated factor map",
            frequency=frequency.value,
            start_year=start_year,
            end_year=end_year,
            periods=len(result),
        )
        return result

    @staticmethod
    def _finer_dataset(frequency: Frequency, datasets: FactorDatasets) -> FactorMap | None:
        if frequency == Frequency.MONTH:
            return datasets.monthly
        if frequency == Frequency.QUARTER:
            return datasets.quarterly
        return None

    @staticmethod
    def _seed(
        frequency: Frequency,
        start_year: int,
        datasets: FactorDatasets,
        finer: FactorMap | None,
    ) -> Decimal | None:
        seed: Decimal | None = None
        if finer is not None:
            seed = find_latest_value_before(finer, start_year, frequency)
        if seed is None:
            seed = find_latest_value_before(datasets.yearly, start_year, Frequency.YEAR)
        return seed


def generate_factor_map(
    frequency: Frequency, start_year: int, end_year: int, datasets: FactorDatasets
) -> FactorMap:
    return FactorMapGenerator().generate(frequency, start_year, end_year, datasets)


def dataset_to_factor_map(points: Iterable[DatasetPoint]) -> FactorMap:
    """Key dataset points by their x label (later duplicates win)."""
    return {point.x: point.y for point in points}


def create_factor_datasets(
    yearly: Iterable[DatasetPoint],
    quarterly: Iterable[DatasetPoint] | None = None,
    monthly: Iterable[DatasetPoint] | None = None,
) -> FactorDatasets:
    return FactorDatasets(
        yearly=dataset_to_factor_map(yearly),
        quarterly=dataset_to_factor_map(quarterly) if quarterly is not None else None,
        monthly=dataset_to_factor_map(monthly) if monthly is not None else None,
    )


def get_factor_or_default(
    factors: Mapping[str, Decimal], key: str, default: Decimal = Decimal(1)
) -> Decimal:
    value = factors.get(key)
    return default if value is None else value
