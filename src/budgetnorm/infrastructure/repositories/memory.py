"""In-memory repositories.

Back the CLI and the tests with plain lists of line items and administrative
units. ``InMemoryLineItemRepository`` implements both repository ports, so
either execution strategy can run against it.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Literal

import structlog
from pydantic import Field

from budgetnorm.domain.exceptions import DatabaseError
from budgetnorm.domain.models.base import ValueObject
from budgetnorm.domain.models.classification import (
    MAX_DB_ROWS,
    UNKNOWN_ECONOMIC_CODE,
    UNKNOWN_ECONOMIC_NAME,
    AggregateFilters,
    AnalyticsFilter,
    ClassificationPeriodResult,
    ClassificationPeriodRow,
    NormalizedAggregatedResult,
    PaginationParams,
)
from budgetnorm.domain.models.normalization import PeriodFactorMap
from budgetnorm.domain.models.periods import (
    PeriodSelection,
    YearRange,
    extract_year_from_label,
)
from budgetnorm.domain.models.population import EntityRecord, UatRecord
from budgetnorm.domain.ports.data_providers import PopulationRepository
from budgetnorm.domain.ports.repositories import NormalizedAggregateRepository
from budgetnorm.domain.services.aggregation import (
    aggregate_rows,
    apply_aggregate_filters,
    sort_by_amount,
)
from budgetnorm.domain.services.population import country_population, filtered_population

logger = structlog.get_logger(__name__)


class LineItemRecord(ValueObject):
    """One reported budget execution line item, denormalized with its entity."""

    entity_cui: str
    entity_type: str | None = None
    is_uat: bool = False
    uat_id: int | None = None
    county_code: str | None = None
    account_category: Literal["vn", "ch"] = "ch"
    functional_code: str
    functional_name: str
    economic_code: str | None = None
    economic_name: str | None = None
    year: int
    amount: Decimal = Field(..., description="Nominal RON amount")


def _selected_years(selection: PeriodSelection) -> tuple[int, int] | set[int] | None:
    if selection.interval is not None:
        start = extract_year_from_label(selection.interval.start)
        end = extract_year_from_label(selection.interval.end)
        if start is None or end is None:
            return None
        return (start, end)
    if selection.dates:
        return {y for y in (extract_year_from_label(d) for d in selection.dates) if y is not None}
    return None


def _matches_prefix(code: str | None, prefixes: list[str] | None) -> bool:
    if not prefixes:
        return True
    if code is None:
        return False
    return any(code.startswith(prefix) for prefix in prefixes)


def _matches(item: LineItemRecord, filter: AnalyticsFilter, years: object) -> bool:
    if item.account_category != filter.account_category:
        return False
    if isinstance(years, tuple) and not years[0] <= item.year <= years[1]:
        return False
    if isinstance(years, set) and item.year not in years:
        return False
    if not _matches_prefix(item.functional_code, filter.functional_prefixes):
        return False
    if not _matches_prefix(item.economic_code, filter.economic_prefixes):
        return False
    if filter.entity_cuis and item.entity_cui not in filter.entity_cuis:
        return False
    if filter.uat_ids and (item.uat_id is None or str(item.uat_id) not in filter.uat_ids):
        return False
    if filter.county_codes and item.county_code not in filter.county_codes:
        return False
    if filter.entity_types and item.entity_type not in filter.entity_types:
        return False
    if filter.is_uat is not None and item.is_uat != filter.is_uat:
        return False
    return True


class InMemoryLineItemRepository(NormalizedAggregateRepository):
    """Line item repository over a list of records."""

    def __init__(
        self, line_items: Iterable[LineItemRecord] = (), max_rows: int = MAX_DB_ROWS
    ) -> None:
        self._line_items = list(line_items)
        self._max_rows = max_rows

    def _group(self, filter: AnalyticsFilter) -> list[ClassificationPeriodRow]:
        years = _selected_years(filter.report_period.selection)
        groups: dict[tuple[str, str, int], ClassificationPeriodRow] = {}

        for item in self._line_items:
            if not _matches(item, filter, years):
                continue
            economic_code = item.economic_code or UNKNOWN_ECONOMIC_CODE
            economic_name = item.economic_name or UNKNOWN_ECONOMIC_NAME
            key = (item.functional_code, economic_code, item.year)
            existing = groups.get(key)
            if existing is None:
                groups[key] = ClassificationPeriodRow(
                    functional_code=item.functional_code,
                    functional_name=item.functional_name,
                    economic_code=economic_code,
                    economic_name=economic_name,
                    year=item.year,
                    amount=item.amount,
                    count=1,
                )
            else:
                groups[key] = existing.model_copy(
                    update={"amount": existing.amount + item.amount, "count": existing.count + 1}
                )

        if len(groups) > self._max_rows:
            raise DatabaseError(
                f"Classification period query returned {len(groups)} rows, "
                f"more than the limit of {self._max_rows}"
            )
        return list(groups.values())

    async def get_classification_period_data(
        self, filter: AnalyticsFilter
    ) -> ClassificationPeriodResult:
        rows = self._group(filter)
        distinct = len({(row.functional_code, row.economic_code) for row in rows})
        logger.debug("Fetched classification period rows", rows=len(rows), distinct=distinct)
        return ClassificationPeriodResult(rows=rows, distinct_classification_count=distinct)

    async def get_normalized_aggregated_items(
        self,
        filter: AnalyticsFilter,
        factor_map: PeriodFactorMap,
        pagination: PaginationParams,
        aggregate_filters: AggregateFilters | None = None,
    ) -> NormalizedAggregatedResult:
        rows = [row for row in self._group(filter) if str(row.year) in factor_map]
        aggregated = aggregate_rows(rows, factor_map)
        ordered = sort_by_amount(apply_aggregate_filters(aggregated, aggregate_filters))
        page = ordered[pagination.offset : pagination.offset + pagination.limit]
        return NormalizedAggregatedResult(items=page, total_count=len(ordered))

    async def get_year_span(self, filter: AnalyticsFilter) -> YearRange | None:
        years = _selected_years(filter.report_period.selection)
        matched = [item.year for item in self._line_items if _matches(item, filter, years)]
        if not matched:
            return None
        return YearRange(start_year=min(matched), end_year=max(matched))


class InMemoryPopulationRepository(PopulationRepository):
    """Population repository over lists of UATs and entities."""

    def __init__(
        self, uats: Iterable[UatRecord] = (), entities: Iterable[EntityRecord] = ()
    ) -> None:
        self._uats = list(uats)
        self._entities = list(entities)

    async def get_country_population(self) -> Decimal:
        return country_population(self._uats)

    async def get_filtered_population(self, filter: AnalyticsFilter) -> Decimal:
        return filtered_population(filter, self._uats, self._entities)
