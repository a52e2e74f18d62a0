"""Repository ports for classification line item data."""

from abc import ABC, abstractmethod

from budgetnorm.domain.models.classification import (
    AggregateFilters,
    AnalyticsFilter,
    ClassificationPeriodResult,
    NormalizedAggregatedResult,
    PaginationParams,
)
from budgetnorm.domain.models.normalization import PeriodFactorMap
from budgetnorm.domain.models.periods import YearRange


class ClassificationPeriodRepository(ABC):
    """Source of line items grouped by classification and year.

    Rows are per period, never pre-aggregated across years: normalization
    factors vary by year, so totals are only summed after each row has been
    normalized with its own period's factors.

    Implementations apply every dimensional filter, join the classification
    names and default NULL economic codes. They do not apply the amount
    thresholds, the ordering or the pagination.

    Raises:
        DatabaseError: If the query fails
        QueryTimeoutError: If the query exceeds the statement timeout
    """

    @abstractmethod
    async def get_classification_period_data(
        self, filter: AnalyticsFilter
    ) -> ClassificationPeriodResult:
        """Fetch rows grouped by (functional code, economic code, year)."""
        pass


class NormalizedAggregateRepository(ClassificationPeriodRepository):
    """Repository able to normalize, aggregate, sort and paginate in the store.

    The caller computes the combined multiplier table first; the store joins
    raw amounts against it by period before summing, so that ordering and
    LIMIT/OFFSET operate on normalized totals.
    """

    @abstractmethod
    async def get_normalized_aggregated_items(
        self,
        filter: AnalyticsFilter,
        factor_map: PeriodFactorMap,
        pagination: PaginationParams,
        aggregate_filters: AggregateFilters | None = None,
    ) -> NormalizedAggregatedResult:
        """Fetch one page of normalized totals sorted by amount descending.

        Args:
            filter: Dimensional and period filter
            factor_map: Combined multiplier per period label
            pagination: Already clamped limit and offset
            aggregate_filters: Optional HAVING thresholds on normalized totals

        Returns:
            Page items plus the total number of groups passing the thresholds
        """
        pass

    @abstractmethod
    async def get_year_span(self, filter: AnalyticsFilter) -> YearRange | None:
        """Return the first and last year of the rows matching the filter.

        The multiplier table handed to ``get_normalized_aggregated_items`` must
        cover this span: rows whose period has no multiplier are dropped, the
        way an inner join against the multiplier table drops them.

        Returns:
            The year span, or None if no row matches
        """
        pass
