"""Aggregated line items use case.

Budget amounts are normalized per period *before* they are summed across
years: CPI, exchange rates, GDP and population all vary by year, so
normalizing a multi-year raw total with a single factor gives wrong results.

Two interchangeable strategies produce the same page for the same inputs:

**In-memory**
    Fetch every (classification, year) row, normalize each row with its
    year's multiplier, aggregate by classification, apply the amount
    thresholds, sort by normalized amount and paginate in process.

**Store-delegated**
    Compute the combined multiplier table first, over the year span the
    repository reports for the filter, then let the repository join raw
    amounts against it, aggregate, filter, sort and paginate inside the
    store. Sorting and limiting in the store is only correct because the
    multipliers are applied before the ORDER BY / LIMIT.

The strategy is chosen by the composition root, not by probing the
repository.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

import structlog
from pydantic import BaseModel, Field

from budgetnorm.domain.exceptions import QueryTimeoutError, is_timeout_error
from budgetnorm.domain.models.classification import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    AggregatedClassification,
    AggregatedLineItem,
    AggregatedLineItemConnection,
    AggregateFilters,
    AnalyticsFilter,
    PageInfo,
    PaginationParams,
)
from budgetnorm.domain.models.normalization import (
    FactorBundle,
    NormalizationConfig,
    NormalizationMode,
    PeriodFactorMap,
)
from budgetnorm.domain.models.periods import (
    Frequency,
    YearRange,
    generate_period_labels,
)
from budgetnorm.domain.models.results import PipelineError, PipelineResult
from budgetnorm.domain.ports.data_providers import (
    NormalizationFactorProvider,
    PopulationRepository,
)
from budgetnorm.domain.ports.repositories import (
    ClassificationPeriodRepository,
    NormalizedAggregateRepository,
)
from budgetnorm.domain.services.aggregation import (
    aggregate_rows,
    apply_aggregate_filters,
    sort_by_amount,
)
from budgetnorm.domain.services.multipliers import MultiplierCompositor, identity_factor_map
from budgetnorm.domain.services.population import PopulationDenominatorResolver

logger = structlog.get_logger(__name__)

ConnectionResult = PipelineResult[AggregatedLineItemConnection]


class ExecutionStrategy(str, Enum):
    """Where normalization, aggregation, sorting and pagination run."""

    IN_MEMORY = "in_memory"
    STORE_DELEGATED = "store_delegated"


class GetAggregatedLineItemsRequest(BaseModel):
    """Request to aggregate line items by classification."""

    filter: AnalyticsFilter = Field(default_factory=AnalyticsFilter)
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    limit: int | None = Field(default=None, description="Page size, clamped to [0, max_limit]")
    offset: int | None = Field(default=None, description="Page offset, negative treated as 0")


class _PipelineFailure(Exception):
    """Short-circuits a run with a typed error."""

    def __init__(self, error: PipelineError) -> None:
        super().__init__(error.message)
        self.error = error


def _database_failure(action: str, exc: BaseException) -> _PipelineFailure:
    if isinstance(exc, QueryTimeoutError) or is_timeout_error(exc):
        return _PipelineFailure(
            PipelineError(type="TimeoutError", message=f"{action} timed out: {exc}", retryable=True)
        )
    return _PipelineFailure(
        PipelineError(type="DatabaseError", message=f"{action} failed: {exc}", retryable=True)
    )


def build_aggregate_filters(filter: AnalyticsFilter) -> AggregateFilters:
    return AggregateFilters(
        min_amount=filter.aggregate_min_amount,
        max_amount=filter.aggregate_max_amount,
    )


def build_connection(
    items: list[AggregatedClassification], total_count: int, limit: int, offset: int
) -> AggregatedLineItemConnection:
    return AggregatedLineItemConnection(
        nodes=[AggregatedLineItem.from_aggregate(item) for item in items],
        page_info=PageInfo(
            total_count=total_count,
            has_next_page=offset + limit < total_count,
            has_previous_page=offset > 0,
        ),
    )


class GetAggregatedLineItemsUseCase:
    """Normalize, aggregate, filter, sort and paginate classification totals."""

    def __init__(
        self,
        repository: ClassificationPeriodRepository,
        factor_provider: NormalizationFactorProvider,
        population_repository: PopulationRepository,
        strategy: ExecutionStrategy = ExecutionStrategy.IN_MEMORY,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> None:
        """Initialize the use case.

        Args:
            repository: Row source; must also implement
                ``NormalizedAggregateRepository`` for the store-delegated strategy
            factor_provider: Source of per-period normalization factors
            population_repository: Source of per-capita denominators
            strategy: Execution strategy selected by the composition root
            default_limit: Page size when the request has none
            max_limit: Upper bound for the page size

        Raises:
            ValueError: If the store-delegated strategy is selected with a
                repository that cannot aggregate in the store
        """
        if strategy == ExecutionStrategy.STORE_DELEGATED and not isinstance(
            repository, NormalizedAggregateRepository
        ):
            raise ValueError(
                "Store-delegated strategy requires a NormalizedAggregateRepository, "
                f"got {type(repository).__name__}"
            )
        self._repository = repository
        self._aggregate_repository: NormalizedAggregateRepository | None = (
            repository if isinstance(repository, NormalizedAggregateRepository) else None
        )
        self._factor_provider = factor_provider
        self._population_resolver = PopulationDenominatorResolver(population_repository)
        self._compositor = MultiplierCompositor()
        self._strategy = strategy
        self._default_limit = default_limit
        self._max_limit = max_limit

    @property
    def strategy(self) -> ExecutionStrategy:
        return self._strategy

    def clamp_pagination(self, limit: int | None, offset: int | None) -> PaginationParams:
        raw_limit = self._default_limit if limit is None else limit
        return PaginationParams(
            limit=min(max(raw_limit, 0), self._max_limit),
            offset=max(offset or 0, 0),
        )

    async def execute(self, request: GetAggregatedLineItemsRequest) -> ConnectionResult:
        """Run the pipeline.

        Never raises for collaborator failures: repository, population and
        factor errors come back as a failed ``PipelineResult``.
        """
        pagination = self.clamp_pagination(request.limit, request.offset)
        logger.debug(
            "Aggregating line items",
            strategy=self._strategy.value,
            mode=request.normalization.mode.value,
            currency=request.normalization.currency.value,
            inflation_adjusted=request.normalization.inflation_adjusted,
            limit=pagination.limit,
            offset=pagination.offset,
        )

        try:
            if self._strategy == ExecutionStrategy.STORE_DELEGATED:
                connection = await self._run_store_delegated(request, pagination)
            else:
                connection = await self._run_in_memory(request, pagination)
        except _PipelineFailure as failure:
            logger.warning(
                "Aggregated line items pipeline failed",
                error_type=failure.error.type,
                error=failure.error.message,
                strategy=self._strategy.value,
            )
            return ConnectionResult.fail(failure.error, strategy=self._strategy.value)

        return ConnectionResult.ok(connection, strategy=self._strategy.value)

    async def _run_in_memory(
        self, request: GetAggregatedLineItemsRequest, pagination: PaginationParams
    ) -> AggregatedLineItemConnection:
        try:
            result = await self._repository.get_classification_period_data(request.filter)
        except Exception as e:
            raise _database_failure("Fetching classification period data", e) from e

        rows = result.rows
        if not rows:
            return build_connection([], 0, pagination.limit, pagination.offset)

        multipliers: PeriodFactorMap | None = None
        if request.normalization.needs_normalization:
            years = [row.year for row in rows]
            year_range = YearRange(start_year=min(years), end_year=max(years))
            multipliers = await self._build_multipliers(request, year_range)

        aggregated = aggregate_rows(rows, multipliers)
        thresholds = build_aggregate_filters(request.filter)
        filtered = apply_aggregate_filters(aggregated, thresholds)
        ordered = sort_by_amount(filtered)

        total_count = len(ordered)
        page = ordered[pagination.offset : pagination.offset + pagination.limit]
        return build_connection(page, total_count, pagination.limit, pagination.offset)

    async def _run_store_delegated(
        self, request: GetAggregatedLineItemsRequest, pagination: PaginationParams
    ) -> AggregatedLineItemConnection:
        repository = self._aggregate_repository
        if repository is None:
            raise RuntimeError("Store-delegated run without a NormalizedAggregateRepository")

        # The multiplier table must cover every year the store can return
        try:
            year_range = await repository.get_year_span(request.filter)
        except Exception as e:
            raise _database_failure("Fetching year span", e) from e
        if year_range is None:
            return build_connection([], 0, pagination.limit, pagination.offset)

        if request.normalization.needs_normalization:
            factor_map = await self._build_multipliers(request, year_range)
        else:
            factor_map = identity_factor_map(
                generate_period_labels(year_range.start_year, year_range.end_year)
            )

        thresholds = build_aggregate_filters(request.filter)
        try:
            result = await repository.get_normalized_aggregated_items(
                request.filter,
                factor_map,
                pagination,
                None if thresholds.is_empty else thresholds,
            )
        except Exception as e:
            raise _database_failure("Fetching normalized aggregated items", e) from e

        return build_connection(
            result.items, result.total_count, pagination.limit, pagination.offset
        )

    async def _build_multipliers(
        self, request: GetAggregatedLineItemsRequest, year_range: YearRange
    ) -> PeriodFactorMap:
        # Rows carry yearly periods, so factors are always generated yearly
        factors = await self._generate_factors(year_range)

        denominator: Decimal | None = None
        if request.normalization.mode == NormalizationMode.PER_CAPITA:
            try:
                denominator = await self._population_resolver.resolve(request.filter)
            except Exception as e:
                raise _database_failure("Resolving population denominator", e) from e

        labels = generate_period_labels(year_range.start_year, year_range.end_year, Frequency.YEAR)
        return self._compositor.compose(request.normalization, factors, labels, denominator)

    async def _generate_factors(self, year_range: YearRange) -> FactorBundle:
        try:
            return await self._factor_provider.generate_factors(
                Frequency.YEAR, year_range.start_year, year_range.end_year
            )
        except Exception as e:
            raise _PipelineFailure(
                PipelineError(
                    type="NormalizationDataError",
                    message=f"Failed to generate normalization factors: {e}",
                    retryable=False,
                )
            ) from e
