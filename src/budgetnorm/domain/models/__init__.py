"""Domain models for budgetnorm."""

from budgetnorm.domain.models.classification import (
    DEFAULT_LIMIT,
    MAX_DB_ROWS,
    MAX_LIMIT,
    UNKNOWN_ECONOMIC_CODE,
    UNKNOWN_ECONOMIC_NAME,
    AggregatedClassification,
    AggregatedLineItem,
    AggregatedLineItemConnection,
    AggregateFilters,
    AnalyticsFilter,
    ClassificationPeriodResult,
    ClassificationPeriodRow,
    NormalizedAggregatedResult,
    PageInfo,
    PaginationParams,
)
from budgetnorm.domain.models.datasets import Dataset, DatasetFile, DatasetPoint
from budgetnorm.domain.models.normalization import (
    Currency,
    FactorBundle,
    FactorDatasets,
    FactorMap,
    NormalizationConfig,
    NormalizationMode,
    PeriodFactorMap,
    SeriesPoint,
    TransformationOptions,
    resolve_normalization_request,
)
from budgetnorm.domain.models.periods import (
    Frequency,
    PeriodInterval,
    PeriodSelection,
    ReportPeriod,
    YearRange,
)
from budgetnorm.domain.models.population import EntityRecord, UatRecord
from budgetnorm.domain.models.results import PipelineError, PipelineResult

__all__ = [
    # Periods
    "Frequency",
    "PeriodInterval",
    "PeriodSelection",
    "ReportPeriod",
    "YearRange",
    # Normalization
    "Currency",
    "NormalizationMode",
    "NormalizationConfig",
    "TransformationOptions",
    "SeriesPoint",
    "FactorMap",
    "PeriodFactorMap",
    "FactorDatasets",
    "FactorBundle",
    "resolve_normalization_request",
    # Datasets
    "Dataset",
    "DatasetFile",
    "DatasetPoint",
    # Classification aggregation
    "AnalyticsFilter",
    "ClassificationPeriodRow",
    "ClassificationPeriodResult",
    "AggregatedClassification",
    "AggregateFilters",
    "PaginationParams",
    "NormalizedAggregatedResult",
    "AggregatedLineItem",
    "AggregatedLineItemConnection",
    "PageInfo",
    "UNKNOWN_ECONOMIC_CODE",
    "UNKNOWN_ECONOMIC_NAME",
    "MAX_LIMIT",
    "DEFAULT_LIMIT",
    "MAX_DB_ROWS",
    # Population reference data
    "UatRecord",
    "EntityRecord",
    # Results
    "PipelineError",
    "PipelineResult",
]
