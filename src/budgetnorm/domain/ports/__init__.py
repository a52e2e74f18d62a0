"""Ports implemented by infrastructure collaborators."""

from budgetnorm.domain.ports.data_providers import (
    DatasetSource,
    NormalizationFactorProvider,
    PopulationRepository,
)
from budgetnorm.domain.ports.repositories import (
    ClassificationPeriodRepository,
    NormalizedAggregateRepository,
)

__all__ = [
    "ClassificationPeriodRepository",
    "NormalizedAggregateRepository",
    "NormalizationFactorProvider",
    "DatasetSource",
    "PopulationRepository",
]
