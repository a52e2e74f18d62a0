"""Dataset sources and normalization factor providers."""

from budgetnorm.infrastructure.data_providers.datasets import FileDatasetSource, parse_dataset
from budgetnorm.infrastructure.data_providers.normalization import NormalizationService

__all__ = ["FileDatasetSource", "NormalizationService", "parse_dataset"]
