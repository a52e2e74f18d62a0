"""Data provider ports for normalization factors and population."""

from abc import ABC, abstractmethod
from decimal import Decimal

from budgetnorm.domain.models.classification import AnalyticsFilter
from budgetnorm.domain.models.datasets import Dataset
from budgetnorm.domain.models.normalization import FactorBundle
from budgetnorm.domain.models.periods import Frequency


class DatasetSource(ABC):
    """Abstract interface for normalization dataset storage."""

    @abstractmethod
    def get_provider_name(self) -> str:
        pass

    @abstractmethod
    async def get_by_id(self, dataset_id: str) -> Dataset:
        """Load a dataset.

        Raises:
            DatasetNotFoundError: If no dataset has this id
            DatasetValidationError: If the stored dataset is malformed
        """
        pass

    @abstractmethod
    async def list_ids(self) -> list[str]:
        pass


class NormalizationFactorProvider(ABC):
    """Produces per-period factors for a year range.

    Implementations may raise on failure; the aggregation use case wraps any
    exception into a ``NormalizationDataError`` result.
    """

    @abstractmethod
    async def generate_factors(
        self, frequency: Frequency, start_year: int, end_year: int
    ) -> FactorBundle:
        pass


class PopulationRepository(ABC):
    """Population reference data used as per-capita denominators.

    Raises:
        DatabaseError: If the lookup fails
    """

    @abstractmethod
    async def get_country_population(self) -> Decimal:
        """Total country population from county-level units."""
        pass

    @abstractmethod
    async def get_filtered_population(self, filter: AnalyticsFilter) -> Decimal:
        """Population of the units matched by the filter's entity-like selectors."""
        pass
