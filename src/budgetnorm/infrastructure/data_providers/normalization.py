"""Normalization factor provider backed by a dataset source."""

from __future__ import annotations

import asyncio

import structlog

from budgetnorm.domain.exceptions import (
    DatasetNotFoundError,
    DatasetValidationError,
    NormalizationDatasetError,
)
from budgetnorm.domain.models.normalization import (
    FactorBundle,
    FactorDatasets,
    FactorMap,
    SeriesPoint,
    TransformationOptions,
)
from budgetnorm.domain.models.periods import Frequency, YearRange
from budgetnorm.domain.models.results import PipelineError, PipelineResult
from budgetnorm.domain.ports.data_providers import DatasetSource, NormalizationFactorProvider
from budgetnorm.domain.services.factor_maps import FactorMapGenerator, dataset_to_factor_map
from budgetnorm.domain.services.series import normalize_data
from budgetnorm.infrastructure.data_providers.dataset_registry import (
    DIMENSIONS,
    NORMALIZATION_DATASETS,
    DimensionDatasets,
    NormalizationDimension,
    get_required_dataset_ids,
)

logger = structlog.get_logger(__name__)

SeriesResult = PipelineResult[list[SeriesPoint]]


class NormalizationService(NormalizationFactorProvider):
    """Generates frequency-matched factors from the registered datasets.

    Use ``NormalizationService.create()`` so that required datasets are
    validated before the service is used. Loaded datasets are cached until
    ``invalidate_cache()`` is called.
    """

    def __init__(
        self,
        source: DatasetSource,
        registry: dict[NormalizationDimension, DimensionDatasets] | None = None,
    ) -> None:
        self._source = source
        self._registry = registry or NORMALIZATION_DATASETS
        self._generator = FactorMapGenerator()
        self._cached: dict[NormalizationDimension, FactorDatasets] | None = None

    @classmethod
    async def create(
        cls,
        source: DatasetSource,
        registry: dict[NormalizationDimension, DimensionDatasets] | None = None,
    ) -> NormalizationService:
        """Create a service after checking that every required dataset loads.

        Raises:
            NormalizationDatasetError: If any required dataset is missing or invalid
        """
        service = cls(source, registry)
        await service.validate_required_datasets()
        return service

    async def validate_required_datasets(self) -> None:
        required = get_required_dataset_ids(self._registry)
        outcomes = await asyncio.gather(
            *(self._source.get_by_id(dataset_id) for dataset_id in required),
            return_exceptions=True,
        )

        errors: dict[str, str] = {}
        for dataset_id, outcome in zip(required, outcomes, strict=True):
            if isinstance(outcome, (DatasetNotFoundError, DatasetValidationError)):
                errors[dataset_id] = str(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome

        if errors:
            logger.error(
                "Required normalization datasets are missing",
                missing=list(errors),
                provider=self._source.get_provider_name(),
            )
            raise NormalizationDatasetError(list(errors), errors)

    async def _load_factor_map(self, dataset_id: str) -> FactorMap:
        dataset = await self._source.get_by_id(dataset_id)
        return dataset_to_factor_map(dataset.points)

    async def _load_dimension(self, dimension: NormalizationDimension) -> FactorDatasets:
        config = self._registry[dimension]
        yearly = await self._load_factor_map(config.yearly)
        quarterly = (
            await self._load_factor_map(config.quarterly) if config.quarterly is not None else None
        )
        monthly = (
            await self._load_factor_map(config.monthly) if config.monthly is not None else None
        )
        return FactorDatasets(yearly=yearly, quarterly=quarterly, monthly=monthly)

    async def _load_datasets(self) -> dict[NormalizationDimension, FactorDatasets]:
        if self._cached is not None:
            return self._cached

        loaded = await asyncio.gather(*(self._load_dimension(d) for d in DIMENSIONS))
        self._cached = dict(zip(DIMENSIONS, loaded, strict=True))
        logger.info("Loaded normalization datasets", dimensions=len(self._cached))
        return self._cached

    async def generate_factors(
        self, frequency: Frequency, start_year: int, end_year: int
    ) -> FactorBundle:
        """Generate gap-filled factors for every dimension over the year range."""
        datasets = await self._load_datasets()
        return FactorBundle(
            **{
                dimension: self._generator.generate(
                    frequency, start_year, end_year, datasets[dimension]
                )
                for dimension in DIMENSIONS
            }
        )

    async def normalize(
        self,
        data: list[SeriesPoint],
        options: TransformationOptions,
        frequency: Frequency,
        year_range: YearRange,
    ) -> SeriesResult:
        """Normalize a time series with factors matching its frequency.

        Failures to load or generate factors come back as a failed result.
        """
        try:
            factors = await self.generate_factors(
                frequency, year_range.start_year, year_range.end_year
            )
        except Exception as e:
            logger.warning(
                "Series normalization failed",
                error=str(e),
                frequency=frequency.value,
                start_year=year_range.start_year,
                end_year=year_range.end_year,
            )
            return SeriesResult.fail(
                PipelineError(type="NormalizationDataError", message=str(e), retryable=False)
            )

        return SeriesResult.ok(normalize_data(data, options, factors))

    def invalidate_cache(self) -> None:
        self._cached = None
