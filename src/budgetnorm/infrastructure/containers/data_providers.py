"""Data provider and repository container configuration."""

from __future__ import annotations

from dependency_injector import providers

from budgetnorm.infrastructure.config import Settings
from budgetnorm.infrastructure.data_providers import FileDatasetSource, NormalizationService
from budgetnorm.infrastructure.repositories import (
    InMemoryLineItemRepository,
    InMemoryPopulationRepository,
)


def configure_data_providers(
    settings: providers.Provider[Settings],
) -> dict[str, providers.Provider]:
    """Configure dataset and repository providers.

    Repositories start empty; callers load data by overriding them, e.g.
    ``container.line_item_repository.override(providers.Object(repo))``.

    Args:
        settings: Provider returning the application settings

    Returns:
        Dictionary of data provider providers
    """
    dataset_source = providers.Singleton(
        FileDatasetSource,
        datasets_dir=settings.provided.datasets_dir,
    )
    return {
        "dataset_source": dataset_source,
        "normalization_service": providers.Singleton(NormalizationService, source=dataset_source),
        "line_item_repository": providers.Singleton(
            InMemoryLineItemRepository,
            max_rows=settings.provided.max_db_rows,
        ),
        "population_repository": providers.Singleton(InMemoryPopulationRepository),
    }
