"""Main dependency injection container configuration."""

from dependency_injector import containers, providers

from budgetnorm.application.use_cases import ExecutionStrategy, GetAggregatedLineItemsUseCase
from budgetnorm.infrastructure.config import get_settings
from budgetnorm.infrastructure.containers.data_providers import configure_data_providers


class Container(containers.DeclarativeContainer):
    """Dependency injection container for budgetnorm.

    Override any provider for tests or alternate storage:
        container = Container()
        container.line_item_repository.override(providers.Object(my_repository))
    """

    settings = providers.Singleton(get_settings)

    # Data providers and repositories (singletons, can be overridden)
    _data_providers_config = configure_data_providers(settings)
    dataset_source = _data_providers_config["dataset_source"]
    normalization_service = _data_providers_config["normalization_service"]
    line_item_repository = _data_providers_config["line_item_repository"]
    population_repository = _data_providers_config["population_repository"]

    # Use cases
    get_aggregated_line_items_use_case = providers.Factory(
        GetAggregatedLineItemsUseCase,
        repository=line_item_repository,
        factor_provider=normalization_service,
        population_repository=population_repository,
        strategy=providers.Callable(ExecutionStrategy, settings.provided.execution_strategy),
        default_limit=settings.provided.default_limit,
        max_limit=settings.provided.max_limit,
    )


# Global container instance (can be overridden for testing)
_container: Container | None = None


def get_container() -> Container:
    """Get the global dependency injection container, creating it on first use."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def set_container(container: Container) -> None:
    """Set a custom container (useful for testing).

    Args:
        container: Container instance to use
    """
    global _container
    _container = container


def reset_container() -> None:
    """Reset the global container (useful for testing)."""
    global _container
    _container = None
