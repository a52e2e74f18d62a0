"""Unit tests for the dependency injection container."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest
from dependency_injector import providers

from budgetnorm.application.use_cases import (
    ExecutionStrategy,
    GetAggregatedLineItemsRequest,
    GetAggregatedLineItemsUseCase,
)
from budgetnorm.domain.models import Currency, NormalizationConfig
from budgetnorm.infrastructure.containers import (
    Container,
    get_container,
    reset_container,
    set_container,
)
from budgetnorm.infrastructure.data_providers import FileDatasetSource, NormalizationService
from budgetnorm.infrastructure.repositories import InMemoryLineItemRepository, LineItemRecord


@pytest.mark.unit
class TestContainer:
    def test_wires_settings_into_providers(self, isolated_settings: Path) -> None:
        container = Container()

        source = container.dataset_source()
        use_case = container.get_aggregated_line_items_use_case()

        assert isinstance(source, FileDatasetSource)
        assert isinstance(container.normalization_service(), NormalizationService)
        assert container.normalization_service() is container.normalization_service()
        assert isinstance(use_case, GetAggregatedLineItemsUseCase)
        assert use_case.strategy == ExecutionStrategy.IN_MEMORY

    def test_strategy_from_settings(
        self, isolated_settings: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BUDGETNORM_EXECUTION_STRATEGY", "store_delegated")

        use_case = Container().get_aggregated_line_items_use_case()

        assert use_case.strategy == ExecutionStrategy.STORE_DELEGATED

    def test_global_container_lifecycle(self, isolated_settings: Path) -> None:
        first = get_container()
        assert get_container() is first

        custom = Container()
        set_container(custom)
        assert get_container() is custom

        reset_container()
        assert get_container() is not custom

    @pytest.mark.asyncio
    async def test_overridden_repository_end_to_end(self, isolated_settings: Path) -> None:
        container = Container()
        container.line_item_repository.override(
            providers.Object(
                InMemoryLineItemRepository(
                    [
                        LineItemRecord(
                            entity_cui="1",
                            functional_code="65",
                            functional_name="Education",
                            year=2020,
                            amount=Decimal("500"),
                        ),
                        LineItemRecord(
                            entity_cui="1",
                            functional_code="65",
                            functional_name="Education",
                            year=2021,
                            amount=Decimal("600"),
                        ),
                    ]
                )
            )
        )

        result = await container.get_aggregated_line_items_use_case().execute(
            GetAggregatedLineItemsRequest(
                normalization=NormalizationConfig(currency=Currency.EUR)
            )
        )

        assert result.success
        assert result.data is not None
        assert result.data.nodes[0].amount == 250.0
