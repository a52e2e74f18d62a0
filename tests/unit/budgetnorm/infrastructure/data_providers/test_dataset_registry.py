"""Unit tests for the normalization dataset registry."""

import pytest

from budgetnorm.domain.models.periods import Frequency
from budgetnorm.infrastructure.data_providers.dataset_registry import (
    NORMALIZATION_DATASETS,
    DimensionDatasets,
    frequency_to_dataset_frequency,
    get_all_dataset_ids,
    get_best_available_dataset_id,
    get_dimension_dataset_ids,
    get_required_dataset_ids,
    has_higher_frequency_data,
)

REGISTRY = {
    **NORMALIZATION_DATASETS,
    "cpi": DimensionDatasets(
        yearly="ro.economics.cpi.yearly",
        quarterly="ro.economics.cpi.quarterly",
        monthly="ro.economics.cpi.monthly",
    ),
}


@pytest.mark.unit
class TestDatasetRegistry:
    def test_required_ids_are_the_yearly_datasets(self) -> None:
        ids = get_required_dataset_ids()

        assert len(ids) == 5
        assert all(dataset_id.endswith(".yearly") for dataset_id in ids)

    def test_dimension_ids_include_registered_frequencies(self) -> None:
        assert get_dimension_dataset_ids("cpi", REGISTRY) == [
            "ro.economics.cpi.yearly",
            "ro.economics.cpi.quarterly",
            "ro.economics.cpi.monthly",
        ]
        assert get_dimension_dataset_ids("gdp", REGISTRY) == ["ro.economics.gdp.yearly"]
        assert len(get_all_dataset_ids(REGISTRY)) == 7

    def test_best_available_dataset(self) -> None:
        assert get_best_available_dataset_id("cpi", "monthly", REGISTRY).endswith(".monthly")
        assert get_best_available_dataset_id("cpi", "quarterly", REGISTRY).endswith(".quarterly")
        assert get_best_available_dataset_id("gdp", "monthly", REGISTRY).endswith(".yearly")

    def test_higher_frequency_data(self) -> None:
        assert has_higher_frequency_data("cpi", "yearly", REGISTRY)
        assert has_higher_frequency_data("cpi", "quarterly", REGISTRY)
        assert not has_higher_frequency_data("cpi", "monthly", REGISTRY)
        assert not has_higher_frequency_data("gdp", "yearly", REGISTRY)

    def test_frequency_mapping(self) -> None:
        assert frequency_to_dataset_frequency(Frequency.MONTH) == "monthly"
        assert frequency_to_dataset_frequency(Frequency.QUARTER) == "quarterly"
        assert frequency_to_dataset_frequency(Frequency.YEAR) == "yearly"
