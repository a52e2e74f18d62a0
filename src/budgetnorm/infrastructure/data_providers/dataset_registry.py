"""Registry of the datasets backing each normalization dimension.

Every dimension has a required yearly dataset and optional quarterly and
monthly ones. Higher-frequency ids are only listed once the data exists.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from budgetnorm.domain.models.datasets import DatasetFrequency
from budgetnorm.domain.models.periods import Frequency

NormalizationDimension = Literal["cpi", "eur", "usd", "gdp", "population"]

DIMENSIONS: tuple[NormalizationDimension, ...] = ("cpi", "eur", "usd", "gdp", "population")


class DimensionDatasets(BaseModel):
    yearly: str
    quarterly: str | None = None
    monthly: str | None = None


NORMALIZATION_DATASETS: dict[NormalizationDimension, DimensionDatasets] = {
    # Consumer price index, INSSE
    "cpi": DimensionDatasets(yearly="ro.economics.cpi.yearly"),
    # RON/EUR exchange rate, BNR
    "eur": DimensionDatasets(yearly="ro.economics.exchange.ron_eur.yearly"),
    # RON/USD exchange rate, BNR
    "usd": DimensionDatasets(yearly="ro.economics.exchange.ron_usd.yearly"),
    # Nominal GDP, INSSE; no monthly series exists
    "gdp": DimensionDatasets(yearly="ro.economics.gdp.yearly"),
    # Resident population, INSSE
    "population": DimensionDatasets(yearly="ro.demographics.population.yearly"),
}


def frequency_to_dataset_frequency(frequency: Frequency) -> DatasetFrequency:
    if frequency == Frequency.MONTH:
        return "monthly"
    if frequency == Frequency.QUARTER:
        return "quarterly"
    return "yearly"


def get_required_dataset_ids(
    registry: dict[NormalizationDimension, DimensionDatasets] | None = None,
) -> list[str]:
    datasets = registry or NORMALIZATION_DATASETS
    return [datasets[dimension].yearly for dimension in DIMENSIONS]


def get_dimension_dataset_ids(
    dimension: NormalizationDimension,
    registry: dict[NormalizationDimension, DimensionDatasets] | None = None,
) -> list[str]:
    config = (registry or NORMALIZATION_DATASETS)[dimension]
    ids = [config.yearly]
    if config.quarterly is not None:
        ids.append(config.quarterly)
    if config.monthly is not None:
        ids.append(config.monthly)
    return ids


def get_all_dataset_ids(
    registry: dict[NormalizationDimension, DimensionDatasets] | None = None,
) -> list[str]:
    ids: list[str] = []
    for dimension in DIMENSIONS:
        ids.extend(get_dimension_dataset_ids(dimension, registry))
    return ids


def get_best_available_dataset_id(
    dimension: NormalizationDimension,
    frequency: DatasetFrequency,
    registry: dict[NormalizationDimension, DimensionDatasets] | None = None,
) -> str:
    """Highest-frequency dataset id not finer than ``frequency``."""
    config = (registry or NORMALIZATION_DATASETS)[dimension]
    if frequency == "monthly" and config.monthly is not None:
        return config.monthly
    if frequency in ("monthly", "quarterly") and config.quarterly is not None:
        return config.quarterly
    return config.yearly


def has_higher_frequency_data(
    dimension: NormalizationDimension,
    frequency: DatasetFrequency,
    registry: dict[NormalizationDimension, DimensionDatasets] | None = None,
) -> bool:
    config = (registry or NORMALIZATION_DATASETS)[dimension]
    if frequency == "yearly":
        return config.quarterly is not None or config.monthly is not None
    if frequency == "quarterly":
        return config.monthly is not None
    return False
