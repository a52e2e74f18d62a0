"""Shared fixtures for budgetnorm unit tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from budgetnorm.infrastructure.config import get_settings
from budgetnorm.infrastructure.containers import reset_container
from budgetnorm.infrastructure.data_providers.dataset_registry import get_required_dataset_ids

DEFAULT_SERIES: dict[str, dict[str, str]] = {
    "ro.economics.cpi.yearly": {"2020": "1.2", "2021": "1.1"},
    "ro.economics.exchange.ron_eur.yearly": {"2020": "5", "2021": "4"},
    "ro.economics.exchange.ron_usd.yearly": {"2020": "4.4", "2021": "4.2"},
    "ro.economics.gdp.yearly": {"2020": "1000000", "2021": "1200000"},
    "ro.demographics.population.yearly": {"2020": "19000000", "2021": "19000000"},
}


def _dataset_document(
    dataset_id: str,
    series: dict[str, str],
    frequency: str = "yearly",
    units: str = "index",
    y_unit: str | None = None,
) -> dict[str, Any]:
    return {
        "metadata": {
            "id": dataset_id,
            "source": "INSSE",
            "source_url": "https://insse.ro",
            "last_updated": "2024-06-01",
            "units": units,
            "frequency": frequency,
        },
        "axes": {
            "x": {"label": "Period", "type": "date", "frequency": frequency},
            "y": {"label": "Value", "type": "number", "unit": y_unit or units},
        },
        "data": [{"x": x, "y": y} for x, y in series.items()],
    }


@pytest.fixture
def dataset_document() -> Callable[..., dict[str, Any]]:
    """Build an on-disk dataset document."""
    return _dataset_document


@pytest.fixture
def write_dataset(tmp_path: Path) -> Callable[..., Path]:
    """Write a dataset document to ``tmp_path/datasets/<id>.json``."""
    datasets_dir = tmp_path / "datasets"
    datasets_dir.mkdir(exist_ok=True)

    def _write(dataset_id: str, series: dict[str, str], **kwargs: Any) -> Path:
        path = datasets_dir / f"{dataset_id}.json"
        path.write_text(json.dumps(_dataset_document(dataset_id, series, **kwargs)))
        return path

    return _write


@pytest.fixture
def datasets_dir(tmp_path: Path, write_dataset: Callable[..., Path]) -> Path:
    """Directory holding every required normalization dataset."""
    for dataset_id in get_required_dataset_ids():
        write_dataset(dataset_id, DEFAULT_SERIES[dataset_id])
    return tmp_path / "datasets"


@pytest.fixture
def isolated_settings(
    monkeypatch: pytest.MonkeyPatch, datasets_dir: Path
) -> Iterator[Path]:
    """Point settings at the temporary datasets and reset the global container."""
    monkeypatch.setenv("BUDGETNORM_DATASETS_DIR", str(datasets_dir))
    monkeypatch.delenv("BUDGETNORM_EXECUTION_STRATEGY", raising=False)
    get_settings.cache_clear()
    reset_container()
    yield datasets_dir
    get_settings.cache_clear()
    reset_container()
