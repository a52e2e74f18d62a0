"""Unit tests for the file-backed dataset source."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

from budgetnorm.domain.exceptions import DatasetNotFoundError, DatasetValidationError
from budgetnorm.domain.models.datasets import DatasetFile
from budgetnorm.infrastructure.data_providers.datasets import FileDatasetSource, parse_dataset


@pytest.mark.unit
class TestParseDataset:
    def test_converts_values_to_decimals(
        self, dataset_document: Callable[..., dict[str, Any]]
    ) -> None:
        document = DatasetFile.model_validate(
            dataset_document("cpi", {"2020": "1.25", "2021": "-0.5"})
        )

        dataset = parse_dataset(document)

        assert dataset.id == "cpi"
        assert [(p.x, p.y) for p in dataset.points] == [
            ("2020", Decimal("1.25")),
            ("2021", Decimal("-0.5")),
        ]

    def test_units_mismatch(self, dataset_document: Callable[..., dict[str, Any]]) -> None:
        document = DatasetFile.model_validate(
            dataset_document("cpi", {"2020": "1"}, units="index", y_unit="percent")
        )

        with pytest.raises(DatasetValidationError) as exc_info:
            parse_dataset(document)

        assert exc_info.value.kind == "UnitsMismatch"

    @pytest.mark.parametrize(
        "frequency,label",
        [("yearly", "2020-01"), ("monthly", "2020-13"), ("quarterly", "2020-Q5")],
    )
    def test_invalid_date_labels(
        self, frequency: str, label: str, dataset_document: Callable[..., dict[str, Any]]
    ) -> None:
        document = DatasetFile.model_validate(
            dataset_document("cpi", {label: "1"}, frequency=frequency)
        )

        with pytest.raises(DatasetValidationError) as exc_info:
            parse_dataset(document)

        assert exc_info.value.kind == "InvalidFormat"

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity"])
    def test_invalid_numbers(
        self, value: str, dataset_document: Callable[..., dict[str, Any]]
    ) -> None:
        document = DatasetFile.model_validate(dataset_document("cpi", {"2020": value}))

        with pytest.raises(DatasetValidationError) as exc_info:
            parse_dataset(document)

        assert exc_info.value.kind == "InvalidDecimal"


@pytest.mark.unit
class TestFileDatasetSource:
    @pytest.mark.asyncio
    async def test_get_by_id(self, tmp_path: Path, write_dataset: Callable[..., Path]) -> None:
        write_dataset("ro.economics.cpi.monthly", {"2024-01": "1.02"}, frequency="monthly")
        source = FileDatasetSource(tmp_path / "datasets")

        dataset = await source.get_by_id("ro.economics.cpi.monthly")

        assert source.get_provider_name() == "file"
        assert dataset.metadata.frequency == "monthly"
        assert dataset.points[0].y == Decimal("1.02")

    @pytest.mark.asyncio
    async def test_missing_dataset(self, tmp_path: Path) -> None:
        source = FileDatasetSource(tmp_path)

        with pytest.raises(DatasetNotFoundError) as exc_info:
            await source.get_by_id("ro.economics.cpi.yearly")

        assert exc_info.value.dataset_id == "ro.economics.cpi.yearly"

    @pytest.mark.asyncio
    async def test_schema_mismatch(self, tmp_path: Path) -> None:
        (tmp_path / "broken.json").write_text('{"metadata": {"id": "broken"}}')
        source = FileDatasetSource(tmp_path)

        with pytest.raises(DatasetValidationError) as exc_info:
            await source.get_by_id("broken")

        assert exc_info.value.kind == "InvalidFormat"

    @pytest.mark.asyncio
    async def test_invalid_utf8(self, tmp_path: Path) -> None:
        (tmp_path / "ro.economics.cpi.yearly.json").write_bytes(b'{"metadata": "\xff\xfe"}')
        source = FileDatasetSource(tmp_path)

        with pytest.raises(DatasetValidationError) as exc_info:
            await source.get_by_id("ro.economics.cpi.yearly")

        assert exc_info.value.kind == "InvalidFormat"
        assert "UTF-8" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_list_ids(self, datasets_dir: Path) -> None:
        source = FileDatasetSource(datasets_dir)

        ids = await source.list_ids()

        assert "ro.economics.cpi.yearly" in ids
        assert ids == sorted(ids)
        assert await FileDatasetSource(datasets_dir / "missing").list_ids() == []
