"""File-backed normalization dataset source."""

from __future__ import annotations

import asyncio
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path

import structlog
from pydantic import ValidationError

from budgetnorm.domain.exceptions import DatasetNotFoundError, DatasetValidationError
from budgetnorm.domain.models.datasets import (
    AxisType,
    Dataset,
    DatasetFile,
    DatasetFrequency,
    DatasetPoint,
)
from budgetnorm.domain.ports.data_providers import DatasetSource

logger = structlog.get_logger(__name__)

_DATE_PATTERNS: dict[DatasetFrequency, re.Pattern[str]] = {
    "yearly": re.compile(r"^\d{4}$"),
    "monthly": re.compile(r"^\d{4}-(0[1-9]|1[0-2])$"),
    "quarterly": re.compile(r"^\d{4}-Q[1-4]$"),
}


def _parse_decimal(value: str, what: str) -> Decimal:
    try:
        numeric = Decimal(value)
    except InvalidOperation as e:
        raise DatasetValidationError(
            "InvalidDecimal", f"Value '{value}' is not a valid {what}"
        ) from e
    if not numeric.is_finite():
        raise DatasetValidationError("InvalidDecimal", f"Value '{value}' is not a valid {what}")
    return numeric


def _validate_x(axis_type: AxisType, frequency: DatasetFrequency | None, value: str) -> str:
    if axis_type == "date":
        pattern = _DATE_PATTERNS.get(frequency) if frequency is not None else None
        if pattern is None or not pattern.match(value):
            raise DatasetValidationError(
                "InvalidFormat",
                f"Expected {frequency or 'frequency::unknown'} date for x-axis, got '{value}'",
            )
        return value

    if axis_type == "number":
        return str(_parse_decimal(value, "numeric x-axis value"))

    if not value.strip():
        raise DatasetValidationError("InvalidFormat", "Category x-axis value cannot be empty")
    return value


def parse_dataset(document: DatasetFile) -> Dataset:
    """Validate a dataset document and convert its points to decimals.

    Raises:
        DatasetValidationError: On unit mismatch, malformed x values or
            non-finite y values
    """
    y_unit = document.axes.y.unit
    if y_unit is not None and document.metadata.units != y_unit:
        raise DatasetValidationError("UnitsMismatch", "metadata.units and axes.y.unit must match")

    points = [
        DatasetPoint(
            x=_validate_x(document.axes.x.type, document.axes.x.frequency, raw.x),
            y=_parse_decimal(raw.y, "y-axis number"),
        )
        for raw in document.data
    ]
    return Dataset(
        id=document.metadata.id,
        metadata=document.metadata,
        axes=document.axes,
        points=points,
    )


class FileDatasetSource(DatasetSource):
    """Loads ``<dataset id>.json`` files from a directory."""

    def __init__(self, datasets_dir: Path | str) -> None:
        self._dir = Path(datasets_dir)

    def get_provider_name(self) -> str:
        return "file"

    def _path_for(self, dataset_id: str) -> Path:
        return self._dir / f"{dataset_id}.json"

    async def get_by_id(self, dataset_id: str) -> Dataset:
        path = self._path_for(dataset_id)
        if not path.is_file():
            raise DatasetNotFoundError(dataset_id)

        content = await asyncio.to_thread(path.read_bytes)
        try:
            raw = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DatasetValidationError(
                "InvalidFormat", f"Dataset '{dataset_id}' is not valid UTF-8: {e}"
            ) from e

        try:
            document = DatasetFile.model_validate_json(raw)
        except ValidationError as e:
            raise DatasetValidationError(
                "InvalidFormat", f"Dataset '{dataset_id}' does not match the file schema: {e}"
            ) from e

        if document.metadata.id != dataset_id:
            logger.warning(
                "Dataset id does not match file name",
                dataset_id=dataset_id,
                metadata_id=document.metadata.id,
                path=str(path),
            )

        dataset = parse_dataset(document)
        logger.debug("Loaded dataset", dataset_id=dataset_id, points=len(dataset.points))
        return dataset

    async def list_ids(self) -> list[str]:
        if not self._dir.is_dir():
            return []
        return sorted(path.stem for path in self._dir.glob("*.json"))
