"""Normalization dataset models."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from budgetnorm.domain.models.base import ValueObject

DatasetFrequency = Literal["yearly", "quarterly", "monthly"]
AxisType = Literal["date", "category", "number"]


class DatasetPoint(ValueObject):
    """Value object representing one point of a dataset series."""

    x: str = Field(..., description="Period label or category")
    y: Decimal = Field(..., description="Observation value")


class DatasetAxis(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: str
    type: AxisType
    unit: str | None = None
    frequency: DatasetFrequency | None = None
    format: str | None = Field(default=None, description="Display format hint, e.g. YYYY")


class DatasetAxes(BaseModel):
    x: DatasetAxis
    y: DatasetAxis


class DatasetMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    source: str
    source_url: str | None = None
    last_updated: str
    units: str
    frequency: DatasetFrequency | None = None


class RawDatasetPoint(BaseModel):
    x: str = Field(..., description="Date string or category label")
    y: str = Field(..., description="Decimal value as string")


class DatasetFile(BaseModel):
    """On-disk dataset document before validation of its points."""

    model_config = ConfigDict(extra="ignore")

    metadata: DatasetMetadata
    axes: DatasetAxes
    data: list[RawDatasetPoint] = Field(default_factory=list)


class Dataset(ValueObject):
    id: str
    metadata: DatasetMetadata
    axes: DatasetAxes
    points: list[DatasetPoint] = Field(default_factory=list)
