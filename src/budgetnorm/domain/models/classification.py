"""Classification-level aggregation models."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from budgetnorm.domain.models.base import ValueObject
from budgetnorm.domain.models.periods import ReportPeriod

UNKNOWN_ECONOMIC_CODE = "00.00.00"
UNKNOWN_ECONOMIC_NAME = "Unknown economic classification"

MAX_LIMIT = 1000
DEFAULT_LIMIT = 50
# Safety cap on rows a repository returns for the in-memory strategy
MAX_DB_ROWS = 100_000


class AnalyticsFilter(ValueObject):
    """Dimensional filter applied by repositories.

    The entity-like selectors (cuis, UATs, counties, entity types, ``is_uat``)
    also drive the per-capita population denominator.
    """

    account_category: Literal["vn", "ch"] = Field(
        default="ch", description="Revenue (vn) or expense (ch) line items"
    )
    report_period: ReportPeriod = Field(default_factory=ReportPeriod)
    functional_prefixes: list[str] | None = Field(default=None)
    economic_prefixes: list[str] | None = Field(default=None)
    entity_cuis: list[str] | None = Field(default=None)
    uat_ids: list[str] | None = Field(default=None)
    county_codes: list[str] | None = Field(default=None)
    entity_types: list[str] | None = Field(default=None)
    is_uat: bool | None = Field(default=None)
    aggregate_min_amount: Decimal | None = Field(
        default=None, description="Keep groups whose normalized amount is >= this value"
    )
    aggregate_max_amount: Decimal | None = Field(
        default=None, description="Keep groups whose normalized amount is <= this value"
    )

    @property
    def has_entity_like_filter(self) -> bool:
        return bool(
            self.entity_cuis
            or self.uat_ids
            or self.county_codes
            or self.entity_types
            or self.is_uat is not None
        )


class ClassificationPeriodRow(ValueObject):
    """Line items grouped by (functional code, economic code, year)."""

    functional_code: str
    functional_name: str
    economic_code: str = Field(default=UNKNOWN_ECONOMIC_CODE)
    economic_name: str = Field(default=UNKNOWN_ECONOMIC_NAME)
    year: int
    amount: Decimal = Field(..., description="Raw nominal RON amount, may be negative")
    count: int = Field(..., ge=0, description="Number of underlying line items")


class ClassificationPeriodResult(ValueObject):
    rows: list[ClassificationPeriodRow] = Field(default_factory=list)
    distinct_classification_count: int = Field(default=0)


class AggregatedClassification(BaseModel):
    """Running total for one (functional, economic) classification pair."""

    functional_code: str
    functional_name: str
    economic_code: str
    economic_name: str
    amount: Decimal
    count: int

    @property
    def key(self) -> tuple[str, str]:
        return (self.functional_code, self.economic_code)


class PaginationParams(ValueObject):
    limit: int
    offset: int


class AggregateFilters(ValueObject):
    """HAVING-equivalent thresholds on normalized totals."""

    min_amount: Decimal | None = None
    max_amount: Decimal | None = None

    @property
    def is_empty(self) -> bool:
        return self.min_amount is None and self.max_amount is None

    def accepts(self, amount: Decimal) -> bool:
        if self.min_amount is not None and amount < self.min_amount:
            return False
        if self.max_amount is not None and amount > self.max_amount:
            return False
        return True


class NormalizedAggregatedResult(ValueObject):
    """Page computed inside the store for the store-delegated strategy."""

    items: list[AggregatedClassification] = Field(default_factory=list)
    total_count: int = Field(default=0)


class AggregatedLineItem(ValueObject):
    """Output node; amounts leave the core as plain floats."""

    functional_code: str
    functional_name: str
    economic_code: str
    economic_name: str
    amount: float
    count: int

    @classmethod
    def from_aggregate(cls, row: AggregatedClassification) -> AggregatedLineItem:
        return cls(
            functional_code=row.functional_code,
            functional_name=row.functional_name,
            economic_code=row.economic_code,
            economic_name=row.economic_name,
            amount=float(row.amount),
            count=row.count,
        )


class PageInfo(ValueObject):
    total_count: int
    has_next_page: bool
    has_previous_page: bool


class AggregatedLineItemConnection(ValueObject):
    nodes: list[AggregatedLineItem] = Field(default_factory=list)
    page_info: PageInfo
