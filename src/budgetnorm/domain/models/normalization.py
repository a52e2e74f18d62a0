"""Normalization configuration and factor models."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import Field

from budgetnorm.domain.models.base import ValueObject

# Period label -> decimal value. Used both for raw factor series and for
# the combined per-period multiplier table.
FactorMap = dict[str, Decimal]
PeriodFactorMap = dict[str, Decimal]


class Currency(str, Enum):
    RON = "RON"
    EUR = "EUR"
    USD = "USD"


class NormalizationMode(str, Enum):
    """How aggregated amounts are scaled."""

    TOTAL = "total"
    PER_CAPITA = "per_capita"
    PERCENT_GDP = "percent_gdp"


class NormalizationConfig(ValueObject):
    """Requested normalization.

    ``percent_gdp`` is exclusive: ``currency`` and ``inflation_adjusted`` are
    ignored when it is the active mode.
    """

    mode: NormalizationMode = Field(default=NormalizationMode.TOTAL)
    currency: Currency = Field(default=Currency.RON)
    inflation_adjusted: bool = Field(default=False)

    @property
    def needs_normalization(self) -> bool:
        """Whether any transform applies at all."""
        return (
            self.inflation_adjusted
            or self.currency != Currency.RON
            or self.mode in (NormalizationMode.PER_CAPITA, NormalizationMode.PERCENT_GDP)
        )


class TransformationOptions(NormalizationConfig):
    """Normalization of a time series, optionally followed by period growth."""

    show_period_growth: bool = Field(default=False)


class SeriesPoint(ValueObject):
    """One point of a time series being normalized."""

    x: str = Field(..., description="Period label (YYYY, YYYY-QN or YYYY-MM)")
    year: int = Field(..., description="Year of the period")
    y: Decimal = Field(..., description="Value")


class FactorDatasets(ValueObject):
    """Sparse source data for one dimension at up to three frequencies."""

    yearly: FactorMap = Field(..., description='Yearly factors keyed "YYYY"')
    quarterly: FactorMap | None = Field(
        default=None, description='Quarterly factors keyed "YYYY-QN"'
    )
    monthly: FactorMap | None = Field(default=None, description='Monthly factors keyed "YYYY-MM"')


class FactorBundle(ValueObject):
    """Per-period factors for every normalization dimension.

    Maps are not guaranteed to cover every requested period nor to be sorted.
    """

    cpi: FactorMap = Field(default_factory=dict, description="CPI factors (reference year = 1)")
    eur: FactorMap = Field(default_factory=dict, description="RON per EUR exchange rates")
    usd: FactorMap = Field(default_factory=dict, description="RON per USD exchange rates")
    gdp: FactorMap = Field(default_factory=dict, description="Nominal GDP in RON")
    population: FactorMap = Field(default_factory=dict, description="Population per period")


# Legacy request modes that bundle a currency shortcut into the mode value.
_LEGACY_MODES: dict[str, tuple[NormalizationMode, Currency]] = {
    "total": (NormalizationMode.TOTAL, Currency.RON),
    "total_euro": (NormalizationMode.TOTAL, Currency.EUR),
    "per_capita": (NormalizationMode.PER_CAPITA, Currency.RON),
    "per_capita_euro": (NormalizationMode.PER_CAPITA, Currency.EUR),
    "percent_gdp": (NormalizationMode.PERCENT_GDP, Currency.RON),
}


def resolve_normalization_request(
    normalization: str | None = None,
    currency: Currency | str | None = None,
    inflation_adjusted: bool | None = None,
) -> NormalizationConfig:
    """Build a NormalizationConfig from request-level options.

    Accepts the legacy ``total_euro`` / ``per_capita_euro`` modes. An explicit
    currency overrides the one implied by a legacy mode, except for
    ``percent_gdp`` which always runs in RON.

    Raises:
        ValueError: If the mode or currency is unknown
    """
    key = normalization or "total"
    if key not in _LEGACY_MODES:
        raise ValueError(f"Unknown normalization mode: {key}")
    mode, legacy_currency = _LEGACY_MODES[key]

    if mode == NormalizationMode.PERCENT_GDP:
        resolved_currency = Currency.RON
    elif currency is not None:
        resolved_currency = Currency(currency)
    else:
        resolved_currency = legacy_currency

    return NormalizationConfig(
        mode=mode,
        currency=resolved_currency,
        inflation_adjusted=inflation_adjusted is True,
    )
