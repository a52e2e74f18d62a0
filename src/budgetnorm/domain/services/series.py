"""Per-point normalization of time series.

Each transform looks up the factor matching the point's period label, so
factor maps must share the series' frequency. Transforms run in this order:

1. ``percent_gdp`` (exclusive): value / GDP * 100
2. otherwise: inflation (x CPI), then currency (/ FX rate), then per capita
   (/ population)
3. period-over-period growth, when requested
"""

from __future__ import annotations

from decimal import Decimal

from budgetnorm.domain.models.normalization import (
    Currency,
    FactorBundle,
    FactorMap,
    NormalizationMode,
    SeriesPoint,
    TransformationOptions,
)
from budgetnorm.domain.services.factor_maps import get_factor_or_default

_ZERO = Decimal(0)
_HUNDRED = Decimal(100)


def _with_value(point: SeriesPoint, value: Decimal) -> SeriesPoint:
    return point.model_copy(update={"y": value})


def apply_inflation(data: list[SeriesPoint], cpi: FactorMap) -> list[SeriesPoint]:
    """Multiply each value by its period's CPI factor (1 when missing)."""
    return [_with_value(point, point.y * get_factor_or_default(cpi, point.x)) for point in data]


def apply_currency(
    data: list[SeriesPoint], currency: Currency, factors: FactorBundle
) -> list[SeriesPoint]:
    """Convert RON values by dividing by the period's exchange rate.

    A zero rate leaves the point unchanged.
    """
    if currency == Currency.RON:
        return data

    rates = factors.eur if currency == Currency.EUR else factors.usd
    result: list[SeriesPoint] = []
    for point in data:
        rate = get_factor_or_default(rates, point.x)
        result.append(point if rate.is_zero() else _with_value(point, point.y / rate))
    return result


def apply_per_capita(data: list[SeriesPoint], population: FactorMap) -> list[SeriesPoint]:
    result: list[SeriesPoint] = []
    for point in data:
        value = population.get(point.x)
        if value is None or value.is_zero():
            result.append(point)
        else:
            result.append(_with_value(point, point.y / value))
    return result


def apply_percent_gdp(data: list[SeriesPoint], gdp: FactorMap) -> list[SeriesPoint]:
    """Express each value as a percentage of the period's nominal GDP.

    A missing or zero GDP zeroes the point.
    """
    result: list[SeriesPoint] = []
    for point in data:
        value = gdp.get(point.x)
        if value is None or value.is_zero():
            result.append(_with_value(point, _ZERO))
        else:
            result.append(_with_value(point, point.y / value * _HUNDRED))
    return result


def apply_growth(data: list[SeriesPoint]) -> list[SeriesPoint]:
    """Replace values with the percentage change from the previous point.

    Assumes chronological order. The first point, and any point following a
    zero, gets 0.
    """
    result: list[SeriesPoint] = []
    previous: SeriesPoint | None = None
    for point in data:
        if previous is None or previous.y.is_zero():
            result.append(_with_value(point, _ZERO))
        else:
            result.append(_with_value(point, (point.y - previous.y) / previous.y * _HUNDRED))
        previous = point
    return result


def normalize_data(
    data: list[SeriesPoint], options: TransformationOptions, factors: FactorBundle
) -> list[SeriesPoint]:
    """Run the transform pipeline over a series.

    Args:
        data: Points to transform, in chronological order for growth
        options: Requested normalization and growth flag
        factors: Factor maps keyed by the series' period labels

    Returns:
        New points; the input list is not modified
    """
    result = list(data)

    if options.mode == NormalizationMode.PERCENT_GDP:
        result = apply_percent_gdp(result, factors.gdp)
    else:
        if options.inflation_adjusted:
            result = apply_inflation(result, factors.cpi)
        if options.currency != Currency.RON:
            result = apply_currency(result, options.currency, factors)
        if options.mode == NormalizationMode.PER_CAPITA:
            result = apply_per_capita(result, factors.population)

    if options.show_period_growth:
        result = apply_growth(result)

    return result
