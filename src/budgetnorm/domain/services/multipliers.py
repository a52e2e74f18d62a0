"""Composition of normalization transforms into one multiplier per period.

Two paths:

- ``percent_gdp`` (exclusive): ``100 / gdp``. Inflation and currency are
  ignored. A missing or zero GDP yields a zero multiplier, so amounts in that
  period are zeroed rather than skipped.
- standard (``total`` / ``per_capita``): start at 1, then in this order
  multiply by CPI, divide by the FX rate, divide by the population
  denominator. A missing or zero factor leaves the multiplier unchanged.

The order matters: CPI and FX are both expressed against nominal RON, and
per-capita scaling applies to the converted amount.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from budgetnorm.domain.models.normalization import (
    Currency,
    FactorBundle,
    FactorMap,
    NormalizationConfig,
    NormalizationMode,
    PeriodFactorMap,
)

_ONE = Decimal(1)
_ZERO = Decimal(0)
_HUNDRED = Decimal(100)


def _rate_map(currency: Currency, factors: FactorBundle) -> FactorMap | None:
    if currency == Currency.EUR:
        return factors.eur
    if currency == Currency.USD:
        return factors.usd
    return None


class MultiplierCompositor:
    """Computes the combined multiplier table handed to aggregation."""

    def compose(
        self,
        config: NormalizationConfig,
        factors: FactorBundle,
        period_labels: Iterable[str],
        population_denominator: Decimal | None = None,
    ) -> PeriodFactorMap:
        """Compute one combined multiplier per period label.

        Args:
            config: Requested normalization
            factors: Per-period factors (may be sparse)
            period_labels: Labels to produce multipliers for
            population_denominator: Filter-based population for ``per_capita``.
                When None, the per-period ``population`` series is used instead.

        Returns:
            Multiplier for every label in ``period_labels``
        """
        return {
            label: self.multiplier_for(config, factors, label, population_denominator)
            for label in period_labels
        }

    def multiplier_for(
        self,
        config: NormalizationConfig,
        factors: FactorBundle,
        label: str,
        population_denominator: Decimal | None = None,
    ) -> Decimal:
        if config.mode == NormalizationMode.PERCENT_GDP:
            gdp = factors.gdp.get(label)
            if gdp is None or gdp.is_zero():
                return _ZERO
            return _HUNDRED / gdp

        multiplier = _ONE

        if config.inflation_adjusted:
            cpi = factors.cpi.get(label)
            if cpi is not None and not cpi.is_zero():
                multiplier = multiplier * cpi

        rates = _rate_map(config.currency, factors)
        if rates is not None:
            rate = rates.get(label)
            if rate is not None and not rate.is_zero():
                multiplier = multiplier / rate

        if config.mode == NormalizationMode.PER_CAPITA:
            if population_denominator is not None:
                # Filter-based denominator; zero disables per-capita scaling
                if not population_denominator.is_zero():
                    multiplier = multiplier / population_denominator
            else:
                population = factors.population.get(label)
                if population is not None and not population.is_zero():
                    multiplier = multiplier / population

        return multiplier


def compute_combined_factor_map(
    config: NormalizationConfig,
    factors: FactorBundle,
    period_labels: Iterable[str],
    population_denominator: Decimal | None = None,
) -> PeriodFactorMap:
    return MultiplierCompositor().compose(config, factors, period_labels, population_denominator)


def identity_factor_map(period_labels: Iterable[str]) -> PeriodFactorMap:
    """Multiplier table used when no transform is requested."""
    return {label: _ONE for label in period_labels}
