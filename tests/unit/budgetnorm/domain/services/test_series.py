"""Unit tests for time series normalization."""

from decimal import Decimal

import pytest

from budgetnorm.domain.models.normalization import (
    Currency,
    FactorBundle,
    NormalizationMode,
    SeriesPoint,
    TransformationOptions,
)
from budgetnorm.domain.services.series import (
    apply_currency,
    apply_growth,
    apply_inflation,
    apply_per_capita,
    apply_percent_gdp,
    normalize_data,
)


def _series(*values: str) -> list[SeriesPoint]:
    return [
        SeriesPoint(x=str(2022 + i), year=2022 + i, y=Decimal(value))
        for i, value in enumerate(values)
    ]


def _values(points: list[SeriesPoint]) -> list[Decimal]:
    return [point.y for point in points]


@pytest.fixture
def factors() -> FactorBundle:
    return FactorBundle(
        cpi={"2022": Decimal("1.2"), "2023": Decimal("1.5")},
        eur={"2022": Decimal("4"), "2023": Decimal("5")},
        usd={"2023": Decimal("4.5")},
        gdp={"2022": Decimal("1000"), "2023": Decimal("0")},
        population={"2022": Decimal("10"), "2023": Decimal("20")},
    )


@pytest.mark.unit
class TestSeriesTransforms:
    def test_inflation(self, factors: FactorBundle) -> None:
        result = apply_inflation(_series("100", "150", "10"), factors.cpi)

        assert _values(result) == [Decimal("120"), Decimal("225"), Decimal("10")]

    def test_currency(self, factors: FactorBundle) -> None:
        data = _series("100", "150")

        assert apply_currency(data, Currency.RON, factors) == data
        assert _values(apply_currency(data, Currency.EUR, factors)) == [
            Decimal("25"),
            Decimal("30"),
        ]
        # No 2022 USD rate: the point keeps its RON value
        assert _values(apply_currency(data, Currency.USD, factors)) == [
            Decimal("100"),
            Decimal("150") / Decimal("4.5"),
        ]

    def test_zero_rate_leaves_point_unchanged(self) -> None:
        factors = FactorBundle(eur={"2022": Decimal("0")})

        result = apply_currency(_series("100"), Currency.EUR, factors)

        assert _values(result) == [Decimal("100")]

    def test_per_capita(self, factors: FactorBundle) -> None:
        result = apply_per_capita(_series("100", "150", "7"), factors.population)

        assert _values(result) == [Decimal("10"), Decimal("7.5"), Decimal("7")]

    def test_percent_gdp_zeroes_missing_or_zero_gdp(self, factors: FactorBundle) -> None:
        result = apply_percent_gdp(_series("100", "150", "5"), factors.gdp)

        assert _values(result) == [Decimal("10"), Decimal("0"), Decimal("0")]

    def test_growth(self) -> None:
        result = apply_growth(_series("100", "150", "0", "50"))

        assert _values(result) == [Decimal("0"), Decimal("50"), Decimal("-100"), Decimal("0")]
        assert [point.x for point in result] == ["2022", "2023", "2024", "2025"]


@pytest.mark.unit
class TestNormalizeData:
    def test_standard_pipeline_order(self, factors: FactorBundle) -> None:
        options = TransformationOptions(
            mode=NormalizationMode.PER_CAPITA, currency=Currency.EUR, inflation_adjusted=True
        )

        result = normalize_data(_series("100", "150"), options, factors)

        assert _values(result) == [Decimal("3"), Decimal("2.25")]

    def test_percent_gdp_is_exclusive(self, factors: FactorBundle) -> None:
        options = TransformationOptions(
            mode=NormalizationMode.PERCENT_GDP, currency=Currency.EUR, inflation_adjusted=True
        )

        result = normalize_data(_series("100", "150"), options, factors)

        assert _values(result) == [Decimal("10"), Decimal("0")]

    def test_growth_runs_last(self, factors: FactorBundle) -> None:
        options = TransformationOptions(
            mode=NormalizationMode.PER_CAPITA,
            currency=Currency.EUR,
            inflation_adjusted=True,
            show_period_growth=True,
        )

        result = normalize_data(_series("100", "150"), options, factors)

        assert _values(result) == [Decimal("0"), Decimal("-25")]

    def test_input_is_not_modified(self, factors: FactorBundle) -> None:
        data = _series("100", "150")

        normalize_data(data, TransformationOptions(currency=Currency.EUR), factors)

        assert _values(data) == [Decimal("100"), Decimal("150")]
