"""Unit tests for per-capita population denominators."""

from decimal import Decimal

import pytest

from budgetnorm.domain.models import AnalyticsFilter, EntityRecord, UatRecord
from budgetnorm.domain.ports.data_providers import PopulationRepository
from budgetnorm.domain.services.population import (
    PopulationDenominatorResolver,
    country_population,
    county_population,
    filtered_population,
)

UATS = [
    UatRecord(id=1, county_code="CJ", siruta_code="CJ", population=Decimal("700000")),
    UatRecord(id=2, county_code="CJ", siruta_code="54975", population=Decimal("300000")),
    UatRecord(id=3, county_code="B", siruta_code="179132", population=Decimal("1700000")),
    UatRecord(id=4, county_code="B", siruta_code="179141", population=Decimal("200000")),
    UatRecord(id=5, county_code="AB", siruta_code="AB", population=Decimal("330000")),
    UatRecord(id=6, county_code="AB", siruta_code="1017", population=Decimal("70000")),
]

ENTITIES = [
    EntityRecord(cui="CJ-COUNCIL", entity_type="admin_county_council", is_uat=False, uat_id=1),
    EntityRecord(cui="CLUJ-NAPOCA", entity_type="admin_municipality", is_uat=True, uat_id=2),
    EntityRecord(cui="SECTOR-1", entity_type="admin_sector", is_uat=True, uat_id=4),
    EntityRecord(cui="ALBA-IULIA", entity_type="admin_municipality", is_uat=True, uat_id=6),
    EntityRecord(cui="MINISTRY", entity_type="ministry", is_uat=False, uat_id=None),
]


@pytest.mark.unit
class TestCountryPopulation:
    def test_sums_county_level_units_and_bucharest_municipality(self) -> None:
        assert country_population(UATS) == Decimal("2730000")

    def test_county_population_for_selected_counties(self) -> None:
        assert county_population(UATS, {"CJ", "B"}) == Decimal("2400000")

    def test_bucharest_sectors_are_not_county_level(self) -> None:
        assert not UATS[3].is_county_level
        assert UATS[2].is_county_level


@pytest.mark.unit
class TestFilteredPopulation:
    def test_uat_ids(self) -> None:
        filter = AnalyticsFilter(uat_ids=["2", "6"])

        assert filtered_population(filter, UATS, ENTITIES) == Decimal("370000")

    def test_sub_units_of_selected_county_are_not_double_counted(self) -> None:
        filter = AnalyticsFilter(uat_ids=["2"], county_codes=["CJ"])

        assert filtered_population(filter, UATS, ENTITIES) == Decimal("700000")

    def test_county_council_maps_to_county_population(self) -> None:
        filter = AnalyticsFilter(entity_cuis=["CJ-COUNCIL", "CLUJ-NAPOCA"])

        assert filtered_population(filter, UATS, ENTITIES) == Decimal("700000")

    def test_entities_resolve_to_their_units(self) -> None:
        filter = AnalyticsFilter(entity_cuis=["CLUJ-NAPOCA", "SECTOR-1"])

        assert filtered_population(filter, UATS, ENTITIES) == Decimal("500000")

    def test_entity_types_and_is_uat_intersect(self) -> None:
        filter = AnalyticsFilter(entity_types=["admin_municipality"], is_uat=True)

        assert filtered_population(filter, UATS, ENTITIES) == Decimal("370000")

    def test_no_matching_unit_yields_zero(self) -> None:
        filter = AnalyticsFilter(entity_cuis=["MINISTRY"])

        assert filtered_population(filter, UATS, ENTITIES) == Decimal(0)

    def test_non_numeric_uat_ids_are_ignored(self) -> None:
        filter = AnalyticsFilter(uat_ids=["abc", "5"])

        assert filtered_population(filter, UATS, ENTITIES) == Decimal("330000")


@pytest.mark.unit
class TestPopulationDenominatorResolver:
    class RecordingRepository(PopulationRepository):
        def __init__(self) -> None:
            self.calls: list[str] = []

        async def get_country_population(self) -> Decimal:
            self.calls.append("country")
            return Decimal("19000000")

        async def get_filtered_population(self, filter: AnalyticsFilter) -> Decimal:
            self.calls.append("filtered")
            return Decimal("1000")

    @pytest.mark.asyncio
    async def test_country_population_without_entity_filter(self) -> None:
        repository = self.RecordingRepository()
        resolver = PopulationDenominatorResolver(repository)

        population = await resolver.resolve(AnalyticsFilter(functional_prefixes=["65"]))

        assert population == Decimal("19000000")
        assert repository.calls == ["country"]

    @pytest.mark.asyncio
    async def test_filtered_population_with_entity_filter(self) -> None:
        repository = self.RecordingRepository()
        resolver = PopulationDenominatorResolver(repository)

        population = await resolver.resolve(AnalyticsFilter(county_codes=["CJ"]))

        assert population == Decimal("1000")
        assert repository.calls == ["filtered"]
