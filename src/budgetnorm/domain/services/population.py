"""Per-capita population denominators.

The denominator depends on the dimensional filter, not on the reporting
year: it is computed once per query and reused for every period.

- No entity-like selector: total country population, summed from the
  county-level unit of each county (Bucharest from its municipality).
- Otherwise: population of the matching units. Units whose county is
  already selected are dropped so they are not counted twice.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

import structlog

from budgetnorm.domain.models.classification import AnalyticsFilter
from budgetnorm.domain.models.population import (
    COUNTY_COUNCIL_ENTITY_TYPE,
    EntityRecord,
    UatRecord,
)
from budgetnorm.domain.ports.data_providers import PopulationRepository

logger = structlog.get_logger(__name__)


def country_population(uats: Iterable[UatRecord]) -> Decimal:
    return county_population(uats, county_codes=None)


def county_population(uats: Iterable[UatRecord], county_codes: set[str] | None) -> Decimal:
    """Sum the county-level population of each selected county (all when None)."""
    per_county: dict[str, Decimal] = {}
    for uat in uats:
        if county_codes is not None and uat.county_code not in county_codes:
            continue
        value = uat.population if uat.is_county_level else Decimal(0)
        current = per_county.get(uat.county_code)
        if current is None or value > current:
            per_county[uat.county_code] = value
    return sum(per_county.values(), Decimal(0))


def _entity_matches(
    entity: EntityRecord,
    filter: AnalyticsFilter,
    uats_by_id: dict[int, UatRecord],
) -> bool:
    if filter.entity_cuis and entity.cui not in filter.entity_cuis:
        return False
    if filter.entity_types and entity.entity_type not in filter.entity_types:
        return False
    if filter.is_uat is not None and entity.is_uat != filter.is_uat:
        return False
    if filter.uat_ids and str(entity.uat_id) not in filter.uat_ids:
        return False
    if filter.county_codes:
        uat = uats_by_id.get(entity.uat_id) if entity.uat_id is not None else None
        if uat is None or uat.county_code not in filter.county_codes:
            return False
    return True


def filtered_population(
    filter: AnalyticsFilter,
    uats: Iterable[UatRecord],
    entities: Iterable[EntityRecord],
) -> Decimal:
    """Population of the units selected by the filter, de-duplicated by county.

    Returns zero when the selectors match no unit with population data.
    """
    uat_list = list(uats)
    if not filter.has_entity_like_filter:
        return country_population(uat_list)

    uats_by_id = {uat.id: uat for uat in uat_list}

    selected_uat_ids: set[int] = set()
    selected_counties: set[str] = set(filter.county_codes or [])
    for raw_id in filter.uat_ids or []:
        try:
            selected_uat_ids.add(int(raw_id))
        except ValueError:
            logger.warning("Ignoring non-numeric UAT id", uat_id=raw_id)

    if filter.entity_cuis or filter.entity_types or filter.is_uat is not None:
        for entity in entities:
            if not _entity_matches(entity, filter, uats_by_id):
                continue
            uat = uats_by_id.get(entity.uat_id) if entity.uat_id is not None else None
            if entity.entity_type == COUNTY_COUNCIL_ENTITY_TYPE and uat is not None:
                selected_counties.add(uat.county_code)
            elif entity.uat_id is not None:
                selected_uat_ids.add(entity.uat_id)
            # Entities without a UAT do not contribute

    total = Decimal(0)
    for uat_id in selected_uat_ids:
        uat = uats_by_id.get(uat_id)
        if uat is None or uat.county_code in selected_counties:
            continue
        total += uat.population

    if selected_counties:
        total += county_population(uat_list, selected_counties)

    return total


class PopulationDenominatorResolver:
    """Resolves the per-capita denominator for a query."""

    def __init__(self, population_repository: PopulationRepository) -> None:
        self._repository = population_repository

    async def resolve(self, filter: AnalyticsFilter) -> Decimal:
        """Resolve the denominator population for ``filter``.

        Raises:
            DatabaseError: If the population lookup fails
        """
        if not filter.has_entity_like_filter:
            population = await self._repository.get_country_population()
            scope = "country"
        else:
            population = await self._repository.get_filtered_population(filter)
            scope = "filtered"

        logger.debug("Resolved population denominator", scope=scope, population=str(population))
        return population
