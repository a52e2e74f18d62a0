"""Administrative-unit reference data used for population denominators."""

from decimal import Decimal

from pydantic import Field

from budgetnorm.domain.models.base import ValueObject

# Bucharest has no county-level SIRUTA unit; its municipality carries the
# population for the whole county code.
BUCHAREST_COUNTY_CODE = "B"
BUCHAREST_SIRUTA_CODE = "179132"

COUNTY_COUNCIL_ENTITY_TYPE = "admin_county_council"


class UatRecord(ValueObject):
    """Territorial administrative unit (UAT)."""

    id: int
    county_code: str
    siruta_code: str
    population: Decimal = Field(default=Decimal(0))

    @property
    def is_county_level(self) -> bool:
        if self.county_code == BUCHAREST_COUNTY_CODE:
            return self.siruta_code == BUCHAREST_SIRUTA_CODE
        return self.siruta_code == self.county_code


class EntityRecord(ValueObject):
    """Public entity reporting budget execution."""

    cui: str
    entity_type: str | None = None
    is_uat: bool = False
    uat_id: int | None = None
