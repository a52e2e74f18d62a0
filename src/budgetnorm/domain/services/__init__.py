"""Pure domain services for factor generation and normalization."""

from budgetnorm.domain.services.aggregation import (
    aggregate_rows,
    apply_aggregate_filters,
    sort_by_amount,
)
from budgetnorm.domain.services.factor_maps import (
    FactorMapGenerator,
    create_factor_datasets,
    dataset_to_factor_map,
    find_latest_value_before,
    generate_factor_map,
    get_factor_or_default,
)
from budgetnorm.domain.services.multipliers import (
    MultiplierCompositor,
    compute_combined_factor_map,
    identity_factor_map,
)
from budgetnorm.domain.services.population import (
    PopulationDenominatorResolver,
    country_population,
    county_population,
    filtered_population,
)
from budgetnorm.domain.services.series import (
    apply_currency,
    apply_growth,
    apply_inflation,
    apply_per_capita,
    apply_percent_gdp,
    normalize_data,
)

__all__ = [
    "aggregate_rows",
    "apply_aggregate_filters",
    "sort_by_amount",
    "FactorMapGenerator",
    "generate_factor_map",
    "find_latest_value_before",
    "dataset_to_factor_map",
    "create_factor_datasets",
    "get_factor_or_default",
    "MultiplierCompositor",
    "compute_combined_factor_map",
    "identity_factor_map",
    "PopulationDenominatorResolver",
    "country_population",
    "county_population",
    "filtered_population",
    "apply_inflation",
    "apply_currency",
    "apply_per_capita",
    "apply_percent_gdp",
    "apply_growth",
    "normalize_data",
]
