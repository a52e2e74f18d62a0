"""Use cases."""

from budgetnorm.application.use_cases.aggregated_line_items import (
    ExecutionStrategy,
    GetAggregatedLineItemsRequest,
    GetAggregatedLineItemsUseCase,
)

__all__ = [
    "ExecutionStrategy",
    "GetAggregatedLineItemsRequest",
    "GetAggregatedLineItemsUseCase",
]
