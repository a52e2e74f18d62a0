"""Repository implementations."""

from budgetnorm.infrastructure.repositories.memory import (
    InMemoryLineItemRepository,
    InMemoryPopulationRepository,
    LineItemRecord,
)

__all__ = ["InMemoryLineItemRepository", "InMemoryPopulationRepository", "LineItemRecord"]
