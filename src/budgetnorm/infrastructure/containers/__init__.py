"""Dependency injection containers."""

from budgetnorm.infrastructure.containers.container import (
    Container,
    get_container,
    reset_container,
    set_container,
)

__all__ = ["Container", "get_container", "set_container", "reset_container"]
