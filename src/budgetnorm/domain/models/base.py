"""Base classes for domain models."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable value object compared by value."""

    model_config = ConfigDict(frozen=True)
