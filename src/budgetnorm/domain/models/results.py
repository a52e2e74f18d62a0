"""Pipeline result models."""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

PipelineErrorType = Literal["DatabaseError", "TimeoutError", "NormalizationDataError"]


class PipelineError(BaseModel):
    """Typed failure returned instead of raising across the use case boundary."""

    type: PipelineErrorType = Field(..., description="Failure kind")
    message: str = Field(..., description="Human readable failure description")
    retryable: bool = Field(default=False, description="Whether the caller may retry")


# Base result wrapper for use case results
class PipelineResult(BaseModel, Generic[T]):
    """Result of a pipeline run with success/error handling."""

    success: bool = Field(..., description="Whether the run succeeded")
    data: T | None = Field(default=None, description="Result payload")
    error: PipelineError | None = Field(default=None, description="Failure if the run failed")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")

    @classmethod
    def ok(cls, data: T, **metadata: Any) -> PipelineResult[T]:
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: PipelineError, **metadata: Any) -> PipelineResult[T]:
        return cls(success=False, error=error, metadata=metadata)
