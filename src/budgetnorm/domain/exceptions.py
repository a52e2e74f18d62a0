"""Domain exceptions raised by collaborators.

The aggregation use case converts these into ``PipelineError`` values; nothing
raised here crosses the use case boundary.
"""

from __future__ import annotations


class BudgetNormError(Exception):
    """Base exception for budgetnorm."""


class DatabaseError(BudgetNormError):
    """A repository query failed."""

    retryable = True

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class QueryTimeoutError(DatabaseError):
    """A repository query exceeded its statement timeout."""


class DatasetNotFoundError(BudgetNormError):
    def __init__(self, dataset_id: str) -> None:
        super().__init__(f"Dataset '{dataset_id}' not found")
        self.dataset_id = dataset_id


class DatasetValidationError(BudgetNormError):
    """A dataset file is malformed."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class NormalizationDatasetError(BudgetNormError):
    """Required normalization datasets are missing."""

    def __init__(self, missing_datasets: list[str], errors: dict[str, str]) -> None:
        details = "\n".join(
            f"  - {dataset_id}: {errors.get(dataset_id, 'Unknown error')}"
            for dataset_id in missing_datasets
        )
        super().__init__(f"Required normalization datasets are missing:\n{details}")
        self.missing_datasets = missing_datasets
        self.errors = errors


def is_timeout_error(cause: BaseException) -> bool:
    """Check whether a driver exception signals a statement timeout."""
    msg = str(cause).lower()
    return "timeout" in msg or "canceling statement due to statement timeout" in msg
