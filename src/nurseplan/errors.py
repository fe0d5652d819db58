from __future__ import annotations

from typing import Optional


class InfeasibleDemandError(Exception):
    """Raised when the required shifts exceed what the nurses can work in a week."""

    def __init__(self, required: int, capacity: int) -> None:
        self.required = required
        self.capacity = capacity
        super().__init__(
            f"Schedule is not possible. {required} shifts needed, "
            f"{capacity} shifts available"
        )


class InvalidInputError(ValueError):
    """Raised when a requirement or preference record has the wrong shape."""


class PreferenceValidationError(InvalidInputError):
    """Raised when a nurse preference record fails validation."""


class SolverError(RuntimeError):
    """Raised when the ILP solver cannot produce a complete schedule."""

    def __init__(self, message: str, status: str, detail: Optional[str] = None):
        self.status = status
        self.detail = detail
        super().__init__(message)
