"""MyContacts - Result wrapper.

Two-variant outcome type used at the data-source boundary so that read
failures reach callers as values rather than raised exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying a payload."""

    data: T

    @property
    def succeeded(self) -> bool:
        """True when the payload is present (not None)."""
        return self.data is not None


@dataclass(frozen=True)
class Error:
    """Failed outcome carrying the underlying cause."""

    exception: Exception

    @property
    def succeeded(self) -> bool:
        return False


Result = Success[T] | Error


__all__ = ["Success", "Error", "Result"]
