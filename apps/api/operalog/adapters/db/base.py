"""Datastore capability consumed by repositories."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"
_CONNECTION_EXCEPTION_CLASS = "08"


class DatastoreError(Exception):
    """Opaque datastore failure carrying the SQLSTATE when one is known."""

    def __init__(self, message: str, *, sqlstate: str | None = None, connection_failed: bool = False) -> None:
        self.sqlstate = sqlstate
        self.connection_failed = connection_failed or (
            sqlstate is not None and sqlstate.startswith(_CONNECTION_EXCEPTION_CLASS)
        )
        super().__init__(message)

    @property
    def is_unique_violation(self) -> bool:
        return self.sqlstate == UNIQUE_VIOLATION


class Datastore(ABC):
    """Executes parameterized SQL using ``$n`` positional placeholders."""

    @abstractmethod
    async def fetch(self, query: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run ``query`` and return every resulting row as a mapping."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return whether the datastore answers a trivial query."""


__all__ = [
    "CHECK_VIOLATION",
    "Datastore",
    "DatastoreError",
    "FOREIGN_KEY_VIOLATION",
    "UNIQUE_VIOLATION",
]
