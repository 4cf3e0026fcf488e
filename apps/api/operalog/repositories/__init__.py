"""Persistence layer for users, ships and daily reports."""

from .base import OperaLogRepository, ReportRecord, ShipRecord, UserRecord
from .memory import InMemoryStore
from .postgres import PostgresRepository

__all__ = [
    "InMemoryStore",
    "OperaLogRepository",
    "PostgresRepository",
    "ReportRecord",
    "ShipRecord",
    "UserRecord",
]
