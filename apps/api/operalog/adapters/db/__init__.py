"""Relational datastore adapters."""

from .asyncpg_datastore import AsyncpgDatastore
from .base import Datastore, DatastoreError

__all__ = ["AsyncpgDatastore", "Datastore", "DatastoreError"]
