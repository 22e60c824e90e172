"""Persistence layer for the database catalog source."""

from .database import close_database, get_session, init_database, is_initialized
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import ResourceRepository
from .schema import ResourceModel, create_schema

__all__ = [
    "init_database",
    "get_session",
    "close_database",
    "is_initialized",
    "create_schema",
    "ResourceModel",
    "ResourceRepository",
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
