"""Database management for PulseMap."""

from .base import OutbreakStore, WriteResult
from .connection import (
    build_conninfo,
    close_connection_pools,
    get_connection,
    get_connection_pool,
)
from .init import init_database, validate_connection
from .outbreaks import PostgresOutbreakStore
from .runs import RunManager

__all__ = [
    "OutbreakStore",
    "PostgresOutbreakStore",
    "RunManager",
    "WriteResult",
    "build_conninfo",
    "close_connection_pools",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
