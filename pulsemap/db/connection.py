"""Postgres connection pooling."""

from contextlib import contextmanager
from typing import Any, Dict, Generator

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

# One pool per distinct conninfo, opened lazily
_pools: Dict[str, ConnectionPool] = {}


def build_conninfo(config: Dict[str, Any]) -> str:
    """
    libpq connection string for a postgres config section.

    Secrets must already be resolved (see Config.get_db_config); empty
    password and sslmode are left out so libpq falls back to its defaults.
    """
    params: Dict[str, Any] = {
        "host": config.get("host") or "localhost",
        "port": config.get("port") or 5432,
        "dbname": config.get("database") or "postgres",
        "user": config.get("user") or "postgres",
    }
    if config.get("password"):
        params["password"] = config["password"]
    if config.get("sslmode"):
        params["sslmode"] = config["sslmode"]
    return make_conninfo(**params)


def get_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Get or create the pool for this database."""
    conninfo = build_conninfo(config)
    pool = _pools.get(conninfo)
    if pool is None:
        pool = ConnectionPool(
            conninfo,
            min_size=1,
            max_size=10,
            kwargs={"row_factory": dict_row},
            open=True,
        )
        _pools[conninfo] = pool
    return pool


def close_connection_pools() -> None:
    """Close every open pool."""
    while _pools:
        _, pool = _pools.popitem()
        pool.close()


@contextmanager
def get_connection(config: Dict[str, Any]) -> Generator[psycopg.Connection, None, None]:
    """Borrow a dict-row connection from the pool."""
    with get_connection_pool(config).connection() as conn:
        yield conn
