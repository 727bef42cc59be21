"""Inspection and dialect helpers shared by migration scripts.

Helpers take a bind: an Engine, or a Connection when called inside an
open transaction so the inspection sees its uncommitted DDL.
"""
from sqlalchemy import inspect
from sqlalchemy.engine import Engine


def get_engine(engine=None) -> Engine:
    if engine is not None:
        return engine
    from database.database import engine as default_engine
    return default_engine


def table_exists(bind, table_name: str) -> bool:
    """Check if a table exists."""
    return inspect(bind).has_table(table_name)


def column_exists(bind, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    columns = inspect(bind).get_columns(table_name)
    return any(col['name'] == column_name for col in columns)


def index_exists(bind, table_name: str, index_name: str) -> bool:
    """Check if an index exists on a table."""
    indexes = inspect(bind).get_indexes(table_name)
    return any(idx['name'] == index_name for idx in indexes)


def is_postgres(bind) -> bool:
    return bind.dialect.name == "postgresql"


def json_type(bind) -> str:
    return "JSONB" if is_postgres(bind) else "JSON"


def uuid_type(bind) -> str:
    # SQLAlchemy's Uuid type stores 32-char hex strings outside Postgres
    return "UUID" if is_postgres(bind) else "CHAR(32)"


def timestamp_type(bind) -> str:
    return "TIMESTAMPTZ" if is_postgres(bind) else "TIMESTAMP"
