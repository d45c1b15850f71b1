"""easysql execution layer: executor and row-mapper capabilities."""
from easysql.execute.base import Executor, ReaderAction, Row, RowMapper
from easysql.execute.mapping import CallableRowMapper, ModelRowMapper
from easysql.execute.sqlite import SQLiteExecutor

__all__ = [
    "CallableRowMapper",
    "Executor",
    "ModelRowMapper",
    "ReaderAction",
    "Row",
    "RowMapper",
    "SQLiteExecutor",
]
