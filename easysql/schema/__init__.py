"""easysql statement state: value types and the statement container."""
from easysql.schema.container import StatementContainer
from easysql.schema.types import BoundParameter, DbType, SortOrder

__all__ = [
    "BoundParameter",
    "DbType",
    "SortOrder",
    "StatementContainer",
]
