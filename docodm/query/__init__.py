from .executor import QueryExecutor
from .options import QueryOptions
from .query import Query, QueryResult

__all__ = ["Query", "QueryResult", "QueryOptions", "QueryExecutor"]
