import dataclasses
from dataclasses import dataclass, field
from typing import Any, Optional

from docodm.consistency import ScanConsistency
from docodm.query.options import QueryOptions


@dataclass(frozen=True)
class Query:
    statement: str
    bind_vars: dict[str, Any] = field(default_factory=dict)
    consistency: Optional[ScanConsistency] = None
    options: Optional[QueryOptions] = None

    def with_consistency(self, consistency: Optional[ScanConsistency]) -> "Query":
        return dataclasses.replace(self, consistency=consistency)


@dataclass
class QueryResult:
    rows: list[Any]
    consistency: ScanConsistency
    statistics: dict[str, Any] = field(default_factory=dict)

    def __iter__(self):
        return iter(self.rows)

    def __len__(self):
        return len(self.rows)
