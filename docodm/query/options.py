from dataclasses import dataclass
from typing import Any, Optional


class Options:
    _map: dict = {}

    def as_kwargs(self) -> dict[str, Any]:
        return {name: value for name, value in self._map.items() if value is not None}


@dataclass
class QueryOptions(Options):
    count: Optional[bool] = None
    batch_size: Optional[int] = None
    ttl: Optional[int] = None
    full_count: Optional[bool] = None
    max_runtime: Optional[float] = None
    memory_limit: Optional[int] = None
    fail_on_warning: Optional[bool] = None
    profile: Optional[bool] = None

    def __post_init__(self):
        self._map = {
            "count": self.count,
            "batch_size": self.batch_size,
            "ttl": self.ttl,
            "full_count": self.full_count,
            "max_runtime": self.max_runtime,
            "memory_limit": self.memory_limit,
            "fail_on_warning": self.fail_on_warning,
            "profile": self.profile,
        }
