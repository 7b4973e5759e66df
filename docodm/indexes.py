import sys
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from docodm.consts import EXPIRES_AT

if sys.version_info >= (3, 10):
    from typing import TypeAlias
else:
    from typing_extensions import TypeAlias


@dataclass()
class Index: ...


@dataclass
class PersistentIndex(Index):
    fields: Sequence[str]
    unique: Optional[bool] = None
    sparse: Optional[bool] = None
    name: Optional[str] = None
    in_background: Optional[bool] = None


@dataclass
class FullTextIndex(Index):
    fields: Sequence[str]
    min_length: Optional[int] = None
    name: Optional[str] = None
    in_background: Optional[bool] = None


@dataclass
class TTLIndex(Index):
    fields: Sequence[str] = (EXPIRES_AT,)
    # 0 makes the store treat the attribute value itself as the expiry timestamp
    expiry_time: int = 0
    name: Optional[str] = None
    in_background: Optional[bool] = None


Indexes: TypeAlias = Union[PersistentIndex, FullTextIndex, TTLIndex]
