from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from docodm.consistency import ScanConsistency
from docodm.query.options import QueryOptions


@runtime_checkable
class DocumentStore(Protocol):
    """What the session needs from a key/value + query document store.

    Documents cross this boundary as UTF-8 JSON text; query rows come back
    already parsed. `insert` raises `DocumentExistsError` for a taken key and
    `replace` raises `DocumentNotFoundError` for a missing one, or
    `ConcurrentModificationError` when `rev` no longer matches. Other store
    failures are raised as the store's own exceptions.
    """

    async def get(self, collection: str, key: str) -> Optional[str]: ...

    async def get_and_touch(self, collection: str, key: str, expiry: int) -> Optional[str]: ...

    async def upsert(self, collection: str, key: Optional[str], source: str, expiry: int) -> dict[str, Any]: ...

    async def insert(self, collection: str, key: Optional[str], source: str, expiry: int) -> dict[str, Any]: ...

    async def replace(
        self, collection: str, key: str, source: str, expiry: int, rev: Optional[str] = None
    ) -> dict[str, Any]: ...

    async def remove(self, collection: str, key: str) -> bool: ...

    async def exists(self, collection: str, key: str) -> bool: ...

    async def query(
        self,
        statement: str,
        bind_vars: dict[str, Any],
        consistency: ScanConsistency,
        options: Optional[QueryOptions] = None,
    ) -> tuple[list[Any], dict[str, Any]]: ...

    async def begin_transaction(self, write: Sequence[str], read: Sequence[str] = ()) -> Any: ...

    async def commit_transaction(self, handle: Any) -> None: ...

    async def abort_transaction(self, handle: Any) -> None: ...
