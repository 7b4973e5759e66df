import datetime
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Sequence, Union

from aioarango.collection import StandardCollection
from aioarango.database import StandardDatabase
from aioarango.exceptions import (
    DocumentInsertError,
    DocumentReplaceError,
    DocumentRevisionError,
)

from docodm.codec.document import Document
from docodm.codec.json_codec import DocumentCodec, JsonDocumentCodec
from docodm.connection.utils import iterate_cursor
from docodm.consistency import ScanConsistency
from docodm.consts import EXPIRES_AT, ID, KEY, REV, TTL_IN_SECONDS_INCLUSIVE_END
from docodm.exceptions import (
    ConcurrentModificationError,
    DocumentExistsError,
    DocumentNotFoundError,
)
from docodm.query.options import QueryOptions
from docodm.transaction import current_transaction

if TYPE_CHECKING:
    from aioarango.database import TransactionDatabase

logger = logging.getLogger(__name__)

CONFLICT_ERROR = 1200
DOCUMENT_NOT_FOUND_ERROR = 1202
UNIQUE_CONSTRAINT_ERROR = 1210

_CONSISTENCY_OPTIONS: dict[ScanConsistency, dict[str, Any]] = {
    ScanConsistency.NOT_BOUNDED: {"cache": True},
    ScanConsistency.REQUEST_PLUS: {"cache": False},
}


def absolute_expiry(expiry: int, now: Optional[datetime.datetime] = None) -> Optional[int]:
    if expiry <= 0:
        return None
    if expiry > TTL_IN_SECONDS_INCLUSIVE_END:
        return expiry
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return int(now.timestamp()) + expiry


@dataclass(frozen=True)
class ArangoTransaction:
    store: "ArangoDocumentStore"
    database: "TransactionDatabase"


class ArangoDocumentStore:
    def __init__(self, database: StandardDatabase, codec: Optional[DocumentCodec] = None):
        self.database = database
        self.codec = codec or JsonDocumentCodec()

    def _active_database(self) -> Union[StandardDatabase, "TransactionDatabase"]:
        context = current_transaction()
        if context is not None and isinstance(context.attachment, ArangoTransaction):
            if context.attachment.store is self:
                return context.attachment.database
        return self.database

    def _collection(self, name: str) -> StandardCollection:
        return self._active_database().collection(name)

    def _encode(self, raw: Optional[dict[str, Any]]) -> Optional[str]:
        if raw is None:
            return None
        content = {k: v for k, v in raw.items() if k not in (ID, EXPIRES_AT)}
        return self.codec.encode(Document(raw.get(KEY)).set_content(content))

    async def get(self, collection: str, key: str) -> Optional[str]:
        return self._encode(await self._collection(collection).get(key))

    async def get_and_touch(self, collection: str, key: str, expiry: int) -> Optional[str]:
        coll = self._collection(collection)
        if not await coll.has(key):
            return None
        result = await coll.update(
            {KEY: key, EXPIRES_AT: absolute_expiry(expiry)}, keep_none=False, return_new=True
        )
        logger.debug("touched document", extra={"collection": collection, "key": key, "expiry": expiry})
        return self._encode(result["new"])

    def _body(self, key: Optional[str], source: str, expiry: int) -> dict[str, Any]:
        body = self.codec.decode(source, Document()).export()
        if key is not None:
            body[KEY] = key
        expires_at = absolute_expiry(expiry)
        if expires_at is not None:
            body[EXPIRES_AT] = expires_at
        return body

    async def upsert(self, collection: str, key: Optional[str], source: str, expiry: int) -> dict[str, Any]:
        result = await self._collection(collection).insert(self._body(key, source, expiry), overwrite=True)
        return {KEY: result[KEY], REV: result[REV]}

    async def insert(self, collection: str, key: Optional[str], source: str, expiry: int) -> dict[str, Any]:
        try:
            result = await self._collection(collection).insert(self._body(key, source, expiry))
        except DocumentInsertError as e:
            if e.error_code == UNIQUE_CONSTRAINT_ERROR:
                raise DocumentExistsError(f"{collection}/{key} already exists") from e
            raise
        return {KEY: result[KEY], REV: result[REV]}

    async def replace(
        self, collection: str, key: str, source: str, expiry: int, rev: Optional[str] = None
    ) -> dict[str, Any]:
        body = self._body(key, source, expiry)
        if rev is not None:
            body[REV] = rev

        try:
            result = await self._collection(collection).replace(body, check_rev=rev is not None)
        except DocumentRevisionError as e:
            raise ConcurrentModificationError(f"{collection}/{key} no longer has revision {rev}") from e
        except DocumentReplaceError as e:
            if e.error_code == DOCUMENT_NOT_FOUND_ERROR:
                raise DocumentNotFoundError(f"{collection}/{key}") from e
            if e.error_code == CONFLICT_ERROR:
                raise ConcurrentModificationError(f"{collection}/{key} no longer has revision {rev}") from e
            raise
        return {KEY: result[KEY], REV: result[REV]}

    async def remove(self, collection: str, key: str) -> bool:
        return bool(await self._collection(collection).delete(key, ignore_missing=True))

    async def exists(self, collection: str, key: str) -> bool:
        return await self._collection(collection).has(key)

    async def query(
        self,
        statement: str,
        bind_vars: dict[str, Any],
        consistency: ScanConsistency,
        options: Optional[QueryOptions] = None,
    ) -> tuple[list[Any], dict[str, Any]]:
        kwargs = {**(options.as_kwargs() if options else {}), **_CONSISTENCY_OPTIONS[consistency]}
        cursor = await self._active_database().aql.execute(statement, bind_vars=bind_vars, **kwargs)
        rows = await iterate_cursor(cursor)
        return rows, cursor.statistics() or {}

    async def begin_transaction(self, write: Sequence[str], read: Sequence[str] = ()) -> ArangoTransaction:
        database = self.database.begin_transaction(read=list(read) or None, write=list(write) or None)
        if inspect.isawaitable(database):
            database = await database
        logger.debug("began stream transaction", extra={"write": write, "read": read})
        return ArangoTransaction(store=self, database=database)

    async def commit_transaction(self, handle: ArangoTransaction) -> None:
        await handle.database.commit_transaction()

    async def abort_transaction(self, handle: ArangoTransaction) -> None:
        await handle.database.abort_transaction()
