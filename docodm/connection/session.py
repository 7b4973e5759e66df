import logging
from contextlib import asynccontextmanager
from typing import (
    TYPE_CHECKING,
    Any,
    AsyncIterator,
    Mapping,
    Optional,
    Sequence,
    Type,
    Union,
    overload,
)

from aioarango import ArangoClient
from aioarango.database import StandardDatabase

from docodm.codec.document import Document
from docodm.codec.json_codec import DocumentCodec, JsonDocumentCodec
from docodm.connection.arango import ArangoDocumentStore
from docodm.connection.store import DocumentStore
from docodm.connection.utils import get_or_create_db, init_models
from docodm.consistency import ScanConsistency, resolve_consistency
from docodm.consts import KEY, REV
from docodm.exceptions import DocumentNotFoundError, SessionNotInitializedError
from docodm.models.base import DocumentModel, collection_name, metadata_for
from docodm.query.executor import QueryExecutor
from docodm.query.query import Query, QueryResult
from docodm.settings import Settings
from docodm.transaction import (
    TransactionContext,
    bind_transaction,
    current_transaction,
    verify_not_in_transaction,
)

if TYPE_CHECKING:
    from docodm.models.base import TDocumentModel

logger = logging.getLogger(__name__)

CollectionRef = Union[str, Type[DocumentModel]]


class DocumentSession:
    @overload
    def __init__(
        self, *, store: DocumentStore, codec: Optional[DocumentCodec] = None, settings: Optional[Settings] = None
    ): ...

    @overload
    def __init__(
        self, *, database: StandardDatabase, codec: Optional[DocumentCodec] = None, settings: Optional[Settings] = None
    ): ...

    @overload
    def __init__(
        self, *, client: ArangoClient, codec: Optional[DocumentCodec] = None, settings: Optional[Settings] = None
    ): ...

    def __init__(
        self,
        *,
        store: Optional[DocumentStore] = None,
        database: Optional[StandardDatabase] = None,
        client: Optional[ArangoClient] = None,
        codec: Optional[DocumentCodec] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.codec = codec or JsonDocumentCodec()
        self.client = client
        self.executor: Optional[QueryExecutor] = None
        self.store: Optional[DocumentStore] = None

        if store is None and database is not None:
            store = ArangoDocumentStore(database, self.codec)
        if store is not None:
            self._attach(store)

    def _attach(self, store: DocumentStore):
        self.store = store
        self.executor = QueryExecutor(store, self.settings.default_consistency)

    async def initialize(self):
        if self.store is None:
            if self.client is None:
                logger.debug("connecting to arangodb", extra={"hosts": self.settings.arango_hosts})
                self.client = ArangoClient(hosts=self.settings.arango_hosts)
            database = await get_or_create_db(
                self.client, self.settings.database, user=self.settings.username, password=self.settings.password
            )
            self._attach(ArangoDocumentStore(database, self.codec))

    async def init_models(self, *models: Type[DocumentModel]):
        store = self._require_store()
        if isinstance(store, ArangoDocumentStore):
            await init_models(store.database, *models)
        else:
            logger.debug("store does not manage collections", extra={"store": type(store).__name__})

    @property
    def initialized(self) -> bool:
        return self.store is not None

    def _require_store(self) -> DocumentStore:
        if self.store is None:
            raise SessionNotInitializedError(
                f"you should call `await {self.initialize.__name__}()` before using the session or create it with a"
                " `store` or a `database`"
            )
        return self.store

    def _require_executor(self) -> QueryExecutor:
        self._require_store()
        return self.executor  # type: ignore[return-value]

    @property
    def default_consistency(self) -> ScanConsistency:
        if self.executor is None:
            return self.settings.default_consistency
        return self.executor.default_consistency

    @default_consistency.setter
    def default_consistency(self, consistency: ScanConsistency):
        self._require_executor().default_consistency = ScanConsistency(consistency)

    async def save(self, document: "TDocumentModel") -> "TDocumentModel":
        store = self._require_store()
        name, stored = collection_name(type(document)), document.to_document()
        logger.debug("saving document", extra={"collection": name, "key": stored.key, "expiry": stored.expiration})
        result = await store.upsert(name, stored.key, self.codec.encode(stored), stored.expiration)
        return self._stored(document, result)

    async def insert(self, document: "TDocumentModel") -> "TDocumentModel":
        store = self._require_store()
        name, stored = collection_name(type(document)), document.to_document()
        logger.debug("inserting document", extra={"collection": name, "key": stored.key})
        result = await store.insert(name, stored.key, self.codec.encode(stored), stored.expiration)
        return self._stored(document, result)

    async def replace(self, document: "TDocumentModel") -> "TDocumentModel":
        """Overwrites an existing document.

        When the model carries a `rev` the write only succeeds if the stored
        document still has that revision, otherwise `ConcurrentModificationError`
        is raised.
        """
        store = self._require_store()
        name, stored = collection_name(type(document)), document.to_document()
        if stored.key is None:
            raise ValueError("cannot replace a document without a key")
        logger.debug("replacing document", extra={"collection": name, "key": stored.key, "rev": document.rev})
        result = await store.replace(name, stored.key, self.codec.encode(stored), stored.expiration, document.rev)
        return self._stored(document, result)

    @staticmethod
    def _stored(document: "TDocumentModel", result: Mapping[str, Any]) -> "TDocumentModel":
        document.key = result[KEY]
        document.rev = result.get(REV)
        return document

    async def get(
        self, model: Type["TDocumentModel"], key: str, should_raise: bool = False
    ) -> Optional["TDocumentModel"]:
        store = self._require_store()
        name = collection_name(model)
        metadata = metadata_for(model)
        if metadata.is_touch_on_read:
            verify_not_in_transaction(f"get with touch on read ({name})")
            source = await store.get_and_touch(name, key, metadata.get_expiry())
        else:
            source = await store.get(name, key)

        if source is None:
            if should_raise:
                raise DocumentNotFoundError(f"{name}/{key}")
            return None

        document = self.codec.decode(source, Document(key))
        if not isinstance(document, Document):
            raise DocumentNotFoundError(f"{name}/{key} is not an object document")
        return model.from_document(document)

    async def exists(self, model: CollectionRef, key: str) -> bool:
        return await self._require_store().exists(collection_name(model), key)

    async def remove(self, document: Union[DocumentModel, CollectionRef], key: Optional[str] = None) -> bool:
        store = self._require_store()
        if isinstance(document, DocumentModel):
            name, key = collection_name(type(document)), key or document.key
        else:
            name = collection_name(document)
        if key is None:
            raise ValueError("cannot remove a document without a key")
        logger.debug("removing document", extra={"collection": name, "key": key})
        return await store.remove(name, key)

    async def query(self, query: Query, consistency: Optional[ScanConsistency] = None) -> QueryResult:
        return await self._require_executor().execute(query, consistency)

    async def find(
        self, model: Type["TDocumentModel"], query: Query, consistency: Optional[ScanConsistency] = None
    ) -> list["TDocumentModel"]:
        executor = self._require_executor()
        effective = resolve_consistency(
            consistency, query.consistency, metadata_for(model).consistency, default=executor.default_consistency
        )
        result = await executor.execute(query, effective)
        return [model.from_document(row) for row in result.rows]

    @asynccontextmanager
    async def transaction(
        self, write: Sequence[CollectionRef] = (), read: Sequence[CollectionRef] = ()
    ) -> AsyncIterator[TransactionContext]:
        outer = current_transaction()
        if outer is not None:
            yield outer
            return

        store = self._require_store()
        handle = await store.begin_transaction(
            [collection_name(c) for c in write], [collection_name(c) for c in read]
        )
        context = TransactionContext(attachment=handle)
        with bind_transaction(context):
            try:
                yield context
            except BaseException:
                logger.debug("aborting transaction", extra={"transaction_id": context.transaction_id})
                await store.abort_transaction(handle)
                raise
            try:
                await store.commit_transaction(handle)
            except BaseException:
                logger.exception(
                    "commit failed, aborting transaction", extra={"transaction_id": context.transaction_id}
                )
                await store.abort_transaction(handle)
                raise
            logger.debug("committed transaction", extra={"transaction_id": context.transaction_id})
