import asyncio
import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Sequence, Type, Union, cast

import aioarango
from aioarango.collection import Collection

from docodm.indexes import FullTextIndex, Indexes, PersistentIndex, TTLIndex
from docodm.models.base import collection_name, metadata_for

if TYPE_CHECKING:
    from aioarango import ArangoClient
    from aioarango.collection import StandardCollection
    from aioarango.database import StandardDatabase

    from docodm.models.base import DocumentModel

logger = logging.getLogger(__name__)

_INDEX_MAPPING: dict[Type[Indexes], Callable[..., Awaitable[Any]]] = {
    PersistentIndex: Collection.add_persistent_index,
    FullTextIndex: Collection.add_fulltext_index,
    TTLIndex: Collection.add_ttl_index,
}

DUPLICATE_NAME_ERROR = 1207


async def get_or_create_collection(
    db: "StandardDatabase", model: Union[str, Type["DocumentModel"]]
) -> "StandardCollection":
    name = collection_name(model)
    if not await db.has_collection(name):
        try:
            return await cast(Awaitable["StandardCollection"], db.create_collection(name))
        except aioarango.exceptions.CollectionCreateError as e:
            if e.error_code != DUPLICATE_NAME_ERROR:
                raise e

    return db.collection(name)


async def iterate_cursor(cursor) -> list[Any]:
    return [doc async for doc in cursor]


async def get_or_create_db(
    client: "ArangoClient", db: str, user: str = "root", password: str = "", auth_method: str = "basic", **create_params
) -> "StandardDatabase":
    sys_db = await client.db("_system", username=user, password=password)

    if not await sys_db.has_database(db):
        await sys_db.create_database(db, **create_params)

    return await client.db(db, username=user, password=password, auth_method=auth_method)


def model_indexes(model: Type["DocumentModel"]) -> list[Indexes]:
    indexes = list(model.Collection.indexes or [])
    if metadata_for(model).expiry is not None and not any(isinstance(i, TTLIndex) for i in indexes):
        indexes.append(TTLIndex())
    return indexes


async def create_indexes(collection: "StandardCollection", indexes: Sequence[Indexes]) -> list[Any]:
    if indexes:
        logger.debug("creating indexes", extra={"indexes": indexes, "collection": collection.name})
    requests = []
    for index in indexes:
        params = dataclasses.asdict(index)
        params["fields"] = list(params["fields"])
        requests.append(_INDEX_MAPPING[type(index)](collection, **params))
    return list(await asyncio.gather(*requests))


async def init_model(database: "StandardDatabase", model: Type["DocumentModel"]):
    collection = await get_or_create_collection(database, model)
    await create_indexes(collection, model_indexes(model))


async def init_models(database: "StandardDatabase", *models: Type["DocumentModel"]):
    await asyncio.gather(*[init_model(database, model) for model in models])
