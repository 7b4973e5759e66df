from unittest.mock import AsyncMock, MagicMock

import aioarango
import pytest

from docodm.connection import utils
from docodm.connection.session import DocumentSession
from docodm.connection.utils import (
    DUPLICATE_NAME_ERROR,
    get_or_create_collection,
    init_models,
    model_indexes,
)
from docodm.indexes import PersistentIndex, TTLIndex
from docodm.models import CollectionConfig, DocumentMetadata, DocumentModel, Expiry


class Person(DocumentModel):
    name: str

    class Collection(CollectionConfig):
        name = "people"
        indexes = [PersistentIndex(fields=["name"], unique=True)]


class LoginToken(DocumentModel):
    user: str

    class Collection(CollectionConfig):
        name = "tokens"
        metadata = DocumentMetadata(expiry=Expiry(minutes=30))


@pytest.fixture
def index_calls(monkeypatch):
    calls = {}
    for index_type in (PersistentIndex, TTLIndex):
        calls[index_type] = AsyncMock()
        monkeypatch.setitem(utils._INDEX_MAPPING, index_type, calls[index_type])
    return calls


@pytest.fixture
def database():
    database = MagicMock()
    database.has_collection = AsyncMock(return_value=False)
    database.create_collection = AsyncMock(side_effect=lambda name: MagicMock(name=name))
    return database


def duplicate_name_error(code=DUPLICATE_NAME_ERROR):
    error = aioarango.exceptions.CollectionCreateError.__new__(aioarango.exceptions.CollectionCreateError)
    error.error_code = code
    return error


def test_model_indexes_adds_ttl_index_for_expiring_models():
    assert model_indexes(Person) == [PersistentIndex(fields=["name"], unique=True)]
    assert model_indexes(LoginToken) == [TTLIndex()]


async def test_init_models(database, index_calls):
    await init_models(database, Person, LoginToken)

    assert {c.args[0] for c in database.create_collection.await_args_list} == {"people", "tokens"}
    persistent = index_calls[PersistentIndex].await_args
    assert persistent.kwargs == {
        "fields": ["name"],
        "unique": True,
        "sparse": None,
        "name": None,
        "in_background": None,
    }
    ttl = index_calls[TTLIndex].await_args
    assert ttl.kwargs["fields"] == ["expires_at"]
    assert ttl.kwargs["expiry_time"] == 0


async def test_existing_collection_is_reused(database):
    database.has_collection.return_value = True
    collection = await get_or_create_collection(database, "people")
    database.create_collection.assert_not_awaited()
    assert collection is database.collection.return_value


async def test_concurrent_create_is_tolerated(database):
    database.create_collection.side_effect = duplicate_name_error()
    collection = await get_or_create_collection(database, Person)
    assert collection is database.collection.return_value
    database.collection.assert_called_once_with("people")


async def test_other_create_errors_propagate(database):
    database.create_collection.side_effect = duplicate_name_error(code=1)
    with pytest.raises(aioarango.exceptions.CollectionCreateError):
        await get_or_create_collection(database, Person)


async def test_session_init_models(database, index_calls):
    session = DocumentSession(database=database)
    await session.init_models(Person)
    database.create_collection.assert_awaited_once_with("people")
    index_calls[PersistentIndex].assert_awaited_once()


def test_init_models_is_exported():
    from docodm.connection import init_models as exported

    assert exported is init_models
