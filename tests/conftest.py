import logging
import sys

import pytest
from pydiction import Matcher

from docodm.codec.json_codec import JsonDocumentCodec
from docodm.connection.session import DocumentSession
from docodm.settings import Settings
from tests.fakes import InMemoryDocumentStore

exclude = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "taskName",
}


@pytest.fixture(autouse=True)
def add_log(caplog):
    class CustomFormatter(logging.Formatter):
        def format(self, record):
            formatted_record = record.getMessage()

            for i in record.__dict__:
                if i not in exclude:
                    formatted_record += f"\n{i}=\n{record.__dict__[i]}"

            return formatted_record

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(CustomFormatter())
    logger = logging.getLogger("docodm")
    logger.addHandler(handler)
    with caplog.at_level(logging.DEBUG, "docodm"):
        yield
    logger.removeHandler(handler)


@pytest.fixture
def codec() -> JsonDocumentCodec:
    return JsonDocumentCodec()


@pytest.fixture
def store(codec: JsonDocumentCodec) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(codec=codec)


@pytest.fixture
def session(store: InMemoryDocumentStore, codec: JsonDocumentCodec) -> DocumentSession:
    return DocumentSession(store=store, codec=codec, settings=Settings())


@pytest.fixture
def matcher() -> Matcher:
    return Matcher()
