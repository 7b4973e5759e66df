from .arango import ArangoDocumentStore
from .session import DocumentSession
from .store import DocumentStore
from .utils import init_models

__all__ = ["ArangoDocumentStore", "DocumentSession", "DocumentStore", "init_models"]
