from .codec import Document, DocumentList, JsonDocumentCodec
from .connection import ArangoDocumentStore, DocumentSession, DocumentStore
from .consistency import ScanConsistency
from .models import CollectionConfig, DocumentMetadata, DocumentModel, Expiry
from .query import Query, QueryExecutor, QueryOptions, QueryResult
from .settings import Settings
from .transaction import (
    TransactionContext,
    bind_transaction,
    check_for_transaction,
    current_transaction,
    is_in_transaction,
    run_in_worker,
    with_transaction_check,
)

__version__ = "0.1.0"
__all__ = [
    "Document",
    "DocumentList",
    "JsonDocumentCodec",
    "ArangoDocumentStore",
    "DocumentSession",
    "DocumentStore",
    "ScanConsistency",
    "CollectionConfig",
    "DocumentMetadata",
    "DocumentModel",
    "Expiry",
    "Query",
    "QueryExecutor",
    "QueryOptions",
    "QueryResult",
    "Settings",
    "TransactionContext",
    "bind_transaction",
    "check_for_transaction",
    "current_transaction",
    "is_in_transaction",
    "run_in_worker",
    "with_transaction_check",
]
