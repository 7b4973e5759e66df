from .base import CollectionConfig, DocumentModel, collection_name, metadata_for
from .metadata import DocumentMetadata, Expiry

__all__ = [
    "CollectionConfig",
    "DocumentModel",
    "DocumentMetadata",
    "Expiry",
    "collection_name",
    "metadata_for",
]
