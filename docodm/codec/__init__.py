from .document import Document, DocumentList, Storable
from .json_codec import DocumentCodec, JsonDocumentCodec

__all__ = [
    "Document",
    "DocumentList",
    "Storable",
    "DocumentCodec",
    "JsonDocumentCodec",
]
