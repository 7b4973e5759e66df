import math
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from docodm.exceptions import UnsupportedValueError

_SIMPLE_TYPES = (str, bool, int, float, Decimal)


def _wrap(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        raise UnsupportedValueError(f"attribute value {value} is not a finite number")
    if isinstance(value, Decimal) and not value.is_finite():
        raise UnsupportedValueError(f"attribute value {value} is not a finite number")
    if value is None or isinstance(value, (_SIMPLE_TYPES, Document, DocumentList)):
        return value
    if isinstance(value, Mapping):
        return Document().set_content(value)
    if isinstance(value, (list, tuple)):
        return DocumentList(value)
    raise UnsupportedValueError(f"attribute of type {type(value).__qualname__} cannot be stored and must be converted")


def _export(value: Any) -> Any:
    if isinstance(value, (Document, DocumentList)):
        return value.export()
    return value


def _nested_size(value: Any) -> int:
    if isinstance(value, (Document, DocumentList)):
        return value.size(recursive=True)
    return 0


class Document:
    """A JSON document as stored under a single key.

    Values are restricted to what JSON can represent; mappings and sequences
    put into the document are converted into nested `Document` and
    `DocumentList` instances so the whole tree can be exported and sized.
    """

    DEFAULT_EXPIRATION = 0

    def __init__(self, key: Optional[str] = None, expiration: int = DEFAULT_EXPIRATION):
        self.key = key
        self.expiration = expiration
        self._content: dict[str, Any] = {}

    def put(self, name: str, value: Any) -> "Document":
        self._content[name] = _wrap(value)
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self._content.get(name, default)

    def contains_key(self, name: str) -> bool:
        return name in self._content

    def contains_value(self, value: Any) -> bool:
        return value in self._content.values()

    def size(self, recursive: bool = False) -> int:
        size = len(self._content)
        if not recursive or not size:
            return size
        return size + sum(_nested_size(v) for v in self._content.values())

    def export(self) -> dict[str, Any]:
        return {name: _export(self._content[name]) for name in sorted(self._content)}

    @property
    def content(self) -> dict[str, Any]:
        return self._content

    @content.setter
    def content(self, content: Mapping[str, Any]):
        self.set_content(content)

    def set_content(self, content: Mapping[str, Any]) -> "Document":
        self._content = {}
        for name, value in content.items():
            self.put(name, value)
        return self

    def __eq__(self, other):
        if not isinstance(other, Document):
            return NotImplemented
        return (self.key, self.expiration, self.export()) == (other.key, other.expiration, other.export())

    def __repr__(self):
        return f"Document(key={self.key!r}, expiration={self.expiration}, content={self._content!r})"


class DocumentList:
    def __init__(self, payload: Optional[Iterable[Any]] = None):
        self._payload: list[Any] = []
        for value in payload or ():
            self.put(value)

    def put(self, value: Any) -> "DocumentList":
        self._payload.append(_wrap(value))
        return self

    def get(self, index: int) -> Any:
        return self._payload[index]

    def size(self, recursive: bool = False) -> int:
        size = len(self._payload)
        if not recursive or not size:
            return size
        return size + sum(_nested_size(v) for v in self._payload)

    def export(self) -> list[Any]:
        return [_export(v) for v in self._payload]

    def contains_value(self, value: Any) -> bool:
        return value in self._payload

    def is_empty(self) -> bool:
        return not self._payload

    def __len__(self):
        return len(self._payload)

    def __eq__(self, other):
        if not isinstance(other, DocumentList):
            return NotImplemented
        return self.export() == other.export()

    def __repr__(self):
        return f"DocumentList({self._payload!r})"


Storable = Union[Document, DocumentList]
