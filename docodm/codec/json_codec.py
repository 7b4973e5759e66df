import json
import logging
from decimal import Decimal
from functools import lru_cache
from typing import Any, Optional, Protocol, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from docodm.codec.document import Document, DocumentList, Storable
from docodm.exceptions import ParseError, UnsupportedValueError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentCodec(Protocol):
    def encode(self, document: Storable) -> str: ...

    def decode(self, source: Union[str, bytes], target: Document) -> Storable: ...

    def decode_fragment(self, source: Union[str, bytes], shape: Type[T]) -> T: ...


@lru_cache(maxsize=256)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def _default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__qualname__} is not JSON serializable")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


class JsonDocumentCodec:
    """Translates between `Document` trees and their JSON text.

    Output is compact with sorted keys, and non-ASCII characters are written
    as they are rather than as ``\\uXXXX`` escapes.
    """

    def encode(self, document: Storable) -> str:
        try:
            return json.dumps(
                document.export(),
                ensure_ascii=False,
                separators=(",", ":"),
                sort_keys=True,
                allow_nan=False,
                default=_default,
            )
        except ValueError as e:
            raise UnsupportedValueError(f"document cannot be written as JSON: {e}") from e

    def decode(self, source: Union[str, bytes], target: Document) -> Storable:
        try:
            payload = json.loads(source, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            raise ParseError(f"could not decode JSON: {e}") from e

        try:
            if isinstance(payload, dict):
                for name, value in payload.items():
                    target.put(name, value)
                return target
            if isinstance(payload, list):
                return DocumentList(payload)
        except RecursionError as e:
            raise ParseError("JSON to decode is nested too deeply") from e

        raise ParseError("JSON to decode needs to start as array or object")

    def decode_fragment(self, source: Union[str, bytes], shape: Type[T]) -> T:
        try:
            return _adapter(shape).validate_json(source)
        except ValidationError as e:
            logger.debug("fragment decoding failed", extra={"shape": shape, "errors": e.errors()})
            raise ParseError(f"could not decode JSON into {getattr(shape, '__name__', shape)}: {e}") from e

    def to_document(self, obj: Any, key: Optional[str] = None) -> Document:
        content = _adapter(type(obj)).dump_python(obj, mode="json", by_alias=True, exclude_none=True)
        if not isinstance(content, dict):
            raise ParseError(f"{type(obj).__qualname__} does not map onto a document")
        return Document(key).set_content(content)
