from decimal import Decimal

import pytest

from docodm.codec.document import Document, DocumentList
from docodm.exceptions import UnsupportedValueError


def test_put_converts_nested_containers():
    doc = Document("key").put("address", {"city": "Berlin"}).put("tags", ("a", "b"))
    assert isinstance(doc.get("address"), Document)
    assert isinstance(doc.get("tags"), DocumentList)
    assert doc.export() == {"address": {"city": "Berlin"}, "tags": ["a", "b"]}


def test_export_sorts_keys():
    doc = Document().put("zeta", 1).put("alpha", 2)
    assert list(doc.export()) == ["alpha", "zeta"]


def test_size():
    doc = Document().put("a", 1).put("b", {"c": 2, "d": {"e": 3}}).put("f", [1, 2])
    assert doc.size() == 3
    assert doc.size(recursive=True) == 3 + 2 + 1 + 2


def test_contains():
    doc = Document().put("language", "french")
    assert doc.contains_key("language")
    assert not doc.contains_key("country")
    assert doc.contains_value("french")


def test_rejects_unsupported_values():
    with pytest.raises(UnsupportedValueError):
        Document().put("when", object())
    with pytest.raises(TypeError):
        DocumentList().put({1, 2})


def test_accepts_decimal():
    doc = Document().put("price", Decimal("9.99"))
    assert doc.get("price") == Decimal("9.99")


def test_content_setter_replaces_content():
    doc = Document().put("old", 1)
    doc.content = {"new": [1, {"x": None}]}
    assert doc.export() == {"new": [1, {"x": None}]}


def test_equality_includes_key_and_expiration():
    assert Document("a").put("x", 1) == Document("a").put("x", 1)
    assert Document("a").put("x", 1) != Document("b").put("x", 1)
    assert Document("a", expiration=10) != Document("a")


def test_document_list():
    items = DocumentList([1, "two"]).put({"three": 3})
    assert len(items) == 3
    assert not items.is_empty()
    assert items.get(1) == "two"
    assert items.contains_value("two")
    assert items.size(recursive=True) == 4
    assert DocumentList().is_empty()
