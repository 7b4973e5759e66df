import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from docodm.codec.document import Document
from docodm.consts import KEY, REV, SCORE
from docodm.indexes import Indexes
from docodm.models.metadata import NO_METADATA, DocumentMetadata


TDocumentModel = TypeVar("TDocumentModel", bound="DocumentModel")
OPERATIONAL_FIELDS = {"key", "rev"}


class CollectionConfig:
    name: str
    indexes: Sequence[Indexes] = []
    metadata: DocumentMetadata = NO_METADATA


class DocumentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    key: Optional[str] = Field(None, alias=KEY)
    rev: Optional[str] = Field(None, alias=REV)

    class Collection(CollectionConfig): ...

    def save_dict(self, exclude: Optional[Iterable[str]] = None) -> dict[str, Any]:
        excluded = set(OPERATIONAL_FIELDS)
        score_property = self.Collection.metadata.score_property
        if score_property:
            excluded.add(score_property)
        if exclude:
            excluded.update(exclude)
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude=excluded)

    def to_document(self, now: Optional[datetime.datetime] = None) -> Document:
        expiration = self.Collection.metadata.get_expiry(now)
        return Document(self.key, expiration=expiration).set_content(self.save_dict())

    @classmethod
    def from_document(cls: Type[TDocumentModel], source: Union[Document, Mapping[str, Any]]) -> TDocumentModel:
        if isinstance(source, Document):
            content = source.export()
            content.setdefault(KEY, source.key)
        else:
            content = dict(source)

        score = content.pop(SCORE, None)
        score_property = cls.Collection.metadata.score_property
        if score_property and score is not None:
            content[score_property] = score

        return cls.model_validate(content)


def metadata_for(model: Union[DocumentModel, Type[DocumentModel]]) -> DocumentMetadata:
    return getattr(model.Collection, "metadata", NO_METADATA)


def collection_name(model: Union[str, DocumentModel, Type[DocumentModel]]) -> str:
    if isinstance(model, str):
        return model
    return model.Collection.name
