"""Base class for all stored documents."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Document(BaseModel):
    """
    Base class for documents kept in the document store.

    Fields are snake_case in Python and camelCase in storage and API payloads.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        extra="ignore",
    )

    id: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        """Serialize for storage (camelCase, without the key)."""
        return self.model_dump(by_alias=True, exclude={"id"})

    @classmethod
    def from_document(cls, data: Dict[str, Any]):
        return cls.model_validate(data)


class Embedded(BaseModel):
    """Base class for sub-objects nested inside a document."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        extra="ignore",
    )
