# fedimodel/attachment.py
"""
Attachments: media, documents and profile fields.

On actors, attachments are mostly PropertyValue profile fields, which is
also where the `fedineko:index` consent property lives.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .entity import EntityType
from .errors import DecodeError
from .wire import (
    Multiplicity,
    decode_single_or_list,
    encode_single_or_list,
    optional,
    parse_mapping,
    parse_str,
    parse_url,
    put,
)


@dataclass(frozen=True)
class Attachment:
    """
    An attachment of any kind.

    Attributes:
        entity_type: Type of attachment, e.g. PropertyValue or Document
        content: Attached content (`content` or `value`)
        name: Name, e.g. a property name
        url: Link to attachment data (`url` or `href`)
        media_type: e.g. image/jpeg (`mediaType`)
    """
    entity_type: EntityType
    content: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    media_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Attachment":
        data = parse_mapping(data)
        if data.get("type") is None:
            raise DecodeError("Missing required property", field="type")
        return cls(
            entity_type=EntityType.from_wire(data["type"]),
            content=optional(data, ("content", "value"), parse_str),
            name=optional(data, "name", parse_str),
            url=optional(data, ("url", "href"), parse_url),
            media_type=optional(data, "mediaType", parse_str),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.entity_type.value}
        put(data, "content", self.content)
        put(data, "name", self.name)
        put(data, "url", self.url)
        put(data, "mediaType", self.media_type)
        return data

    def __repr__(self) -> str:
        return (
            f"Attachment(type={self.entity_type.value}, content={self.content or ''!r}, "
            f"name={self.name or ''!r}, url={self.url or ''!r}, media_type={self.media_type or ''!r})"
        )


@dataclass(frozen=True)
class AttachmentReference:
    """The `attachment` property: one Attachment or a list of them."""
    kind: Multiplicity
    items: List[Attachment]

    @classmethod
    def from_value(cls, value: Any) -> "AttachmentReference":
        kind, items = decode_single_or_list(value, Attachment.from_dict, "AttachmentReference")
        return cls(kind, items)

    def to_value(self) -> Any:
        return encode_single_or_list(self.kind, self.items, Attachment.to_dict)

    def as_list(self) -> List[Attachment]:
        return list(self.items)
