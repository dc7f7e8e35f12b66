# fedimodel/tag.py
"""
Tags attached to actors and content.

Despite the name, `tag` carries hashtags, mentions, custom emoji and the
occasional producer-specific thing (e.g. NeoDB's TVSeason).
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .entity import Entity
from .image import ImageReference
from .object import UrlReference
from .wire import (
    Multiplicity,
    decode_single_or_list,
    encode_single_or_list,
    optional,
    parse_str,
    parse_url,
)


@dataclass(frozen=True, kw_only=True)
class Tag(Entity):
    """
    A tag, mention or emoji.

    Attributes:
        id: Reference to tag details, e.g. a hashtag timeline (`id` or `href`)
        name: Tag name, e.g. "#tag" or ":emoji:" (`name` or `tag`)
        url: Human-facing page for the tag, if given
        icon: Image for emoji (`icon` or `image`)
    """
    id: Optional[UrlReference] = None
    name: Optional[str] = None
    url: Optional[str] = None
    icon: Optional[ImageReference] = None

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = super()._fields_from_dict(data)
        fields["id"] = optional(data, ("id", "href"), UrlReference.from_value)
        fields["name"] = optional(data, ("name", "tag"), parse_str)
        fields["url"] = optional(data, "url", parse_url)
        fields["icon"] = optional(data, ("icon", "image"), ImageReference.from_value)
        return fields

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.id is not None:
            data["id"] = self.id.to_value()
        if self.name is not None:
            data["name"] = self.name
        if self.url is not None:
            data["url"] = self.url
        if self.icon is not None:
            data["icon"] = self.icon.to_value()
        return data

    def object_id(self) -> Optional[str]:
        return self.id.any_url() if self.id is not None else None


@dataclass(frozen=True)
class TagReference:
    """The `tag` property: one Tag or a list of them."""
    kind: Multiplicity
    items: List[Tag]

    @classmethod
    def from_value(cls, value: Any) -> "TagReference":
        kind, items = decode_single_or_list(value, Tag.from_dict, "TagReference")
        return cls(kind, items)

    def to_value(self) -> Any:
        return encode_single_or_list(self.kind, self.items, Tag.to_dict)

    def as_list(self) -> List[Tag]:
        return list(self.items)
