# fedimodel/object.py
"""
Link and Object, the foundations most Fediverse entities build on.

Object adds an identifier, a name and a `url` property to Entity. The
`url` property is one of the more creative ones on the wire, e.g. Peertube:

    "url": [
        {"type": "Link", "mediaType": "text/html", "href": "https://.../videos/watch/..."},
        {"type": "Link", "mediaType": "application/x-mpegURL", "href": "https://.../master.m3u8"}
    ]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .entity import Entity, EntityType
from .wire import decode_untagged, list_of, optional, parse_str, parse_url, put, required


@dataclass(frozen=True, kw_only=True)
class Link(Entity):
    """
    A link; `type` defaults to Link when a producer omits it.

    Attributes:
        href: Target URL
        media_type: `mediaType` of the target, if given
    """
    href: str
    media_type: Optional[str] = None

    _default_type = EntityType.LINK

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = super()._fields_from_dict(data)
        fields["href"] = required(data, "href", parse_url)
        fields["media_type"] = optional(data, "mediaType", parse_str)
        return fields

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["href"] = self.href
        put(data, "mediaType", self.media_type)
        return data


class UrlReferenceKind(Enum):
    URL = "url"
    LINK = "link"
    LINK_LIST = "link_list"
    URL_LIST = "url_list"


@dataclass(frozen=True)
class UrlReference:
    """
    Any of the ways to reference URLs: a URL, a Link, a list of Links or
    a list of URLs. Use as_list() / any_url() rather than inspecting kind.
    """
    kind: UrlReferenceKind
    value: Union[str, Link, List[Link], List[str]]

    @classmethod
    def from_value(cls, value: Any) -> "UrlReference":
        kind, parsed = decode_untagged(
            value,
            [
                (UrlReferenceKind.URL, parse_url),
                (UrlReferenceKind.LINK, Link.from_dict),
                (UrlReferenceKind.LINK_LIST, list_of(Link.from_dict)),
                (UrlReferenceKind.URL_LIST, list_of(parse_url)),
            ],
            "UrlReference",
        )
        return cls(kind, parsed)

    def to_value(self) -> Any:
        if self.kind is UrlReferenceKind.LINK:
            return self.value.to_dict()
        if self.kind is UrlReferenceKind.LINK_LIST:
            return [link.to_dict() for link in self.value]
        if self.kind is UrlReferenceKind.URL_LIST:
            return list(self.value)
        return self.value

    def as_list(self) -> List[str]:
        """All referenced URLs in source order."""
        if self.kind is UrlReferenceKind.URL:
            return [self.value]
        if self.kind is UrlReferenceKind.LINK:
            return [self.value.href]
        if self.kind is UrlReferenceKind.LINK_LIST:
            return [link.href for link in self.value]
        return list(self.value)

    def any_url(self) -> Optional[str]:
        """
        Any URL in this reference. No ordering is promised, in practice
        it is the first one.
        """
        urls = self.as_list()
        return urls[0] if urls else None


@dataclass(frozen=True, kw_only=True)
class Object(Entity):
    """
    ActivityStreams Object.

    Attributes:
        id: Unique object identifier (required)
        name: Object name, if any
        url: `url` property, if present and well-formed
    """
    id: str
    name: Optional[str] = None
    url: Optional[UrlReference] = None

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = super()._fields_from_dict(data)
        fields["id"] = required(data, "id", parse_url)
        fields["name"] = optional(data, "name", parse_str)
        fields["url"] = optional(data, "url", UrlReference.from_value)
        return fields

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["id"] = self.id
        put(data, "name", self.name)
        if self.url is not None:
            data["url"] = self.url.to_value()
        return data

    def object_url(self) -> Optional[str]:
        """Any URL from the `url` property."""
        return self.url.any_url() if self.url is not None else None


class ObjectReferenceKind(Enum):
    OBJECT = "object"
    URL = "url"


@dataclass(frozen=True)
class ObjectReference:
    """An Object either embedded inline or referenced by URL."""
    kind: ObjectReferenceKind
    value: Union[Object, str]

    @classmethod
    def from_value(cls, value: Any) -> "ObjectReference":
        kind, parsed = decode_untagged(
            value,
            [
                (ObjectReferenceKind.OBJECT, Object.from_dict),
                (ObjectReferenceKind.URL, parse_url),
            ],
            "ObjectReference",
        )
        return cls(kind, parsed)

    def to_value(self) -> Any:
        if self.kind is ObjectReferenceKind.OBJECT:
            return self.value.to_dict()
        return self.value

    @property
    def object_id(self) -> str:
        if self.kind is ObjectReferenceKind.OBJECT:
            return self.value.id
        return self.value
