# fedimodel/image.py
"""
Images referenced from icons, avatars, previews and emoji.

Image is not a complete ActivityPub object: it has neither context nor a
required type, only the properties useful for picking a picture.
"""

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .wire import (
    decode_untagged,
    list_of,
    optional,
    parse_bool,
    parse_dimension,
    parse_mapping,
    parse_str,
    parse_url,
    put,
)


@dataclass(frozen=True)
class Image:
    """
    Image descriptor.

    Attributes:
        url: Link to the image data
        summary: Description or name of the image (`summary` or `name`)
        media_type: e.g. image/png (`mediaType`)
        sensitive: Producer-declared sensitivity flag, not very reliable
        width: Width in pixels
        height: Height in pixels
    """
    url: Optional[str] = None
    summary: Optional[str] = None
    media_type: Optional[str] = None
    sensitive: Optional[bool] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_url(cls, url: str) -> "Image":
        """Image known only by its location."""
        return cls(url=url)

    @classmethod
    def from_dict(cls, data: Any) -> "Image":
        data = parse_mapping(data)
        return cls(
            url=optional(data, "url", parse_url),
            summary=optional(data, ("summary", "name"), parse_str),
            media_type=optional(data, "mediaType", parse_str),
            sensitive=optional(data, "sensitive", parse_bool),
            width=optional(data, "width", parse_dimension),
            height=optional(data, "height", parse_dimension),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": "Image"}
        put(data, "url", self.url)
        put(data, "summary", self.summary)
        put(data, "mediaType", self.media_type)
        put(data, "sensitive", self.sensitive)
        put(data, "width", self.width)
        put(data, "height", self.height)
        return data


def _compare_size(a: Image, b: Image) -> int:
    """
    Order larger images first.

    Width decides when both images have it, then height; otherwise the
    pair is treated as equal so source order is kept.
    """
    if a.width is not None and b.width is not None:
        return b.width - a.width
    if a.height is not None and b.height is not None:
        return b.height - a.height
    return 0


class ImageReferenceKind(Enum):
    URL = "url"
    SINGLE = "single"
    LIST = "list"


@dataclass(frozen=True)
class ImageReference:
    """An image given as a bare URL, one Image, or a list of Images."""
    kind: ImageReferenceKind
    value: Union[str, Image, List[Image]]

    @classmethod
    def from_value(cls, value: Any) -> "ImageReference":
        kind, parsed = decode_untagged(
            value,
            [
                (ImageReferenceKind.URL, parse_url),
                (ImageReferenceKind.SINGLE, Image.from_dict),
                (ImageReferenceKind.LIST, list_of(Image.from_dict)),
            ],
            "ImageReference",
        )
        return cls(kind, parsed)

    def to_value(self) -> Any:
        if self.kind is ImageReferenceKind.SINGLE:
            return self.value.to_dict()
        if self.kind is ImageReferenceKind.LIST:
            return [image.to_dict() for image in self.value]
        return self.value

    def as_list(self) -> List[Image]:
        if self.kind is ImageReferenceKind.URL:
            return [Image.from_url(self.value)]
        if self.kind is ImageReferenceKind.SINGLE:
            return [self.value]
        return list(self.value)

    def get_largest_image(self) -> Optional[Image]:
        """
        Best-effort pick of the largest image.

        This is not a total order: when sizes are missing the first image
        in source order wins. Returns None for an empty list.
        """
        images = sorted(self.as_list(), key=functools.cmp_to_key(_compare_size))
        return images[0] if images else None
