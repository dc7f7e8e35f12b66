# fedimodel/content.py
"""
Content: notes, articles, videos and other postable objects.

Besides authorship and body text, content may carry its own consent
signals. They refine whatever the author's actor-level decision was:
content can opt back in when the actor denied indexing, or opt out when
the actor allowed it.
"""

import datetime
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from dateutil import parser as date_parser

from .actor import CompoundActorReference
from .attachment import AttachmentReference
from .discoverable import (
    AllowReason,
    DenyReason,
    Discoverable,
    is_public_searchable_by,
    parse_searchable_by,
)
from .errors import DecodeError
from .image import ImageReference
from .object import Object
from .tag import TagReference
from .wire import (
    decode_untagged,
    list_of,
    optional,
    parse_bool,
    parse_str,
    parse_str_mapping,
    put,
    required,
)

logger = logging.getLogger(__name__)

Cleaner = Callable[[str], str]

# Full date and time are required; a bare date is not a publication time.
_DATE_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}")


def parse_timestamp(value: Any) -> datetime.datetime:
    """
    Parse an RFC 3339 style timestamp into an aware UTC datetime.

    Date-only and reduced precision values are rejected. A missing UTC
    offset is read as UTC.
    """
    if not isinstance(value, str):
        raise DecodeError(f"Expected timestamp string, got {type(value).__name__}")
    if not _DATE_TIME.match(value):
        raise DecodeError(f"Expected full date and time, got {value!r}")
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError) as e:
        raise DecodeError(f"Invalid timestamp {value!r}: {e}") from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed.astimezone(datetime.timezone.utc)


def format_timestamp(value: datetime.datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


class ContentMapKind(Enum):
    MAP = "map"
    LIST = "list"


@dataclass(frozen=True)
class ContentMap:
    """
    `contentMap`: language -> text.

    A rarely seen variant is a JSON array with a single string, which is
    read as one "default" entry.
    """
    kind: ContentMapKind
    value: Union[Dict[str, str], List[str]]

    @classmethod
    def from_value(cls, value: Any) -> "ContentMap":
        kind, parsed = decode_untagged(
            value,
            [
                (ContentMapKind.MAP, parse_str_mapping),
                (ContentMapKind.LIST, list_of(parse_str)),
            ],
            "ContentMap",
        )
        return cls(kind, parsed)

    def to_value(self) -> Any:
        if self.kind is ContentMapKind.MAP:
            return dict(self.value)
        return list(self.value)

    def as_map(self) -> Dict[str, str]:
        if self.kind is ContentMapKind.MAP:
            return dict(self.value)
        if not self.value:
            return {}
        return {"default": self.value[0]}


def _with_summary(summary: str, text: str) -> str:
    return f"<p>{summary}</p>\n{text}"


@dataclass(frozen=True, kw_only=True)
class Content(Object):
    """
    Postable content such as a Note, Article or Video.

    Attributes:
        attributed_to: Author(s) (`attributedTo`, required)
        published: Publication time, UTC (required)
        sensitive: Sensitive content flag
        indexable: FEP-5feb consent, rarely set on content
        discoverable: Older discoverability flag, rarely set on content
        searchable_by: Fedibird scopes granted search visibility (`searchableBy`)
        summary: Title or content warning
        content: Body
        content_map: Localized bodies (`contentMap`)
        tag: Hashtags, mentions, emoji
        attachment: Attached media
        icon: Associated image (`icon` or `image`)
    """
    attributed_to: CompoundActorReference
    published: datetime.datetime
    sensitive: Optional[bool] = None
    indexable: Optional[bool] = None
    discoverable: Optional[bool] = None
    searchable_by: Optional[List[str]] = None
    summary: Optional[str] = None
    content: Optional[str] = None
    content_map: Optional[ContentMap] = None
    tag: Optional[TagReference] = None
    attachment: Optional[AttachmentReference] = None
    icon: Optional[ImageReference] = None

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = super()._fields_from_dict(data)
        fields.update(
            attributed_to=required(data, "attributedTo", CompoundActorReference.from_value),
            published=required(data, "published", parse_timestamp),
            sensitive=optional(data, "sensitive", parse_bool),
            indexable=optional(data, "indexable", parse_bool),
            discoverable=optional(data, "discoverable", parse_bool),
            searchable_by=optional(data, "searchableBy", parse_searchable_by),
            summary=optional(data, "summary", parse_str),
            content=optional(data, "content", parse_str),
            content_map=optional(data, "contentMap", ContentMap.from_value),
            tag=optional(data, "tag", TagReference.from_value),
            attachment=optional(data, "attachment", AttachmentReference.from_value),
            icon=optional(data, ("icon", "image"), ImageReference.from_value),
        )
        return fields

    def to_dict(self) -> Dict[str, Any]:
        """Return ActivityPub JSON representation."""
        data = super().to_dict()
        data["attributedTo"] = self.attributed_to.to_value()
        data["published"] = format_timestamp(self.published)
        put(data, "sensitive", self.sensitive)
        put(data, "indexable", self.indexable)
        put(data, "discoverable", self.discoverable)
        put(data, "searchableBy", self.searchable_by)
        put(data, "summary", self.summary)
        put(data, "content", self.content)
        if self.content_map is not None:
            data["contentMap"] = self.content_map.to_value()
        if self.tag is not None:
            data["tag"] = self.tag.to_value()
        if self.attachment is not None:
            data["attachment"] = self.attachment.to_value()
        if self.icon is not None:
            data["icon"] = self.icon.to_value()
        return data

    def get_content_map(self, cleaner: Cleaner) -> Optional[Dict[str, str]]:
        """
        Language -> cleaned text for this content.

        Each `contentMap` entry gets the summary prepended as a paragraph.
        Without a usable map, a single "default" entry is built from
        summary and body (body falls back to `name`). Text is only
        concatenated here; cleaner does the sanitizing.

        Args:
            cleaner: Text/HTML sanitizer applied to every assembled value

        Returns:
            Mapping of language to cleaned text, or None if there is no text
        """
        if self.content_map is not None:
            localized = {
                language: cleaner(_with_summary(self.summary, text) if self.summary is not None else text)
                for language, text in self.content_map.as_map().items()
            }
            if localized:
                return localized

        body = self.content if self.content is not None else self.name

        if body is not None and self.summary is not None:
            return {"default": cleaner(_with_summary(self.summary, body))}
        if self.summary is not None:
            return {"default": cleaner(self.summary)}
        if body is not None:
            return {"default": cleaner(body)}

        return None

    def get_discoverable_state(self, default_state: Discoverable) -> Discoverable:
        """
        Resolve content-level indexing consent.

        Checks, first match wins: `searchableBy` public scope, `indexable`,
        `discoverable`, then default_state.
        """
        # searchableBy outranks the account-level style flags below.
        # See: <https://github.com/mastodon/mastodon/pull/23808#issuecomment-1543273137>
        if self.searchable_by is not None:
            verdict = is_public_searchable_by(self.searchable_by)
            if verdict is not None:
                logger.debug(f"{self.id} is searchable by {verdict.searchable_by}")
                return verdict

        if self.indexable is not None:
            logger.debug(f"{self.id} has indexable={self.indexable}")
            if self.indexable:
                return Discoverable.allow(AllowReason.INDEXABLE)
            return Discoverable.deny(DenyReason.INDEXABLE)

        if self.discoverable is not None:
            logger.debug(f"{self.id} has discoverable={self.discoverable}")
            if self.discoverable:
                return Discoverable.allow(AllowReason.DISCOVERABLE)
            return Discoverable.deny(DenyReason.DISCOVERABLE)

        logger.debug(f"{self.id} has no consent signals, using {default_state}")
        return default_state

    def get_optin_discoverable_state(self) -> Discoverable:
        """
        Consent when the actor denied indexing: content must opt back in.
        """
        return self.get_discoverable_state(Discoverable.deny(DenyReason.DEFAULT))

    def get_optout_discoverable_state(self) -> Discoverable:
        """
        Consent when the actor allowed indexing: content must opt out.
        """
        return self.get_discoverable_state(Discoverable.allow(AllowReason.ASSUMED))
