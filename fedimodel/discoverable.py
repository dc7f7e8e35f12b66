# fedimodel/discoverable.py
"""
Indexing consent verdicts.

A verdict is either allowed or denied, together with the reason naming
which signal produced it. Reasons are observable by callers and in logs,
so resolvers must keep their exact order of checks.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

from .errors import DecodeError
from .wire import is_url

logger = logging.getLogger(__name__)

# Well-known public collection.
PUBLIC_ADDRESS = "https://www.w3.org/ns/activitystreams#Public"

# Scope an account can grant to Fedineko specifically.
FEDINEKO_PUBLIC_ADDRESS = "https://fedineko.org/indexing#Public"

PUBLIC_SEARCHABLE_BY = (PUBLIC_ADDRESS, FEDINEKO_PUBLIC_ADDRESS)


class AllowReason(Enum):
    """Why indexing is allowed."""
    DISCOVERABLE = "discoverable"             # `discoverable` is true
    INDEXABLE = "indexable"                   # `indexable` is true
    FEDINEKO_PROPERTY = "fedineko_property"   # `fedineko:index` is "allow"
    SEARCHABLE_BY = "searchable_by"           # `searchableBy` has a public scope
    ASSUMED = "assumed"                       # nothing says otherwise


class DenyReason(Enum):
    """Why indexing is denied."""
    DISCOVERABLE = "discoverable"             # `discoverable` is false
    INDEXABLE = "indexable"                   # `indexable` is false
    FEDINEKO_PROPERTY = "fedineko_property"   # `fedineko:index` is anything but "allow"
    OPTED_OUT = "opted_out"                   # explicit opt-out request
    BAN = "ban"                               # account is banned
    DEFAULT = "default"                       # no explicit opt-in


@dataclass(frozen=True)
class Discoverable:
    """
    Indexing verdict for an actor or content item.

    Attributes:
        allowed: True if indexing is allowed
        reason: AllowReason when allowed, DenyReason when denied
        searchable_by: Matched scope URL for AllowReason.SEARCHABLE_BY
    """
    allowed: bool
    reason: Union[AllowReason, DenyReason]
    searchable_by: Optional[str] = None

    def __post_init__(self):
        expected = AllowReason if self.allowed else DenyReason
        if not isinstance(self.reason, expected):
            raise ValueError(f"{self.reason} is not a valid reason for allowed={self.allowed}")

    @classmethod
    def allow(cls, reason: AllowReason, searchable_by: Optional[str] = None) -> "Discoverable":
        return cls(True, reason, searchable_by)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Discoverable":
        return cls(False, reason)

    def is_allowed_indexing(self) -> bool:
        return self.allowed

    def __str__(self) -> str:
        verdict = "Allowed" if self.allowed else "Denied"
        if self.searchable_by:
            return f"{verdict}({self.reason.name}: {self.searchable_by})"
        return f"{verdict}({self.reason.name})"


def is_public_searchable_by(searchable_by: Iterable[str]) -> Optional[Discoverable]:
    """
    Verdict for a `searchableBy` scope list.

    Allowed when the list names the public collection or the Fedineko
    scope, None when it grants nothing relevant.
    """
    for url in searchable_by:
        if url in PUBLIC_SEARCHABLE_BY:
            return Discoverable.allow(AllowReason.SEARCHABLE_BY, url)
    return None


def parse_searchable_by(value: Any) -> List[str]:
    """
    Decode `searchableBy`: a list of scope URLs, or a single URL string.

    Items that are not URLs are dropped.
    """
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise DecodeError(f"Expected list of URLs, got {type(value).__name__}")
    scopes = []
    for item in value:
        if is_url(item):
            scopes.append(item)
        else:
            logger.debug(f"Dropping malformed searchableBy scope {item!r}")
    return scopes
