# fedimodel/context.py
"""
The JSON-LD `@context` property.

This is not a JSON-LD processor. Context is only used to answer two
shallow questions: is a schema URL referenced, and is a term declared.
A term could in theory be declared under a different name, but key
lookup works well enough in practice.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Union

from .wire import (
    Multiplicity,
    decode_single_or_list,
    decode_untagged,
    encode_single_or_list,
    parse_mapping,
    parse_url,
)


class ContextItemKind(Enum):
    URL = "url"
    MAPPING = "mapping"


@dataclass(frozen=True)
class ContextItem:
    """
    One entry of `@context`: a schema URL or a term mapping.

    Attributes:
        kind: Which shape was on the wire
        value: URL string, or mapping of term -> arbitrary JSON
    """
    kind: ContextItemKind
    value: Union[str, Dict[str, Any]]

    @classmethod
    def url(cls, url: str) -> "ContextItem":
        return cls(ContextItemKind.URL, url)

    @classmethod
    def from_value(cls, value: Any) -> "ContextItem":
        kind, parsed = decode_untagged(
            value,
            [
                (ContextItemKind.URL, parse_url),
                (ContextItemKind.MAPPING, lambda v: dict(parse_mapping(v))),
            ],
            "ContextItem",
        )
        return cls(kind, parsed)

    def to_value(self) -> Any:
        return self.value

    def matches_url(self, url: str) -> bool:
        """Check if this item is a reference to the schema at url."""
        return self.kind is ContextItemKind.URL and self.value == url

    def has_definition(self, key: str) -> bool:
        """Check if this item declares term key."""
        return self.kind is ContextItemKind.MAPPING and key in self.value


@dataclass(frozen=True)
class Context:
    """
    The `@context` property: a single item or a list of items.

    Queries search every item; no match is a negative answer, not an error.
    """
    kind: Multiplicity
    items: List[ContextItem]

    @classmethod
    def of(cls, *items: ContextItem) -> "Context":
        return cls(Multiplicity.LIST, list(items))

    @classmethod
    def from_value(cls, value: Any) -> "Context":
        kind, items = decode_single_or_list(value, ContextItem.from_value, "Context")
        return cls(kind, items)

    def to_value(self) -> Any:
        return encode_single_or_list(self.kind, self.items, ContextItem.to_value)

    def matches_url(self, url: str) -> bool:
        """Check if any item references the schema at url."""
        return any(item.matches_url(url) for item in self.items)

    def has_definition(self, name: str) -> bool:
        """Check if any item declares term name."""
        return any(item.has_definition(name) for item in self.items)
