# fedimodel/wire.py
"""
Untagged decoding primitives.

The same logical ActivityPub property arrives in many shapes: a bare URL,
an embedded object, a list of either, or a single-key stub. Wrappers
declare their legal shapes as an ordered list of (kind, parser) pairs and
decode_untagged() keeps the first parser that accepts the value. There is
no discriminator field to rely on.

Parsers raise DecodeError on mismatch. Required properties propagate it,
optional properties swallow it into None via optional().
"""

import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar, Union
from urllib.parse import urlparse

from .errors import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K")

Parser = Callable[[Any], T]

_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*$", re.IGNORECASE)

# Schemes whose URLs are meaningless without a host.
_HOST_SCHEMES = {"http", "https", "ws", "wss", "ftp"}


class Multiplicity(Enum):
    """Wire shape of a property that is either one item or a list of items."""
    SINGLE = "single"
    LIST = "list"


def is_url(value: Any) -> bool:
    """
    Check whether value is an absolute URL.

    The empty string, relative references and strings with whitespace are
    rejected; http(s) URLs must name a host.
    """
    if not isinstance(value, str) or not value:
        return False
    if any(c.isspace() for c in value):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if not parsed.scheme or not _SCHEME.match(parsed.scheme):
        return False
    if parsed.scheme.lower() in _HOST_SCHEMES:
        return bool(parsed.hostname)
    return bool(parsed.netloc or parsed.path)


def parse_url(value: Any) -> str:
    if not is_url(value):
        raise DecodeError(f"Expected absolute URL, got {value!r}")
    return value


def parse_str(value: Any) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"Expected string, got {type(value).__name__}")
    return value


def parse_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"Expected boolean, got {value!r}")
    return value


def parse_dimension(value: Any) -> int:
    """Image width/height: a non-negative integer (floats with no fraction accepted)."""
    if isinstance(value, bool):
        raise DecodeError(f"Expected integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise DecodeError(f"Expected non-negative integer, got {value!r}")
    return value


def parse_mapping(value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected JSON object, got {type(value).__name__}")
    return value


def parse_str_mapping(value: Any) -> Dict[str, str]:
    mapping = parse_mapping(value)
    for key, item in mapping.items():
        if not isinstance(item, str):
            raise DecodeError(f"Expected string value for '{key}', got {type(item).__name__}")
    return dict(mapping)


def list_of(item_parser: Parser) -> Parser:
    """Build a parser accepting a JSON array whose every item item_parser accepts."""
    def parse(value: Any) -> list:
        if not isinstance(value, list):
            raise DecodeError(f"Expected JSON array, got {type(value).__name__}")
        return [item_parser(item) for item in value]
    return parse


def decode_untagged(
    value: Any,
    variants: Sequence[Tuple[K, Parser]],
    name: str,
) -> Tuple[K, Any]:
    """
    Decode value by trying each variant parser in order.

    Args:
        value: Raw JSON value
        variants: Ordered (kind, parser) pairs
        name: Wrapper name used in the error message

    Returns:
        (kind, parsed) of the first parser that succeeded

    Raises:
        DecodeError: if no variant accepts the value
    """
    failures = []
    for kind, parser in variants:
        try:
            return kind, parser(value)
        except DecodeError as e:
            failures.append(f"{getattr(kind, 'name', kind)}: {e}")
    raise DecodeError(
        f"Value did not match any {name} variant [{'; '.join(failures)}]"
    )


def decode_single_or_list(
    value: Any,
    item_parser: Parser,
    name: str,
) -> Tuple[Multiplicity, List[Any]]:
    """Decode a one-or-many property; the result is always a list of items."""
    kind, parsed = decode_untagged(
        value,
        [
            (Multiplicity.SINGLE, lambda v: [item_parser(v)]),
            (Multiplicity.LIST, list_of(item_parser)),
        ],
        name,
    )
    return kind, parsed


def encode_single_or_list(kind: Multiplicity, items: Sequence[Any], encode: Callable[[Any], Any]) -> Any:
    if kind is Multiplicity.SINGLE and len(items) == 1:
        return encode(items[0])
    return [encode(item) for item in items]


def _lookup(data: Dict[str, Any], keys: Union[str, Sequence[str]]) -> Tuple[Optional[str], Any]:
    """Return (key, value) of the first alias present with a non-null value."""
    if isinstance(keys, str):
        keys = (keys,)
    for key in keys:
        value = data.get(key)
        if value is not None:
            return key, value
    return None, None


def required(data: Dict[str, Any], keys: Union[str, Sequence[str]], parser: Parser) -> Any:
    """
    Decode a required property.

    Raises:
        DecodeError: naming the property when it is missing or malformed
    """
    primary = keys if isinstance(keys, str) else keys[0]
    key, value = _lookup(data, keys)
    if key is None:
        raise DecodeError("Missing required property", field=primary)
    try:
        return parser(value)
    except DecodeError as e:
        if e.field is None:
            e.field = key
        raise


def optional(data: Dict[str, Any], keys: Union[str, Sequence[str]], parser: Parser) -> Any:
    """
    Decode an optional property.

    Absent or null values and values no parser accepts all yield None.
    """
    key, value = _lookup(data, keys)
    if key is None:
        return None
    try:
        return parser(value)
    except DecodeError as e:
        logger.debug(f"Ignoring malformed '{key}' in {data.get('id', '<no id>')}: {e}")
        return None


def put(data: Dict[str, Any], key: str, value: Any) -> None:
    """Set key only when value is present, mirroring how absent properties decode."""
    if value is not None:
        data[key] = value
