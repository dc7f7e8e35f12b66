# fedimodel/decode.py
"""
Top-level document decoding.

decode() picks the model for a raw document by its `type`, falling back
to the shape of the document for types outside the enumeration.
"""

import json
import logging
from typing import Union

from .activity import Activity
from .actor import Actor
from .content import Content
from .entity import ACTIVITY_TYPES, CONTENT_TYPES, EntityType, is_actor_type
from .errors import DecodeError

logger = logging.getLogger(__name__)

Document = Union[Activity, Actor, Content]


def _load(document: Union[dict, str, bytes]) -> dict:
    if isinstance(document, (str, bytes, bytearray)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            raise DecodeError(f"Invalid JSON: {e}") from e
    if not isinstance(document, dict):
        raise DecodeError(f"Expected JSON object document, got {type(document).__name__}")
    return document


def decode(document: Union[dict, str, bytes]) -> Document:
    """
    Decode a raw ActivityPub document.

    Args:
        document: Parsed JSON object, or JSON text

    Returns:
        Activity, Actor or Content

    Raises:
        DecodeError: if the document cannot be decoded; the caller should
            drop this document and carry on with others
    """
    data = _load(document)
    entity_type = EntityType.from_wire(data.get("type"))

    if entity_type in ACTIVITY_TYPES:
        return Activity.from_dict(data)
    if is_actor_type(entity_type) or entity_type is EntityType.GROUP:
        return Actor.from_dict(data)
    if entity_type in CONTENT_TYPES:
        return Content.from_dict(data)

    # Remaining types are dispatched by shape.
    if "attributedTo" in data:
        return Content.from_dict(data)
    if "actor" in data:
        return Activity.from_dict(data)
    if "inbox" in data:
        return Actor.from_dict(data)

    document_id = data.get("id")
    logger.debug(f"Unsupported document {document_id} of type {data.get('type')!r}")
    raise DecodeError(
        f"Unsupported document type {data.get('type')!r}",
        field="type",
        document_id=document_id if isinstance(document_id, str) else None,
    )
