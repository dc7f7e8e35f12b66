# fedimodel/entity.py
"""
Entity types and the Entity header shared by every decoded object.

EntityType mixes activities, actors, collections, content, tags and
attachments into one closed enumeration. Values outside the enumeration
never fail decoding, they become EntityType.UNKNOWN.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .context import Context, ContextItem
from .errors import DecodeError
from .wire import optional, parse_mapping

logger = logging.getLogger(__name__)

SECURITY_CONTEXT = "https://w3id.org/security/v1"
ACTIVITYSTREAMS_CONTEXT = "https://www.w3.org/ns/activitystreams"


class EntityType(Enum):
    """ActivityPub entity type. Value is the wire string."""
    # Activities
    ACCEPT = "Accept"
    ANNOUNCE = "Announce"
    CREATE = "Create"
    DELETE = "Delete"
    FOLLOW = "Follow"
    REJECT = "Reject"
    UNDO = "Undo"
    UPDATE = "Update"

    # Actors
    ACTOR = "Actor"
    APPLICATION = "Application"
    ORGANIZATION = "Organization"
    GROUP = "Group"
    PERSON = "Person"
    SERVICE = "Service"

    # Collections
    COLLECTION = "Collection"
    COLLECTION_PAGE = "CollectionPage"
    ORDERED_COLLECTION = "OrderedCollection"
    ORDERED_COLLECTION_PAGE = "OrderedCollectionPage"

    # Content
    ARTICLE = "Article"
    IMAGE = "Image"
    LINK = "Link"
    MOVIE = "Movie"
    NOTE = "Note"
    PAGE = "Page"
    POLL = "Poll"
    QUESTION = "Question"
    TOMBSTONE = "Tombstone"
    VIDEO = "Video"

    # Tags
    EMOJI = "Emoji"
    HASHTAG = "Hashtag"
    TAG = "Tag"
    MENTION = "Mention"

    PROPERTY_VALUE = "PropertyValue"

    # Attachments
    DOCUMENT = "Document"

    UNKNOWN = "Unknown"

    @classmethod
    def from_wire(cls, value: Any) -> "EntityType":
        """
        Map a wire `type` value to EntityType.

        JSON-LD allows several types per node; the first string is used.
        Anything unrecognized is UNKNOWN.
        """
        if isinstance(value, list):
            value = next((v for v in value if isinstance(v, str)), None)
        if not isinstance(value, str):
            logger.debug(f"Non-string entity type {value!r}, treating as Unknown")
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    def __str__(self) -> str:
        return self.value


ACTIVITY_TYPES = frozenset({
    EntityType.ACCEPT,
    EntityType.ANNOUNCE,
    EntityType.CREATE,
    EntityType.DELETE,
    EntityType.FOLLOW,
    EntityType.REJECT,
    EntityType.UNDO,
    EntityType.UPDATE,
})

# Types decoded as Content when a document is dispatched by type.
CONTENT_TYPES = frozenset({
    EntityType.ARTICLE,
    EntityType.IMAGE,
    EntityType.MOVIE,
    EntityType.NOTE,
    EntityType.PAGE,
    EntityType.POLL,
    EntityType.QUESTION,
    EntityType.VIDEO,
})


def is_actor_type(entity_type: EntityType) -> bool:
    """Check if entity_type is one of the supported actor types."""
    return entity_type in (
        EntityType.ACTOR,
        EntityType.APPLICATION,
        EntityType.PERSON,
        EntityType.ORGANIZATION,
        EntityType.SERVICE,
    )


def is_supported_content_type(entity_type: EntityType) -> bool:
    """Check if entity_type is a content type worth indexing."""
    return entity_type in (
        EntityType.NOTE,
        EntityType.VIDEO,
        EntityType.MOVIE,
        EntityType.ARTICLE,
    )


# Narrow mapping used when typing activity payloads.
# "Movie" maps to PAGE here while EntityType.MOVIE exists; kept as is
# because downstream consumers already rely on it.
_PAYLOAD_TYPES = {
    # Actors
    "Actor": EntityType.ACTOR,
    "Application": EntityType.APPLICATION,
    "Group": EntityType.GROUP,
    "Organization": EntityType.ORGANIZATION,
    "Person": EntityType.PERSON,
    "Service": EntityType.SERVICE,

    # Content
    "Article": EntityType.ARTICLE,
    "Image": EntityType.IMAGE,
    "Movie": EntityType.PAGE,
    "Note": EntityType.NOTE,
    "Poll": EntityType.POLL,
    "Question": EntityType.QUESTION,
    "Tombstone": EntityType.TOMBSTONE,
    "Video": EntityType.VIDEO,
}


def entity_type_from(value: str) -> EntityType:
    """
    Convert value to EntityType if it is one of the supported content or
    actor types, UNKNOWN otherwise.
    """
    return _PAYLOAD_TYPES.get(value, EntityType.UNKNOWN)


@dataclass(frozen=True, kw_only=True)
class Entity:
    """
    The most basic decoded entity: a type plus optional @context.

    Attributes:
        entity_type: Type from the `type` property
        context: Decoded `@context`, if present and well-formed
    """
    entity_type: EntityType
    context: Optional[Context] = None

    # Type assumed when `type` is absent; None makes `type` required.
    _default_type = None

    @classmethod
    def new(cls, entity_type: EntityType) -> "Entity":
        """Construct an entity with the default security + activitystreams context."""
        return Entity(
            entity_type=entity_type,
            context=Context.of(
                ContextItem.url(SECURITY_CONTEXT),
                ContextItem.url(ACTIVITYSTREAMS_CONTEXT),
            ),
        )

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        if "type" in data and data["type"] is not None:
            entity_type = EntityType.from_wire(data["type"])
        elif cls._default_type is not None:
            entity_type = cls._default_type
        else:
            raise DecodeError("Missing required property", field="type")
        return {
            "entity_type": entity_type,
            "context": optional(data, "@context", Context.from_value),
        }

    @classmethod
    def from_dict(cls, data: Any):
        """
        Decode from a JSON object.

        Raises:
            DecodeError: if the value is not an object or a required property is missing
        """
        data = parse_mapping(data)
        try:
            return cls(**cls._fields_from_dict(data))
        except DecodeError as e:
            document_id = data.get("id")
            raise e.in_document(document_id if isinstance(document_id, str) else None)

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        if self.context is not None:
            data["@context"] = self.context.to_value()
        data["type"] = self.entity_type.value
        return data
