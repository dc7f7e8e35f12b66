# fedimodel/activity.py
"""
ActivityPub Activity envelopes.

Activities represent actions taken by actors on objects:
- Create/Update: actor publishes or edits content
- Delete: payload is usually a Tombstone or a bare URL
- Follow/Accept/Reject/Undo/Announce

The payload is kept as raw JSON because its shape depends on the
activity type; accessors below resolve it lazily.
See: <https://www.w3.org/TR/activitystreams-core/#activities>
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .actor import CompoundActorReference
from .entity import EntityType, entity_type_from
from .object import Object
from .wire import is_url, put, required

logger = logging.getLogger(__name__)


def _address_matches(value: Any, pattern: str) -> bool:
    """
    Loose recipient check: pattern is a substring of an address string,
    or of the `id` of an address object, anywhere in value.
    """
    if isinstance(value, str):
        return pattern in value
    if isinstance(value, list):
        return any(_address_matches(item, pattern) for item in value)
    if isinstance(value, dict):
        address_id = value.get("id")
        return isinstance(address_id, str) and pattern in address_id
    return False


@dataclass(frozen=True, kw_only=True)
class Activity(Object):
    """
    An activity envelope.

    Attributes:
        actor: Actor(s) performing the activity (required)
        object: Payload: inline object, bare URL, or None when absent
        to: Raw `to` recipients
        cc: Raw `cc` recipients
    """
    actor: CompoundActorReference
    object: Any = None
    to: Any = None
    cc: Any = None

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = super()._fields_from_dict(data)
        fields.update(
            actor=required(data, "actor", CompoundActorReference.from_value),
            object=data.get("object"),
            to=data.get("to"),
            cc=data.get("cc"),
        )
        return fields

    def to_dict(self) -> Dict[str, Any]:
        """Return ActivityPub JSON representation."""
        data = super().to_dict()
        data["actor"] = self.actor.to_value()
        put(data, "object", self.object)
        put(data, "to", self.to)
        put(data, "cc", self.cc)
        return data

    @property
    def activity_id(self) -> str:
        return self.id

    def inner_object_type(self) -> EntityType:
        """
        Type of the payload, UNKNOWN when the payload is not an object or
        has no recognizable `type`.
        """
        if not isinstance(self.object, dict):
            logger.debug(f"No 'type' field in object of {self.id}: {self.object!r}")
            return EntityType.UNKNOWN

        object_type = self.object.get("type")
        if not isinstance(object_type, str):
            return EntityType.UNKNOWN
        return entity_type_from(object_type)

    def inner_object_id(self) -> Optional[str]:
        """
        ID of the payload: its `id` when it is an object, the payload
        itself when it is a URL string, None otherwise.
        """
        if isinstance(self.object, dict):
            object_id = self.object.get("id")
            return object_id if is_url(object_id) else None

        if isinstance(self.object, str):
            return self.object if is_url(self.object) else None

        logger.error(f"Failed to get ID of inner object of {self.id}: {self.object!r}")
        return None

    def inner_object_as_string(self) -> Optional[str]:
        """Payload when it is a bare string, e.g. the URL of a followed actor."""
        return self.object if isinstance(self.object, str) else None

    def to_field_matches(self, pattern: str) -> bool:
        """
        Check whether pattern appears among the recipients.

        This is substring containment, not equality: producers encode
        addressing in too many ways for exact matching. Looks at the
        activity `to`, a bare-string payload, and the payload's own `to`.
        """
        if _address_matches(self.to, pattern):
            return True

        if isinstance(self.object, str):
            return pattern in self.object

        if isinstance(self.object, dict):
            return _address_matches(self.object.get("to"), pattern)

        return False
