# fedimodel/actor.py
"""
ActivityPub Actor decoding and actor-level indexing consent.

An Actor is an account or service identity with:
- Inbox and follower/following collections
- Public key(s) used to sign its activities
- Consent signals: `indexable`, `discoverable`, `searchableBy` and the
  `fedineko:index` profile property

See: <https://www.w3.org/TR/activitypub/#actor-objects>
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from cryptography.hazmat.primitives import serialization

from .attachment import AttachmentReference
from .discoverable import (
    AllowReason,
    DenyReason,
    Discoverable,
    is_public_searchable_by,
    parse_searchable_by,
)
from .entity import SECURITY_CONTEXT, EntityType
from .image import ImageReference
from .object import Object
from .tag import TagReference
from .wire import (
    Multiplicity,
    decode_single_or_list,
    decode_untagged,
    encode_single_or_list,
    is_url,
    optional,
    parse_bool,
    parse_mapping,
    parse_str,
    parse_str_mapping,
    parse_url,
    put,
    required,
)

logger = logging.getLogger(__name__)

FEDINEKO_INDEX_PROPERTY = "fedineko:index"


@dataclass(frozen=True)
class PublicKey:
    """
    Public key published by an actor.

    Attributes:
        id: Key ID, e.g. https://example.com/users/alice#main-key
        owner: Actor owning the key, usually the actor itself
        pem: PEM-encoded key (`publicKeyPem`)
    """
    id: str
    owner: str
    pem: str

    @classmethod
    def from_dict(cls, data: Any) -> "PublicKey":
        data = parse_mapping(data)
        return cls(
            id=required(data, "id", parse_url),
            owner=required(data, "owner", parse_url),
            pem=required(data, "publicKeyPem", parse_str),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "publicKeyPem": self.pem,
        }

    def load(self):
        """
        Load the PEM into a key object usable for signature verification.

        Raises:
            ValueError: if the PEM cannot be parsed
        """
        return serialization.load_pem_public_key(self.pem.encode("utf-8"))


@dataclass(frozen=True)
class PublicKeyReference:
    """`publicKey`: a single key, or several (sometimes one key in an array)."""
    kind: Multiplicity
    items: List[PublicKey]

    @classmethod
    def from_value(cls, value: Any) -> "PublicKeyReference":
        kind, items = decode_single_or_list(value, PublicKey.from_dict, "PublicKeyReference")
        return cls(kind, items)

    def to_value(self) -> Any:
        return encode_single_or_list(self.kind, self.items, PublicKey.to_dict)

    def as_list(self) -> List[PublicKey]:
        return list(self.items)


@dataclass(frozen=True)
class Endpoints:
    """
    Additional endpoints an actor may share.

    Only URL-valued entries are kept; `sharedInbox` is the one that matters.
    """
    urls: Dict[str, str]

    @classmethod
    def from_dict(cls, data: Any) -> "Endpoints":
        data = parse_mapping(data)
        return cls({key: value for key, value in data.items() if is_url(value)})

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.urls)

    @property
    def shared_inbox(self) -> Optional[str]:
        """Endpoint for delivery of publicly addressed activities."""
        return self.urls.get("sharedInbox")


@dataclass(frozen=True)
class ActorReadableId:
    """Actor as username and the server it belongs to."""
    server: str
    username: str

    def __str__(self) -> str:
        return f"{self.server}/{self.username}"


@dataclass(frozen=True, kw_only=True)
class Actor(Object):
    """
    An ActivityPub Actor.

    Attributes:
        inbox: Inbox URL (required)
        followers: Followers collection
        following: Collection of actors this one follows
        preferred_username: Short account name, not guaranteed unique
        endpoints: Additional endpoints, e.g. sharedInbox
        name_map: Localized names (`nameMap`)
        summary: Short description of the actor
        icon: Avatar
        public_key: Key(s) used to sign messages (`publicKey`)
        indexable: FEP-5feb search indexing consent
        discoverable: Older discoverability flag
        searchable_by: Fedibird scopes granted search visibility (`searchableBy`)
        tag: Tags, e.g. profile emoji
        attachment: Profile fields and pictures
    """
    inbox: str
    followers: Optional[str] = None
    following: Optional[str] = None
    preferred_username: Optional[str] = None
    endpoints: Optional[Endpoints] = None
    name_map: Optional[Dict[str, str]] = None
    summary: Optional[str] = None
    icon: Optional[ImageReference] = None
    public_key: Optional[PublicKeyReference] = None
    indexable: Optional[bool] = None
    discoverable: Optional[bool] = None
    searchable_by: Optional[List[str]] = None
    tag: Optional[TagReference] = None
    attachment: Optional[AttachmentReference] = None

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = super()._fields_from_dict(data)
        fields.update(
            inbox=required(data, "inbox", parse_url),
            followers=optional(data, "followers", parse_url),
            following=optional(data, "following", parse_url),
            preferred_username=optional(data, "preferredUsername", parse_str),
            endpoints=optional(data, "endpoints", Endpoints.from_dict),
            name_map=optional(data, "nameMap", parse_str_mapping),
            summary=optional(data, "summary", parse_str),
            icon=optional(data, "icon", ImageReference.from_value),
            public_key=optional(data, "publicKey", PublicKeyReference.from_value),
            indexable=optional(data, "indexable", parse_bool),
            discoverable=optional(data, "discoverable", parse_bool),
            searchable_by=optional(data, "searchableBy", parse_searchable_by),
            tag=optional(data, "tag", TagReference.from_value),
            attachment=optional(data, "attachment", AttachmentReference.from_value),
        )
        return fields

    def to_dict(self) -> Dict[str, Any]:
        """Return ActivityPub JSON representation."""
        data = super().to_dict()
        data["inbox"] = self.inbox
        put(data, "followers", self.followers)
        put(data, "following", self.following)
        put(data, "preferredUsername", self.preferred_username)
        if self.endpoints is not None:
            data["endpoints"] = self.endpoints.to_dict()
        put(data, "nameMap", self.name_map)
        put(data, "summary", self.summary)
        if self.icon is not None:
            data["icon"] = self.icon.to_value()
        if self.public_key is not None:
            data["publicKey"] = self.public_key.to_value()
        put(data, "indexable", self.indexable)
        put(data, "discoverable", self.discoverable)
        put(data, "searchableBy", self.searchable_by)
        if self.tag is not None:
            data["tag"] = self.tag.to_value()
        if self.attachment is not None:
            data["attachment"] = self.attachment.to_value()
        return data

    def is_person(self) -> bool:
        return self.entity_type is EntityType.PERSON

    def shared_inbox(self) -> Optional[str]:
        return self.endpoints.shared_inbox if self.endpoints is not None else None

    def validate_security_context(self) -> Optional["Actor"]:
        """
        Check that an actor declaring the security context carries a key.

        Returns:
            self, or None if the security context is referenced but
            `publicKey` is missing
        """
        if self.context is None or not self.context.matches_url(SECURITY_CONTEXT):
            return self

        if self.public_key is None:
            logger.warning(
                f"Actor {self.id} uses context {SECURITY_CONTEXT} but 'publicKey' is not defined"
            )
            return None

        return self

    def get_discoverable_state(self) -> Discoverable:
        """
        Resolve actor-level indexing consent.

        Checks, first match wins:
        1. `fedineko:index` PropertyValue attachment ("allow" allows, anything else denies)
        2. `searchableBy` naming a public scope
        3. no @context at all: denied by default
        4. `indexable` declared in context: its value, denied if unset
        5. `discoverable` declared in context: its value, denied if unset
        6. otherwise assumed discoverable
        """
        # Escape hatch for services without indexable/discoverable support:
        #
        #   "attachment": [{"type": "PropertyValue", "name": "fedineko:index", "value": "deny"}]
        attachments = self.attachment.as_list() if self.attachment is not None else []
        for attachment in attachments:
            if attachment.entity_type is not EntityType.PROPERTY_VALUE:
                continue
            if attachment.name != FEDINEKO_INDEX_PROPERTY or attachment.content is None:
                continue

            if attachment.content == "allow":
                logger.debug(f"{self.id} allows indexing via {FEDINEKO_INDEX_PROPERTY}")
                return Discoverable.allow(AllowReason.FEDINEKO_PROPERTY)

            logger.debug(
                f"{self.id} denies indexing via {FEDINEKO_INDEX_PROPERTY}={attachment.content!r}"
            )
            return Discoverable.deny(DenyReason.FEDINEKO_PROPERTY)

        # searchableBy wins over indexable/discoverable when they disagree
        if self.searchable_by is not None:
            verdict = is_public_searchable_by(self.searchable_by)
            if verdict is not None:
                logger.debug(f"{self.id} is searchable by {verdict.searchable_by}")
                return verdict

        if self.context is None:
            logger.warning(f"{self.id} is not discoverable by default because it lacks context")
            return Discoverable.deny(DenyReason.DEFAULT)

        # FEP-5feb: <https://codeberg.org/fediverse/fep/src/branch/main/fep/5feb/fep-5feb.md>
        if self.context.has_definition("indexable"):
            if self.indexable is None:
                # Declared but unset is a denial, not a fall-through.
                logger.warning(f"{self.id} is not discoverable because 'indexable' is declared but not set")
                return Discoverable.deny(DenyReason.INDEXABLE)
            logger.debug(f"{self.id} has indexable={self.indexable}")
            if self.indexable:
                return Discoverable.allow(AllowReason.INDEXABLE)
            return Discoverable.deny(DenyReason.INDEXABLE)

        # Older instances only have `discoverable`, originally meant for
        # account directories but taken as the same intention.
        if self.context.has_definition("discoverable"):
            if self.discoverable is None:
                logger.warning(f"{self.id} is not discoverable because 'discoverable' is declared but not set")
                return Discoverable.deny(DenyReason.DISCOVERABLE)
            logger.debug(f"{self.id} has discoverable={self.discoverable}")
            if self.discoverable:
                return Discoverable.allow(AllowReason.DISCOVERABLE)
            return Discoverable.deny(DenyReason.DISCOVERABLE)

        # No opt-out mechanism exposed at all (e.g. Lemmy).
        logger.warning(f"{self.id} is assumed to be discoverable")
        return Discoverable.allow(AllowReason.ASSUMED)


class ActorReferenceKind(Enum):
    ACTOR = "actor"
    STUB = "stub"
    URL = "url"


@dataclass(frozen=True)
class ActorReference:
    """
    Reference to an actor: a full Actor, an Object-shaped stub with a few
    properties, or just the actor URL.
    """
    kind: ActorReferenceKind
    value: Union[Actor, Object, str]

    @classmethod
    def from_value(cls, value: Any) -> "ActorReference":
        kind, parsed = decode_untagged(
            value,
            [
                (ActorReferenceKind.ACTOR, Actor.from_dict),
                (ActorReferenceKind.STUB, Object.from_dict),
                (ActorReferenceKind.URL, parse_url),
            ],
            "ActorReference",
        )
        return cls(kind, parsed)

    def to_value(self) -> Any:
        if self.kind is ActorReferenceKind.URL:
            return self.value
        return self.value.to_dict()

    @property
    def id(self) -> str:
        if self.kind is ActorReferenceKind.URL:
            return self.value
        return self.value.id

    @property
    def entity_type(self) -> Optional[EntityType]:
        """Actor type when the reference carries one, None for bare URLs."""
        if self.kind is ActorReferenceKind.URL:
            return None
        return self.value.entity_type


@dataclass(frozen=True)
class CompoundActorReference:
    """
    One actor reference or several, e.g. Peertube attributing a video to
    both a Person and its channel Group.
    """
    kind: Multiplicity
    items: List[ActorReference]

    @classmethod
    def from_value(cls, value: Any) -> "CompoundActorReference":
        kind, items = decode_single_or_list(value, ActorReference.from_value, "CompoundActorReference")
        return cls(kind, items)

    def to_value(self) -> Any:
        return encode_single_or_list(self.kind, self.items, ActorReference.to_value)

    def as_list(self) -> List[ActorReference]:
        return list(self.items)

    @property
    def id(self) -> Optional[str]:
        """
        The single id used for attribution.

        Only one attribution id is stored per document, so in a list the
        first Person or Service wins, then the first entry of any type.
        An empty list has no id.
        """
        if self.kind is Multiplicity.SINGLE:
            return self.items[0].id

        for reference in self.items:
            if reference.entity_type in (EntityType.PERSON, EntityType.SERVICE):
                return reference.id

        return self.items[0].id if self.items else None

    def as_id_list(self) -> List[str]:
        """Every referenced actor id, in source order."""
        return [reference.id for reference in self.items]
