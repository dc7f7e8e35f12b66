# fedimodel - ActivityPub document model with indexing consent resolution
#
# Decodes the many divergent ActivityPub/ActivityStreams JSON shapes used
# across the Fediverse (Mastodon, Misskey, Peertube, Lemmy, ...) into one
# normalized, immutable object model, and decides whether an actor or a
# content item may be indexed.
#
# Core concepts:
# - Reference wrapper: one logical property, many wire shapes, one accessor
# - Actor / Content / Activity: typed documents built from Entity and Object
# - Discoverable: allowed/denied verdict plus the signal that produced it
# - Guesser: last-resort URL path classifier

from .errors import DecodeError
from .entity import (
    ACTIVITYSTREAMS_CONTEXT,
    SECURITY_CONTEXT,
    Entity,
    EntityType,
    entity_type_from,
    is_actor_type,
    is_supported_content_type,
)
from .context import Context, ContextItem
from .object import Link, Object, ObjectReference, UrlReference
from .image import Image, ImageReference
from .tag import Tag, TagReference
from .attachment import Attachment, AttachmentReference
from .discoverable import (
    FEDINEKO_PUBLIC_ADDRESS,
    PUBLIC_ADDRESS,
    AllowReason,
    DenyReason,
    Discoverable,
    is_public_searchable_by,
)
from .actor import (
    Actor,
    ActorReadableId,
    ActorReference,
    CompoundActorReference,
    Endpoints,
    PublicKey,
    PublicKeyReference,
)
from .content import Content, ContentMap
from .activity import Activity
from .guesser import (
    GuessedType,
    UrlClassifier,
    extract_actor_readable_id_from_url,
    extract_username_from_url,
    guess_object_type_from_url,
)
from .decode import decode

__all__ = [
    # Decoding
    "decode",
    "DecodeError",
    # Base model
    "Entity",
    "EntityType",
    "entity_type_from",
    "is_actor_type",
    "is_supported_content_type",
    "Context",
    "ContextItem",
    "Object",
    "ObjectReference",
    "Link",
    "UrlReference",
    # Reference wrappers
    "Image",
    "ImageReference",
    "Tag",
    "TagReference",
    "Attachment",
    "AttachmentReference",
    "PublicKey",
    "PublicKeyReference",
    "ActorReference",
    "CompoundActorReference",
    # Documents
    "Actor",
    "ActorReadableId",
    "Endpoints",
    "Content",
    "ContentMap",
    "Activity",
    # Consent
    "AllowReason",
    "DenyReason",
    "Discoverable",
    "is_public_searchable_by",
    "PUBLIC_ADDRESS",
    "FEDINEKO_PUBLIC_ADDRESS",
    "SECURITY_CONTEXT",
    "ACTIVITYSTREAMS_CONTEXT",
    # URL guessing
    "GuessedType",
    "UrlClassifier",
    "guess_object_type_from_url",
    "extract_username_from_url",
    "extract_actor_readable_id_from_url",
]

__version__ = "0.1.0"
