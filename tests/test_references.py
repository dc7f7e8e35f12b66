# tests/test_references.py
"""Tests for the reference wrappers that reconcile divergent wire shapes."""

import pytest

from fedimodel import (
    ActorReference,
    Attachment,
    AttachmentReference,
    CompoundActorReference,
    DecodeError,
    EntityType,
    ImageReference,
    ObjectReference,
    PublicKeyReference,
    Tag,
    TagReference,
    UrlReference,
)
from fedimodel.actor import ActorReferenceKind
from fedimodel.content import ContentMap
from fedimodel.context import Context
from fedimodel.image import ImageReferenceKind
from fedimodel.object import ObjectReferenceKind, UrlReferenceKind
from fedimodel.wire import Multiplicity


def actor_stub(actor_id: str, actor_type: str) -> dict:
    return {"id": actor_id, "type": actor_type}


def full_actor(actor_id: str, actor_type: str = "Person") -> dict:
    return {
        "id": actor_id,
        "type": actor_type,
        "inbox": f"{actor_id}/inbox",
        "preferredUsername": actor_id.rsplit("/", 1)[-1],
    }


PEERTUBE_URLS = [
    {
        "type": "Link",
        "mediaType": "text/html",
        "href": "https://peertube.example/videos/watch/1111",
    },
    {
        "type": "Link",
        "mediaType": "application/x-mpegURL",
        "href": "https://peertube.example/static/streaming-playlists/hls/1111/master.m3u8",
        "tag": [{"type": "Infohash", "name": "abc"}],
    },
]

PEERTUBE_ICONS = [
    {
        "type": "Image",
        "url": "https://peertube.example/lazy-static/thumbnails/xxx.jpg",
        "mediaType": "image/jpeg",
        "width": 280,
        "height": 157,
    },
    {
        "type": "Image",
        "url": "https://peertube.example/lazy-static/previews/yyy.jpg",
        "mediaType": "image/jpeg",
        "width": 850,
        "height": 480,
    },
]


class TestUrlReference:
    """Test UrlReference variants."""

    def test_bare_url(self):
        """A string is a single URL."""
        reference = UrlReference.from_value("https://example.com/notes/1")
        assert reference.kind == UrlReferenceKind.URL
        assert reference.as_list() == ["https://example.com/notes/1"]

    def test_single_link(self):
        """A Link object contributes its href."""
        reference = UrlReference.from_value(PEERTUBE_URLS[0])
        assert reference.kind == UrlReferenceKind.LINK
        assert reference.any_url() == "https://peertube.example/videos/watch/1111"

    def test_link_list_keeps_source_order(self):
        """Peertube link lists flatten in order."""
        reference = UrlReference.from_value(PEERTUBE_URLS)
        assert reference.kind == UrlReferenceKind.LINK_LIST
        assert reference.as_list() == [
            "https://peertube.example/videos/watch/1111",
            "https://peertube.example/static/streaming-playlists/hls/1111/master.m3u8",
        ]
        assert reference.any_url() == "https://peertube.example/videos/watch/1111"

    def test_url_list(self):
        """A list of strings is a URL list, not a link list."""
        reference = UrlReference.from_value(["https://a.example/1", "https://b.example/2"])
        assert reference.kind == UrlReferenceKind.URL_LIST
        assert reference.any_url() == "https://a.example/1"

    def test_link_without_type(self):
        """Links without a type are still links."""
        reference = UrlReference.from_value({"href": "https://example.com/x"})
        assert reference.value.entity_type == EntityType.LINK

    def test_empty_list(self):
        """An empty list has no URL."""
        assert UrlReference.from_value([]).any_url() is None

    def test_unmatched_shape_fails(self):
        """Values matching no variant raise DecodeError."""
        with pytest.raises(DecodeError):
            UrlReference.from_value({"rel": "alternate"})
        with pytest.raises(DecodeError):
            UrlReference.from_value("")


class TestObjectReference:
    """Test ObjectReference variants."""

    def test_inline_object(self):
        reference = ObjectReference.from_value({"id": "https://example.com/notes/1", "type": "Note"})
        assert reference.kind == ObjectReferenceKind.OBJECT
        assert reference.object_id == "https://example.com/notes/1"

    def test_url(self):
        reference = ObjectReference.from_value("https://example.com/notes/1")
        assert reference.kind == ObjectReferenceKind.URL
        assert reference.object_id == "https://example.com/notes/1"


class TestImageReference:
    """Test ImageReference variants and largest image selection."""

    def test_largest_by_width(self):
        """The 850px preview beats the 280px thumbnail."""
        image = ImageReference.from_value(PEERTUBE_ICONS).get_largest_image()
        assert image.width == 850
        assert image.url == "https://peertube.example/lazy-static/previews/yyy.jpg"

    def test_largest_by_width_regardless_of_order(self):
        image = ImageReference.from_value(list(reversed(PEERTUBE_ICONS))).get_largest_image()
        assert image.width == 850

    def test_largest_by_height_when_width_missing(self):
        """Height decides when widths are not both known."""
        images = [
            {"url": "https://example.com/small.png", "height": 10},
            {"url": "https://example.com/tall.png", "height": 900},
        ]
        image = ImageReference.from_value(images).get_largest_image()
        assert image.url == "https://example.com/tall.png"

    def test_no_dimensions_keeps_first(self):
        """Without sizes the first image is picked."""
        images = [
            {"url": "https://example.com/first.png"},
            {"url": "https://example.com/second.png"},
        ]
        image = ImageReference.from_value(images).get_largest_image()
        assert image.url == "https://example.com/first.png"

    def test_bare_url(self):
        """A URL becomes an Image with only url set."""
        reference = ImageReference.from_value("https://example.com/avatar.png")
        assert reference.kind == ImageReferenceKind.URL
        image = reference.get_largest_image()
        assert image.url == "https://example.com/avatar.png"
        assert image.width is None

    def test_single_image_aliases(self):
        """`name` is read as summary, `mediaType` as media type."""
        reference = ImageReference.from_value({
            "type": "Image",
            "name": "A cat",
            "mediaType": "image/png",
            "url": "https://example.com/cat.png",
            "sensitive": True,
        })
        assert reference.kind == ImageReferenceKind.SINGLE
        image = reference.as_list()[0]
        assert image.summary == "A cat"
        assert image.media_type == "image/png"
        assert image.sensitive is True

    def test_empty_list(self):
        assert ImageReference.from_value([]).get_largest_image() is None


class TestTagReference:
    """Test tag decoding."""

    def test_mention_with_empty_href(self):
        """An empty href is not a URL; the tag still decodes without an id."""
        reference = TagReference.from_value([
            {"type": "Mention", "href": "", "name": "@ghost"},
            {"type": "Mention", "href": "https://example.com/users/bob", "name": "@bob"},
        ])
        empty, bob = reference.as_list()
        assert empty.entity_type == EntityType.MENTION
        assert empty.object_id() is None
        assert bob.object_id() == "https://example.com/users/bob"

    def test_emoji_with_icon(self):
        """Misskey emoji carry an id and an icon."""
        reference = TagReference.from_value({
            "id": "https://misskey.example/emojis/blobcat",
            "type": "Emoji",
            "name": ":blobcat:",
            "updated": "2023-10-10T10:10:10.010Z",
            "icon": {
                "type": "Image",
                "mediaType": "image/png",
                "url": "https://cdn.misskey.example/blobcat.png",
            },
        })
        assert reference.kind == Multiplicity.SINGLE
        emoji = reference.as_list()[0]
        assert emoji.entity_type == EntityType.EMOJI
        assert emoji.object_id() == "https://misskey.example/emojis/blobcat"
        assert emoji.icon.get_largest_image().url == "https://cdn.misskey.example/blobcat.png"

    def test_tag_alias_for_name(self):
        """Some producers put the tag name under `tag`."""
        tag = TagReference.from_value({"type": "Hashtag", "tag": "#cats"}).as_list()[0]
        assert tag.name == "#cats"

    def test_tag_url(self):
        """The tag page URL is kept next to the id."""
        tag = Tag.from_dict({
            "type": "Hashtag",
            "href": "https://example.com/tags/cats",
            "url": "https://example.com/explore/cats",
            "name": "#cats",
        })
        assert tag.object_id() == "https://example.com/tags/cats"
        assert tag.url == "https://example.com/explore/cats"
        assert tag.to_dict()["url"] == "https://example.com/explore/cats"
        assert Tag.from_dict(tag.to_dict()) == tag

    def test_malformed_tag_url_is_dropped(self):
        tag = Tag.from_dict({"type": "Hashtag", "name": "#cats", "url": ""})
        assert tag.url is None

    def test_unknown_tag_type(self):
        """Producer specific tag types decode as UNKNOWN."""
        tag = TagReference.from_value({
            "type": "TVSeason",
            "href": "https://neodb.example/tv/season/1",
            "image": "https://neodb.example/m/1.jpg",
            "name": "Season 1",
        }).as_list()[0]
        assert tag.entity_type == EntityType.UNKNOWN
        assert tag.object_id() == "https://neodb.example/tv/season/1"
        assert tag.icon.get_largest_image().url == "https://neodb.example/m/1.jpg"


class TestAttachmentReference:
    """Test attachment decoding."""

    def test_property_value_aliases(self):
        """`value` is read as content."""
        attachment = AttachmentReference.from_value({
            "type": "PropertyValue",
            "name": "fedineko:index",
            "value": "allow",
        }).as_list()[0]
        assert attachment.entity_type == EntityType.PROPERTY_VALUE
        assert attachment.content == "allow"

    def test_document_aliases(self):
        """`href` is read as url."""
        attachment = Attachment.from_dict({
            "type": "Document",
            "mediaType": "image/jpeg",
            "href": "https://files.example/1.jpg",
        })
        assert attachment.url == "https://files.example/1.jpg"
        assert attachment.media_type == "image/jpeg"

    def test_repr_is_compact(self):
        attachment = Attachment.from_dict({"type": "Document", "url": "https://files.example/1.jpg"})
        assert repr(attachment) == (
            "Attachment(type=Document, content='', name='', "
            "url='https://files.example/1.jpg', media_type='')"
        )

    def test_attachment_requires_type(self):
        with pytest.raises(DecodeError):
            Attachment.from_dict({"url": "https://files.example/1.jpg"})


class TestActorReference:
    """Test actor references."""

    def test_full_actor(self):
        """Objects with an inbox decode as full actors."""
        reference = ActorReference.from_value(full_actor("https://example.com/users/alice"))
        assert reference.kind == ActorReferenceKind.ACTOR
        assert reference.id == "https://example.com/users/alice"
        assert reference.entity_type == EntityType.PERSON

    def test_stub(self):
        """Objects without an inbox fall back to a stub."""
        reference = ActorReference.from_value(actor_stub("https://example.com/c/cats", "Group"))
        assert reference.kind == ActorReferenceKind.STUB
        assert reference.entity_type == EntityType.GROUP

    def test_url(self):
        """Bare URLs have no type."""
        reference = ActorReference.from_value("https://example.com/users/alice")
        assert reference.kind == ActorReferenceKind.URL
        assert reference.id == "https://example.com/users/alice"
        assert reference.entity_type is None

    def test_unmatched_shape_fails(self):
        with pytest.raises(DecodeError):
            ActorReference.from_value({"type": "Person"})


class TestCompoundActorReference:
    """Test attribution id resolution."""

    def test_single_reference(self):
        reference = CompoundActorReference.from_value("https://example.com/users/alice")
        assert reference.kind == Multiplicity.SINGLE
        assert reference.id == "https://example.com/users/alice"

    def test_person_preferred_over_group(self):
        """[Group, Person] attributes to the Person."""
        reference = CompoundActorReference.from_value([
            actor_stub("https://peertube.example/video-channels/cats", "Group"),
            actor_stub("https://peertube.example/accounts/alice", "Person"),
        ])
        assert reference.id == "https://peertube.example/accounts/alice"

    def test_service_is_person_like(self):
        reference = CompoundActorReference.from_value([
            "https://example.com/groups/1",
            full_actor("https://example.com/bots/1", "Service"),
        ])
        assert reference.id == "https://example.com/bots/1"

    def test_first_entry_when_no_person(self):
        """[Group, Group] attributes to the first Group."""
        reference = CompoundActorReference.from_value([
            actor_stub("https://example.com/groups/1", "Group"),
            actor_stub("https://example.com/groups/2", "Group"),
        ])
        assert reference.id == "https://example.com/groups/1"

    def test_untyped_entries(self):
        """Bare URLs cannot be typed, so the first one is used."""
        reference = CompoundActorReference.from_value([
            "https://example.com/users/a",
            "https://example.com/users/b",
        ])
        assert reference.id == "https://example.com/users/a"

    def test_empty_list(self):
        reference = CompoundActorReference.from_value([])
        assert reference.id is None
        assert reference.as_id_list() == []

    def test_as_id_list(self):
        reference = CompoundActorReference.from_value([
            actor_stub("https://example.com/groups/1", "Group"),
            "https://example.com/users/a",
        ])
        assert reference.as_id_list() == [
            "https://example.com/groups/1",
            "https://example.com/users/a",
        ]


class TestPublicKeyReference:
    """Test public key decoding."""

    KEY = {
        "id": "https://example.com/users/alice#main-key",
        "owner": "https://example.com/users/alice",
        "publicKeyPem": "-----BEGIN PUBLIC KEY-----\nMIIB\n-----END PUBLIC KEY-----\n",
    }

    def test_single_and_list(self):
        assert PublicKeyReference.from_value(self.KEY).kind == Multiplicity.SINGLE
        keys = PublicKeyReference.from_value([self.KEY]).as_list()
        assert keys[0].owner == "https://example.com/users/alice"

    def test_missing_pem_fails(self):
        key = dict(self.KEY)
        del key["publicKeyPem"]
        with pytest.raises(DecodeError):
            PublicKeyReference.from_value(key)


class TestContentMap:
    """Test contentMap variants."""

    def test_mapping(self):
        content_map = ContentMap.from_value({"en": "Hello", "de": "Hallo"})
        assert content_map.as_map() == {"en": "Hello", "de": "Hallo"}

    def test_single_item_list(self):
        """The list variant is read as a default entry."""
        assert ContentMap.from_value(["Hello"]).as_map() == {"default": "Hello"}

    def test_empty_list(self):
        assert ContentMap.from_value([]).as_map() == {}


WIRE_SHAPES = [
    (Context, "https://www.w3.org/ns/activitystreams"),
    (Context, [{"indexable": "toot:indexable"}, "https://w3id.org/security/v1"]),
    (UrlReference, "https://example.com/1"),
    (UrlReference, PEERTUBE_URLS[0]),
    (UrlReference, PEERTUBE_URLS),
    (UrlReference, ["https://example.com/1", "https://example.com/2"]),
    (ImageReference, "https://example.com/a.png"),
    (ImageReference, PEERTUBE_ICONS[0]),
    (ImageReference, PEERTUBE_ICONS),
    (ActorReference, "https://example.com/users/alice"),
    (ActorReference, actor_stub("https://example.com/c/cats", "Group")),
    (ActorReference, full_actor("https://example.com/users/alice")),
    (CompoundActorReference, "https://example.com/users/alice"),
    (CompoundActorReference, [actor_stub("https://example.com/c/cats", "Group"), "https://example.com/u/a"]),
    (TagReference, {"type": "Hashtag", "href": "https://example.com/tags/cats", "name": "#cats"}),
    (TagReference, [{"type": "Mention", "href": "https://example.com/users/bob", "name": "@bob"}]),
    (AttachmentReference, {"type": "PropertyValue", "name": "fedineko:index", "value": "deny"}),
    (AttachmentReference, [{"type": "Document", "url": "https://files.example/1.jpg"}]),
    (PublicKeyReference, TestPublicKeyReference.KEY),
    (PublicKeyReference, [TestPublicKeyReference.KEY]),
    (ContentMap, {"en": "Hello"}),
    (ContentMap, ["Hello"]),
]


@pytest.mark.parametrize("wrapper,value", WIRE_SHAPES)
def test_reencoded_wrapper_decodes_equal(wrapper, value):
    """Encoding a decoded wrapper and decoding again gives an equal model."""
    decoded = wrapper.from_value(value)
    assert wrapper.from_value(decoded.to_value()) == decoded
    assert wrapper.from_value(decoded.to_value()).kind == decoded.kind
