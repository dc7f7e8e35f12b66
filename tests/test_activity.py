# tests/test_activity.py
"""Tests for Activity envelopes and recipient matching."""

import logging

import pytest

from fedimodel import PUBLIC_ADDRESS, Activity, DecodeError, EntityType

ACTOR_ID = "https://mastodon.example/users/alice"


def make_activity(activity_type: str = "Create", **overrides) -> dict:
    document = {
        "@context": "https://www.w3.org/ns/activitystreams",
        "id": f"{ACTOR_ID}/statuses/1/activity",
        "type": activity_type,
        "actor": ACTOR_ID,
    }
    document.update(overrides)
    return document


class TestActivityDecoding:
    """Test decoding activity envelopes."""

    def test_delete_with_tombstone(self):
        """Tombstone payloads are typed and expose their id."""
        activity = Activity.from_dict(make_activity(
            "Delete",
            object={"id": f"{ACTOR_ID}/statuses/1", "type": "Tombstone"},
        ))
        assert activity.entity_type == EntityType.DELETE
        assert activity.inner_object_type() == EntityType.TOMBSTONE
        assert activity.inner_object_id() == f"{ACTOR_ID}/statuses/1"

    def test_follow_with_url_payload(self):
        """Follow payloads are usually the followed actor's URL."""
        activity = Activity.from_dict(make_activity(
            "Follow",
            object="https://other.example/users/bob",
        ))
        assert activity.inner_object_as_string() == "https://other.example/users/bob"
        assert activity.inner_object_id() == "https://other.example/users/bob"
        assert activity.inner_object_type() == EntityType.UNKNOWN

    def test_create_with_inline_note(self):
        activity = Activity.from_dict(make_activity(object={
            "id": f"{ACTOR_ID}/statuses/1",
            "type": "Note",
            "attributedTo": ACTOR_ID,
            "content": "Hello",
        }))
        assert activity.activity_id == f"{ACTOR_ID}/statuses/1/activity"
        assert activity.actor.id == ACTOR_ID
        assert activity.inner_object_type() == EntityType.NOTE
        assert activity.inner_object_as_string() is None

    def test_movie_payload_is_page(self):
        activity = Activity.from_dict(make_activity(object={"id": "https://x.example/m/1", "type": "Movie"}))
        assert activity.inner_object_type() == EntityType.PAGE

    def test_unlisted_payload_type(self):
        activity = Activity.from_dict(make_activity(object={"id": "https://x.example/e/1", "type": "Event"}))
        assert activity.inner_object_type() == EntityType.UNKNOWN

    def test_absent_object(self, caplog):
        """Activities without a payload decode; the payload has no id."""
        activity = Activity.from_dict(make_activity("Undo"))
        assert activity.object is None
        assert activity.inner_object_type() == EntityType.UNKNOWN
        with caplog.at_level(logging.ERROR, logger="fedimodel.activity"):
            assert activity.inner_object_id() is None
        assert "Failed to get ID" in caplog.text

    def test_payload_without_usable_id(self):
        activity = Activity.from_dict(make_activity(object={"type": "Note", "id": "not a url"}))
        assert activity.inner_object_id() is None

    def test_missing_actor_fails(self):
        document = make_activity()
        del document["actor"]
        with pytest.raises(DecodeError) as exc_info:
            Activity.from_dict(document)
        assert exc_info.value.field == "actor"

    def test_reencoded_activity_decodes_equal(self):
        activity = Activity.from_dict(make_activity(
            object={"id": f"{ACTOR_ID}/statuses/1", "type": "Note"},
            to=[PUBLIC_ADDRESS],
            cc=[f"{ACTOR_ID}/followers"],
        ))
        assert Activity.from_dict(activity.to_dict()) == activity


class TestToFieldMatches:
    """Test recipient address matching."""

    def test_activity_and_payload_recipients(self):
        """Both top-level and payload recipients are searched."""
        activity = Activity.from_dict(make_activity(
            to=[PUBLIC_ADDRESS],
            object={"id": f"{ACTOR_ID}/statuses/1", "type": "Note", "to": "https://1.2/3"},
        ))
        assert activity.to_field_matches(PUBLIC_ADDRESS)
        assert activity.to_field_matches("https://1.2/3")

    def test_substring_match(self):
        """Matching is containment, not equality."""
        activity = Activity.from_dict(make_activity(to=[PUBLIC_ADDRESS]))
        assert activity.to_field_matches("#Public")

    def test_payload_recipient_objects(self):
        activity = Activity.from_dict(make_activity(object={
            "id": f"{ACTOR_ID}/statuses/1",
            "type": "Note",
            "to": [
                {"type": "Collection", "id": f"{ACTOR_ID}/followers"},
                "https://other.example/users/bob",
            ],
        }))
        assert activity.to_field_matches(f"{ACTOR_ID}/followers")
        assert activity.to_field_matches("users/bob")

    def test_single_recipient_object(self):
        activity = Activity.from_dict(make_activity(object={
            "id": f"{ACTOR_ID}/statuses/1",
            "type": "Note",
            "to": {"id": "https://other.example/users/bob"},
        }))
        assert activity.to_field_matches("https://other.example/users/bob")

    def test_string_payload(self):
        activity = Activity.from_dict(make_activity("Follow", object="https://other.example/users/bob"))
        assert activity.to_field_matches("other.example")

    def test_no_match(self):
        activity = Activity.from_dict(make_activity(
            to=[PUBLIC_ADDRESS],
            object={"id": f"{ACTOR_ID}/statuses/1", "type": "Note", "to": [PUBLIC_ADDRESS]},
        ))
        assert not activity.to_field_matches("https://other.example/users/bob")

    def test_no_recipients(self):
        activity = Activity.from_dict(make_activity("Undo"))
        assert not activity.to_field_matches(PUBLIC_ADDRESS)
