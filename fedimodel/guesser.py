# fedimodel/guesser.py
"""
Guess what a bare URL points to.

When only an object URL is known (e.g. the object became a Tombstone),
its path can hint whether it is an actor or content. This is unreliable
and only a last-resort fallback, never a confirmation of identity.

Known URL conventions are declared as a YAML pattern document. Actor
patterns name the account with a `user` group; while there is no
guarantee it matches the real username, in practice it often does.
"""

import logging
import re
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Pattern
from urllib.parse import urlparse

import yaml

from .actor import ActorReadableId

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS_YAML = r"""
actor:
  - ^/(users|u)/(?P<user>[^/]+)$
  - ^/profile/(?P<user>[^/]+)$
  - ^/ap/users/(?P<user>\d+)$
content:
  - ^/users/[^/]+/statuses/\d+$     # Mastodon
  - ^/notes/.+$                     # Misskey
  - ^/p/([^/]+)/\d+$                # Pixelfed
  - ^/post/\d+$                     # Lemmy
  - ^/(notice|objects)/[^/]+$       # Soapbox
  - ^/ap/users/\d+/post/\d+/?$      # Threads
"""


class GuessedType(Enum):
    """What a URL is assumed to refer to."""
    ACTOR = "actor"
    CONTENT = "content"
    UNKNOWN = "unknown"


def _url_parts(url: str) -> tuple[str, Optional[str]]:
    """(path, host) of url; empty path if it cannot be parsed."""
    try:
        parsed = urlparse(url)
        return parsed.path, parsed.hostname
    except (ValueError, AttributeError):
        return "", None


@dataclass(frozen=True)
class UrlClassifier:
    """
    Ordered, precompiled URL path patterns.

    Attributes:
        actor_patterns: Actor URL conventions, tried first
        content_patterns: Content URL conventions
    """
    actor_patterns: List[Pattern]
    content_patterns: List[Pattern]

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "UrlClassifier":
        """
        Build a classifier from a YAML pattern document with `actor` and
        `content` lists. Patterns are case-insensitive.

        Raises:
            ValueError: if the document is malformed or a pattern does not compile
        """
        data = yaml.safe_load(yaml_content) or {}
        if not isinstance(data, dict):
            raise ValueError("Pattern document must be a mapping")
        return cls(
            actor_patterns=cls._compile(data.get("actor", []), "actor"),
            content_patterns=cls._compile(data.get("content", []), "content"),
        )

    @staticmethod
    def _compile(patterns: Any, section: str) -> List[Pattern]:
        if not isinstance(patterns, list):
            raise ValueError(f"'{section}' must be a list of patterns")
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(str(pattern), re.IGNORECASE))
            except re.error as e:
                raise ValueError(f"Invalid {section} pattern {pattern!r}: {e}") from e
        return compiled

    def extract_username(self, url: str) -> Optional[str]:
        """Account name from the first actor pattern with a `user` group that matches."""
        path, _ = _url_parts(url)
        if not path:
            return None

        for pattern in self.actor_patterns:
            match = pattern.match(path)
            if match is None or "user" not in pattern.groupindex:
                continue
            username = match.group("user")
            if username:
                return username

        return None

    def extract_actor_readable_id(self, url: str) -> Optional[ActorReadableId]:
        username = self.extract_username(url)
        if username is None:
            return None
        _, host = _url_parts(url)
        if not host:
            return None
        return ActorReadableId(server=host, username=username)

    def guess(self, url: str) -> GuessedType:
        path, _ = _url_parts(url)
        if not path:
            return GuessedType.UNKNOWN

        if any(pattern.match(path) for pattern in self.actor_patterns):
            return GuessedType.ACTOR
        if any(pattern.match(path) for pattern in self.content_patterns):
            return GuessedType.CONTENT
        return GuessedType.UNKNOWN


_default_classifier: Optional[UrlClassifier] = None
_default_lock = threading.Lock()


def default_classifier() -> UrlClassifier:
    """The built-in classifier, compiled once on first use."""
    global _default_classifier
    if _default_classifier is None:
        with _default_lock:
            if _default_classifier is None:
                _default_classifier = UrlClassifier.from_yaml(DEFAULT_PATTERNS_YAML)
                logger.debug(
                    f"Compiled {len(_default_classifier.actor_patterns)} actor and "
                    f"{len(_default_classifier.content_patterns)} content URL patterns"
                )
    return _default_classifier


def extract_username_from_url(url: str) -> Optional[str]:
    """Account name from url if it follows a known actor URL convention."""
    return default_classifier().extract_username(url)


def extract_actor_readable_id_from_url(url: str) -> Optional[ActorReadableId]:
    """Like extract_username_from_url() but paired with the URL's host."""
    return default_classifier().extract_actor_readable_id(url)


def guess_object_type_from_url(url: str) -> GuessedType:
    """
    Guess what url refers to: actor patterns first, then content patterns.

    Only use this when there is nothing but the URL to go on.
    """
    return default_classifier().guess(url)
