# src/album_meta/extractors/base.py

"""Common extractor interface and field parsers shared by every source."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, ClassVar
from urllib.parse import urlsplit

from album_meta.domain.models import Album, AlbumKind, Name
from album_meta.domain.names import canonical_names
from album_meta.scraper.client import FetchClient
from album_meta.scraper.errors import InvalidFieldError, MissingFieldError
from album_meta.text.inflector import normalize_title

logger = logging.getLogger(__name__)


class Extractor(ABC):
    """Knows how to recognize, fetch and parse one catalog site."""

    host: ClassVar[str]

    def __init__(self, album_id: str, *, client: FetchClient | None = None) -> None:
        self.album_id = album_id
        self._client = client

    def __repr__(self) -> str:
        return f"{type(self).__name__}(album_id={self.album_id!r})"

    @classmethod
    def matches(cls, url: str) -> bool:
        """Return True if `url` points at this extractor's host."""
        return urlsplit(url).hostname == cls.host

    @classmethod
    def from_url(cls, url: str, *, client: FetchClient | None = None) -> Extractor:
        """Build an extractor for the album `url` points at.

        Raises InvalidUrlError if the album id cannot be parsed.
        """
        return cls(cls.parse_album_id(url), client=client)

    @staticmethod
    @abstractmethod
    def parse_album_id(url: str) -> str:
        """Pull the source-specific album id out of `url`."""

    @abstractmethod
    def extract(self) -> Album:
        """Fetch the album's documents and build the canonical record."""

    def fetch(self, url: str, params: dict[str, Any] | None = None) -> str:
        if self._client is not None:
            return self._client.fetch_text(url, params)

        with FetchClient() as client:
            return client.fetch_text(url, params)


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def guess_album_kind(track_count: int) -> AlbumKind:
    """Guess the album kind from the number of tracks."""
    if track_count <= 4:
        return AlbumKind.SINGLE
    if track_count <= 6:
        return AlbumKind.EP
    return AlbumKind.LP


def lookup_kind(
    label: str,
    kinds: Mapping[str, AlbumKind],
    ambiguous: Mapping[str, AlbumKind] | None = None,
) -> AlbumKind:
    """Map a source kind label to an AlbumKind.

    Labels in `ambiguous` map to a best guess and log a warning instead of
    failing. Unknown labels raise InvalidFieldError("kind").
    """
    if label in kinds:
        return kinds[label]

    if ambiguous and label in ambiguous:
        kind = ambiguous[label]
        logger.warning("Assuming album kind %r as %r.", label, kind.value)
        return kind

    raise InvalidFieldError("kind")


def parse_date(text: str, fmt: str, field: str = "release date") -> date:
    """Parse `text` with a strptime format into a date."""
    if not isinstance(text, str):
        raise InvalidFieldError(field)
    try:
        return datetime.strptime(text.strip(), fmt).date()
    except ValueError as exc:
        raise InvalidFieldError(field) from exc


def parse_int(text: Any, field: str) -> int:
    try:
        return int(str(text).strip())
    except ValueError as exc:
        raise InvalidFieldError(field) from exc


def parse_duration(text: str) -> int:
    """Parse a `MM:SS` duration into seconds."""
    pieces = text.strip().split(":", 1)

    minutes = parse_int(pieces[0], "duration.minutes")
    if len(pieces) < 2:
        raise MissingFieldError("duration.seconds")
    seconds = parse_int(pieces[1], "duration.seconds")

    return minutes * 60 + seconds


def title_names(raw: str, locale: str, field: str = "name") -> list[Name]:
    """Normalize an extracted title into its canonical singleton name list."""
    if not isinstance(raw, str):
        raise InvalidFieldError(field)
    return canonical_names(normalize_title(raw.strip()), locale)


def get_field(raw: Mapping[str, Any], key: str) -> Any:
    """Return `raw[key]`, raising MissingFieldError(key) if absent."""
    try:
        return raw[key]
    except (KeyError, TypeError) as exc:
        raise MissingFieldError(key) from exc
