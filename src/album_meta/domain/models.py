# src/album_meta/domain/models.py

"""Canonical album records and the builders that assemble them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum

from album_meta.text.inflector import slugify


class AlbumKind(str, Enum):
    """Release classification. The values are part of the output format."""

    SINGLE = "single"
    EP = "ep"
    LP = "lp"

    def __str__(self) -> str:
        return self.value


class BuildError(Exception):
    """Raised when a builder cannot produce a valid record."""


class MissingRequiredFieldError(BuildError):
    def __init__(self, field: str) -> None:
        super().__init__(f"missing required field: {field}")
        self.field = field


class MissingIdentifierError(BuildError):
    def __init__(self) -> None:
        super().__init__("cannot derive identifier: no default name")


@dataclass(frozen=True, slots=True)
class Name:
    """One localized rendering of an album or song title."""

    text: str
    locale: str
    is_original: bool = False
    is_default: bool = False


@dataclass(frozen=True, slots=True)
class Song:
    """A single track on an album."""

    id: str
    position: int
    duration: int  # seconds
    names: tuple[Name, ...] = ()

    @property
    def default_name(self) -> str | None:
        return _default_text(self.names)


@dataclass(frozen=True, slots=True)
class Album:
    """A release, normalized from one catalog source."""

    id: str
    kind: AlbumKind
    country: str
    released_on: date
    url: str
    artwork_url: str | None = None
    names: tuple[Name, ...] = ()
    songs: tuple[Song, ...] = ()

    @property
    def default_name(self) -> str | None:
        return _default_text(self.names)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SongBuilder:
    """Accumulates song fields; every setter returns a new builder."""

    id: str | None = None
    position: int | None = None
    duration: int | None = None
    names: tuple[Name, ...] = ()

    def set_id(self, id: str) -> SongBuilder:
        return replace(self, id=id)

    def set_position(self, position: int) -> SongBuilder:
        return replace(self, position=position)

    def set_duration(self, duration: int) -> SongBuilder:
        return replace(self, duration=duration)

    def add_name(self, name: Name) -> SongBuilder:
        return replace(self, names=(*self.names, name))

    def build(self) -> Song:
        position = _require(self.position, "position")
        duration = _require(self.duration, "duration")

        return Song(
            id=_derive_id(self.id, self.names),
            position=position,
            duration=duration,
            names=self.names,
        )


@dataclass(frozen=True, slots=True)
class AlbumBuilder:
    """Accumulates album fields; every setter returns a new builder."""

    id: str | None = None
    kind: AlbumKind | None = None
    country: str | None = None
    released_on: date | None = None
    artwork_url: str | None = None
    url: str | None = None
    names: tuple[Name, ...] = ()
    songs: tuple[Song, ...] = ()

    def set_id(self, id: str) -> AlbumBuilder:
        return replace(self, id=id)

    def set_kind(self, kind: AlbumKind) -> AlbumBuilder:
        return replace(self, kind=kind)

    def set_country(self, country: str) -> AlbumBuilder:
        return replace(self, country=country)

    def set_released_on(self, released_on: date) -> AlbumBuilder:
        return replace(self, released_on=released_on)

    def set_artwork_url(self, artwork_url: str | None) -> AlbumBuilder:
        return replace(self, artwork_url=artwork_url)

    def set_url(self, url: str) -> AlbumBuilder:
        return replace(self, url=url)

    def add_name(self, name: Name) -> AlbumBuilder:
        return replace(self, names=(*self.names, name))

    def add_song(self, song: Song) -> AlbumBuilder:
        return replace(self, songs=(*self.songs, song))

    def build(self) -> Album:
        kind = _require(self.kind, "kind")
        country = _require(self.country, "country")
        released_on = _require(self.released_on, "released_on")
        url = _require(self.url, "url")

        return Album(
            id=_derive_id(self.id, self.names),
            kind=kind,
            country=country,
            released_on=released_on,
            url=url,
            artwork_url=self.artwork_url,
            names=self.names,
            songs=self.songs,
        )


def _require(value, field: str):
    if value is None:
        raise MissingRequiredFieldError(field)
    return value


def _derive_id(explicit: str | None, names: tuple[Name, ...]) -> str:
    """Use the explicit id, else slugify the default name."""
    if explicit is not None:
        return explicit

    text = _default_text(names)
    if text is None:
        raise MissingIdentifierError()
    return slugify(text)


def _default_text(names: tuple[Name, ...]) -> str | None:
    for name in names:
        if name.is_default:
            return name.text
    return None
