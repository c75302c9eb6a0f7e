# src/album_meta/editor/session.py

"""Interactive correction of an extracted album.

The session walks the album's names, then each song's names, letting an
operator add, edit, delete or romanize names. It then asks for confirmation
and rebuilds the album through the builders, so the edited record passes the
same validation as a freshly extracted one.

Flow:

    REVIEWING -> (a/e) EDITING_NAME -> REVIEWING -> ... -> CONFIRMING
    CONFIRMING -> (n) REVIEWING from the top
    CONFIRMING -> (y) DONE

Cancellation is not a state: the line reader raises EditCancelled and the
session lets it propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Protocol

from album_meta.domain.models import (
    Album,
    AlbumBuilder,
    AlbumKind,
    BuildError,
    Name,
    Song,
    SongBuilder,
)
from album_meta.domain.names import default_name, guess_name, set_flags
from album_meta.text.inflector import format_duration, slugify

logger = logging.getLogger(__name__)


class EditCancelled(Exception):
    """The operator interrupted the session."""


class LineReader(Protocol):
    def read_line(self, prompt: str, text: str = "") -> str:
        """Return one line of operator input, optionally pre-filled with `text`.

        Raises EditCancelled on interrupt or end of input.
        """
        ...


class State(str, Enum):
    REVIEWING = "reviewing"
    EDITING_NAME = "editing_name"
    CONFIRMING = "confirming"
    DONE = "done"


# ---------------------------------------------------------------------------
# Working copy
# ---------------------------------------------------------------------------


@dataclass
class NamesForm:
    """An editable name list; deletions are toggles until commit."""

    entries: list[Name]
    deleted: set[int] = field(default_factory=set)

    def toggle_delete(self, index: int) -> None:
        self.deleted ^= {index}

    def kept(self) -> list[Name]:
        return [n for i, n in enumerate(self.entries) if i not in self.deleted]

    @property
    def slug(self) -> str | None:
        text = default_name(self.kept())
        return slugify(text) if text is not None else None


@dataclass
class SongForm:
    position: int
    duration: int
    names: NamesForm

    @classmethod
    def from_song(cls, song: Song) -> SongForm:
        return cls(
            position=song.position,
            duration=song.duration,
            names=NamesForm(list(song.names)),
        )

    def to_song(self) -> Song:
        builder = SongBuilder().set_position(self.position).set_duration(self.duration)
        for name in self.names.kept():
            builder = builder.add_name(name)
        return builder.build()


@dataclass
class AlbumForm:
    kind: AlbumKind
    country: str
    released_on: date
    url: str
    artwork_url: str | None
    names: NamesForm
    songs: list[SongForm]

    @classmethod
    def from_album(cls, album: Album) -> AlbumForm:
        return cls(
            kind=album.kind,
            country=album.country,
            released_on=album.released_on,
            url=album.url,
            artwork_url=album.artwork_url,
            names=NamesForm(list(album.names)),
            songs=[SongForm.from_song(s) for s in album.songs],
        )

    def to_album(self) -> Album:
        """Rebuild the album; ids are derived from the edited default names."""
        builder = (
            AlbumBuilder()
            .set_kind(self.kind)
            .set_country(self.country)
            .set_released_on(self.released_on)
            .set_artwork_url(self.artwork_url)
            .set_url(self.url)
        )
        for name in self.names.kept():
            builder = builder.add_name(name)
        for song in self.songs:
            builder = builder.add_song(song.to_song())
        return builder.build()


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class EditSession:
    """Drive an operator through reviewing and fixing an album's names."""

    def __init__(
        self,
        album: Album,
        reader: LineReader,
        *,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.form = AlbumForm.from_album(album)
        self.state = State.REVIEWING
        self._reader = reader
        self._echo = echo

    def run(self) -> Album:
        """Run until the operator commits; return the rebuilt album."""
        while True:
            self.state = State.REVIEWING
            self._review_album()

            self.state = State.CONFIRMING
            if not self._confirm():
                continue

            try:
                album = self.form.to_album()
            except BuildError as exc:
                self._echo(f"cannot commit: {exc}")
                logger.debug("Rebuild failed, back to review: %s", exc)
                continue

            self.state = State.DONE
            return album

    # -- reviewing ---------------------------------------------------------

    def _review_album(self) -> None:
        self._echo(f"kind: {self.form.kind}")
        self._echo(f"released on: {self.form.released_on.isoformat()}")
        self._review_names(self.form.names)

        for song in self.form.songs:
            self._echo(f"position: {song.position}")
            self._echo(f"duration: {format_duration(song.duration)}")
            self._review_names(song.names)

    def _review_names(self, names: NamesForm) -> None:
        while True:
            self._show_names(names)

            command = self._read("> Edit name? [a/e/d/g/N] ").lower()
            if command in ("", "n"):
                return
            if command == "a":
                self._add_name(names)
            elif command == "e":
                index = self._read_index(names)
                if index is not None:
                    names.entries[index] = self._edit_name(names.entries[index])
                    set_flags(names.entries, index)
            elif command == "d":
                index = self._read_index(names)
                if index is not None:
                    names.toggle_delete(index)
            elif command == "g":
                if not guess_name(names.entries):
                    self._echo("nothing to guess")
            else:
                self._echo(f"unknown command: {command}")

            self._echo("")

    def _show_names(self, names: NamesForm) -> None:
        self._echo(f"id: {names.slug or '(none)'}")
        self._echo("names:")
        for i, name in enumerate(names.entries):
            marker = "*" if i in names.deleted else ""
            self._echo(
                f"  {i}{marker}. {name.text} (locale: {name.locale}, "
                f"original: {name.is_original}, default: {name.is_default})",
            )
        self._echo("")

    def _read_index(self, names: NamesForm) -> int | None:
        raw = self._read("> Index: ")
        try:
            index = int(raw)
        except ValueError:
            self._echo(f"invalid index: {raw!r}")
            return None

        if not 0 <= index < len(names.entries):
            self._echo(f"index out of range: {index}")
            return None
        return index

    # -- editing a name ----------------------------------------------------

    def _add_name(self, names: NamesForm) -> None:
        name = self._edit_name(Name(text="", locale=""))
        if not name.text:
            self._echo("empty name, nothing added")
            return

        names.entries.append(name)
        set_flags(names.entries, len(names.entries) - 1)

    def _edit_name(self, name: Name) -> Name:
        """Prompt for each field; empty input keeps the current value."""
        previous = self.state
        self.state = State.EDITING_NAME

        text = self._read(f"  name [{name.text}]: ", name.text)
        locale = self._read(f"  locale [{name.locale}]: ")
        is_original = self._read(f"  original [{name.is_original}]: ")
        is_default = self._read(f"  default [{name.is_default}]: ")

        self.state = previous

        return replace(
            name,
            text=text or name.text,
            locale=locale or name.locale,
            is_original=parse_boolean(is_original) if is_original else name.is_original,
            is_default=parse_boolean(is_default) if is_default else name.is_default,
        )

    # -- confirming --------------------------------------------------------

    def _confirm(self) -> bool:
        answer = self._read("> Commit? [Y/n] ").lower()
        return answer in ("", "y")

    def _read(self, prompt: str, text: str = "") -> str:
        return self._reader.read_line(prompt, text).strip()


def parse_boolean(value: str) -> bool:
    return value in ("true", "t")


def edit(album: Album, reader: LineReader, *, echo: Callable[[str], None] = print) -> Album:
    """Run an EditSession over `album` and return the committed result."""
    return EditSession(album, reader, echo=echo).run()
