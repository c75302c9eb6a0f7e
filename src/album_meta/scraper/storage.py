# src/album_meta/scraper/storage.py

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from album_meta.domain.models import (
    Album,
    AlbumBuilder,
    AlbumKind,
    Name,
    Song,
    SongBuilder,
)
from album_meta.scraper.client import FetchClient
from album_meta.scraper.errors import AlbumFileError

logger = logging.getLogger(__name__)

ARTWORK_FILENAME = "default.jpg"


def name_to_dict(name: Name) -> dict[str, Any]:
    return {
        "text": name.text,
        "locale": name.locale,
        "is_original": name.is_original,
        "is_default": name.is_default,
    }


def song_to_dict(song: Song) -> dict[str, Any]:
    return {
        "id": song.id,
        "position": song.position,
        "duration": song.duration,
        "names": [name_to_dict(n) for n in song.names],
    }


def album_to_dict(album: Album) -> dict[str, Any]:
    return {
        "id": album.id,
        "kind": album.kind.value,
        "country": album.country,
        "released_on": album.released_on.isoformat(),
        "artwork_url": album.artwork_url,
        "url": album.url,
        "names": [name_to_dict(n) for n in album.names],
        "songs": [song_to_dict(s) for s in album.songs],
    }


def name_from_dict(obj: dict[str, Any]) -> Name:
    return Name(
        text=obj["text"],
        locale=obj["locale"],
        is_original=bool(obj.get("is_original", False)),
        is_default=bool(obj.get("is_default", False)),
    )


def album_from_dict(obj: dict[str, Any]) -> Album:
    """Rebuild an Album written by `album_to_dict`.

    Goes through the builders, so a malformed file raises BuildError (or
    KeyError/ValueError for missing or invalid keys).
    """
    builder = (
        AlbumBuilder()
        .set_id(obj["id"])
        .set_kind(AlbumKind(obj["kind"]))
        .set_country(obj["country"])
        .set_released_on(date.fromisoformat(obj["released_on"]))
        .set_artwork_url(obj.get("artwork_url"))
        .set_url(obj["url"])
    )
    for raw_name in obj.get("names", []):
        builder = builder.add_name(name_from_dict(raw_name))

    for raw_song in obj.get("songs", []):
        song = (
            SongBuilder()
            .set_id(raw_song["id"])
            .set_position(raw_song["position"])
            .set_duration(raw_song["duration"])
        )
        for raw_name in raw_song.get("names", []):
            song = song.add_name(name_from_dict(raw_name))
        builder = builder.add_song(song.build())

    return builder.build()


def write_album(output_dir: Path, artist_id: str, album: Album) -> list[Path]:
    """Write the album and one file per song, keyed by their ids.

    Layout:
        <output_dir>/albums/<artist_id>/<album.id>.json
        <output_dir>/songs/<artist_id>/<song.id>.json
    """
    written: list[Path] = []

    album_path = output_dir / "albums" / artist_id / f"{album.id}.json"
    _write_json(album_path, album_to_dict(album))
    written.append(album_path)

    songs_dir = output_dir / "songs" / artist_id
    for song in album.songs:
        song_path = songs_dir / f"{song.id}.json"
        _write_json(song_path, {"album_id": album.id, **song_to_dict(song)})
        written.append(song_path)

    logger.info("Wrote %s files for album %s to %s.", len(written), album.id, output_dir)
    return written


def artwork_path(output_dir: Path, artist_id: str, album: Album) -> Path:
    return output_dir / "-attachments" / "albums" / artist_id / album.id / ARTWORK_FILENAME


def write_artwork(
    client: FetchClient,
    output_dir: Path,
    artist_id: str,
    album: Album,
) -> Path | None:
    """Download the album artwork, if it has any. Returns the saved path."""
    if album.artwork_url is None:
        return None

    path = artwork_path(output_dir, artist_id, album)
    client.download(album.artwork_url, path)
    return path


def load_album(path: Path) -> Album:
    """Read an album JSON file written by `write_album`.

    Raises AlbumFileError if the file cannot be read, is not JSON, or lacks
    a key or value the album needs. A BuildError from the builders
    propagates unchanged.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return album_from_dict(json.load(f))
    except OSError as exc:
        raise AlbumFileError(path, str(exc)) from exc
    except KeyError as exc:
        raise AlbumFileError(path, f"missing key {exc}") from exc
    except (ValueError, TypeError, AttributeError) as exc:
        # json.JSONDecodeError is a ValueError, as are bad kinds and dates.
        raise AlbumFileError(path, str(exc)) from exc


def _write_json(path: Path, obj: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(json.dumps(obj, ensure_ascii=False, indent=2) + "\n")
