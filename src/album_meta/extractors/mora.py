# src/album_meta/extractors/mora.py

"""Extractor for mora.jp package pages.

The package page embeds a JSON blob in a meta tag that tells us where the
package metadata JSON lives on the CDN. All album data comes from that JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from album_meta.domain.models import Album, AlbumBuilder, Song, SongBuilder
from album_meta.extractors.base import (
    Extractor,
    get_field,
    guess_album_kind,
    parse_date,
    parse_int,
    title_names,
)
from album_meta.scraper.errors import InvalidDocumentError, InvalidUrlError

logger = logging.getLogger(__name__)

HOST = "mora.jp"
HTML_BASE_URL = "https://mora.jp/package"
JSON_BASE_URL = "https://cf.mora.jp/contents/package"
JSON_FILENAME = "packageMeta.json"

COUNTRY = "JP"
LOCALE = "ja"


@dataclass(frozen=True, slots=True)
class PackageLocation:
    """Where the package metadata JSON lives, as announced by the HTML page."""

    mount_point: str
    label_id: str
    material_no: str


class MoraExtractor(Extractor):
    host = HOST

    @staticmethod
    def parse_album_id(url: str) -> str:
        """Return the last two path segments, e.g. `43000001/4547366347050`."""
        pieces = [p for p in urlsplit(url).path.split("/") if p]
        if len(pieces) < 2:
            raise InvalidUrlError("album id")
        return "/".join(pieces[-2:])

    def extract(self) -> Album:
        html = self.fetch(album_url(self.album_id))
        location = parse_html(html)

        payload = self.fetch(build_json_endpoint(location))

        album = parse(self.album_id, payload)
        logger.info(
            "Extracted mora package %s (%s tracks).",
            self.album_id,
            len(album.songs),
        )
        return album


def album_url(album_id: str) -> str:
    return f"{HTML_BASE_URL}/{album_id}/"


def parse(album_id: str, payload: str) -> Album:
    """Parse the package metadata JSON into an Album."""
    builder = AlbumBuilder().set_country(COUNTRY).set_url(album_url(album_id))
    builder = parse_json(payload, builder)
    return builder.build()


def parse_html(html: str) -> PackageLocation:
    """Read the `msApplication-Arguments` meta tag from the package page."""
    soup = BeautifulSoup(html, "lxml")

    meta = soup.find("meta", attrs={"name": "msApplication-Arguments"})
    content = meta.get("content") if meta is not None else None
    if not content:
        raise InvalidDocumentError("missing msApplication-Arguments")

    try:
        arguments = json.loads(content.replace("&quot;", '"'))
        return PackageLocation(
            mount_point=str(arguments["mountPoint"]),
            label_id=str(arguments["labelId"]),
            material_no=str(arguments["materialNo"]),
        )
    except (json.JSONDecodeError, KeyError, TypeError) as exc:
        raise InvalidDocumentError("malformed msApplication-Arguments") from exc


def build_json_endpoint(location: PackageLocation) -> str:
    """Build the CDN URL; the material number is split into 4/3/3 digits."""
    padded = location.material_no.zfill(10)
    a, b, c = padded[0:4], padded[4:7], padded[7:10]
    return "/".join(
        [
            JSON_BASE_URL,
            location.mount_point,
            location.label_id,
            a,
            b,
            c,
            JSON_FILENAME,
        ],
    )


def parse_json(payload: str, builder: AlbumBuilder) -> AlbumBuilder:
    try:
        root = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise InvalidDocumentError("malformed JSON") from exc

    if not isinstance(root, dict):
        raise InvalidDocumentError("expected a JSON object")

    tracks = get_field(root, "trackList")
    if not isinstance(tracks, list):
        raise InvalidDocumentError("trackList is not a list")

    # mora has no kind label, so it is inferred from the track count.
    builder = builder.set_kind(guess_album_kind(len(tracks))).set_released_on(
        parse_date(get_field(root, "startDate"), "%Y/%m/%d %H:%M:%S"),
    )

    for name in title_names(get_field(root, "title"), LOCALE, "title"):
        builder = builder.add_name(name)

    for raw in tracks:
        builder = builder.add_song(parse_song(raw))

    return builder


def parse_song(raw: dict[str, Any]) -> Song:
    song = (
        SongBuilder()
        .set_position(parse_int(get_field(raw, "trackNo"), "position"))
        .set_duration(parse_int(get_field(raw, "duration"), "duration"))
    )
    for name in title_names(get_field(raw, "title"), LOCALE, "title"):
        song = song.add_name(name)
    return song.build()
