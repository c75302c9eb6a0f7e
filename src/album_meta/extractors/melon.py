# src/album_meta/extractors/melon.py

"""Extractor for www.melon.com album pages.

The album kind lives only in the HTML page; everything else comes from the
web player's JSON endpoint, keyed by the same album id.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup

from album_meta.domain.models import Album, AlbumBuilder, AlbumKind, Song, SongBuilder
from album_meta.extractors.base import (
    Extractor,
    get_field,
    lookup_kind,
    parse_date,
    parse_int,
    title_names,
)
from album_meta.scraper.errors import (
    InvalidDocumentError,
    InvalidFieldError,
    InvalidUrlError,
    MissingFieldError,
)

logger = logging.getLogger(__name__)

HOST = "www.melon.com"
HTML_ENDPOINT = "https://www.melon.com/album/detail.htm"
JSON_ENDPOINT = "https://www.melon.com/webplayer/getContsInfo.json"
ARTWORK_URL_TEMPLATE = "https://static.melon.co.kr{path}_org.jpg"

COUNTRY = "KR"
LOCALE = "ko"

KINDS: dict[str, AlbumKind] = {
    "싱글": AlbumKind.SINGLE,
    "EP": AlbumKind.EP,
    "정규": AlbumKind.LP,
}

# Labels that usually, but not always, mean the given kind.
AMBIGUOUS_KINDS: dict[str, AlbumKind] = {
    "OST": AlbumKind.SINGLE,
    "리믹스": AlbumKind.SINGLE,  # remix
    "옴니버스": AlbumKind.LP,  # omnibus compilation
}


class MelonExtractor(Extractor):
    host = HOST

    @staticmethod
    def parse_album_id(url: str) -> str:
        values = parse_qs(urlsplit(url).query).get("albumId")
        if not values or not values[0]:
            raise InvalidUrlError("albumId")
        return values[0]

    def extract(self) -> Album:
        html = self.fetch(HTML_ENDPOINT, {"albumId": self.album_id})
        payload = self.fetch(JSON_ENDPOINT, {"contsType": "A", "contsIds": self.album_id})

        album = parse(self.album_id, html, payload)
        logger.info(
            "Extracted melon album %s (%s tracks).",
            self.album_id,
            len(album.songs),
        )
        return album


def album_url(album_id: str) -> str:
    return f"{HTML_ENDPOINT}?albumId={album_id}"


def parse(album_id: str, html: str, payload: str) -> Album:
    """Parse the album page and the web player JSON into an Album."""
    builder = AlbumBuilder().set_country(COUNTRY).set_url(album_url(album_id))

    builder = parse_html(html, builder)
    builder = parse_json(payload, builder)

    return builder.build()


def parse_html(html: str, builder: AlbumBuilder) -> AlbumBuilder:
    """Read the album kind label, e.g. `[싱글]`, from the page."""
    soup = BeautifulSoup(html, "lxml")

    node = soup.find(class_="gubun")
    if node is None:
        raise MissingFieldError("kind")

    label = node.get_text(strip=True)
    if label.startswith("[") and label.endswith("]"):
        label = label[1:-1].strip()

    return builder.set_kind(parse_album_kind(label))


def parse_json(payload: str, builder: AlbumBuilder) -> AlbumBuilder:
    """Read release date, artwork, album name and songs from the JSON."""
    try:
        root = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise InvalidDocumentError("malformed JSON") from exc

    if not isinstance(root, dict):
        raise InvalidDocumentError("expected a JSON object")

    songs = root.get("contsList")
    if not songs:
        raise MissingFieldError("songs")
    if not isinstance(songs, list):
        raise InvalidDocumentError("contsList is not a list")

    first = songs[0]
    builder = builder.set_released_on(
        parse_date(get_field(first, "issueDate"), "%Y%m%d"),
    ).set_artwork_url(parse_artwork_url(get_field(first, "albumImgPath")))

    album_name = get_field(first, "albumNameWebList")
    for name in title_names(album_name, LOCALE, "albumNameWebList"):
        builder = builder.add_name(name)

    for raw in songs:
        builder = builder.add_song(parse_song(raw))

    return builder


def parse_song(raw: dict[str, Any]) -> Song:
    song = (
        SongBuilder()
        .set_position(parse_int(get_field(raw, "trackNo"), "position"))
        .set_duration(parse_int(get_field(raw, "playTime"), "duration"))
    )
    for name in title_names(get_field(raw, "songName"), LOCALE, "songName"):
        song = song.add_name(name)
    return song.build()


def parse_album_kind(label: str) -> AlbumKind:
    return lookup_kind(label, KINDS, AMBIGUOUS_KINDS)


def parse_artwork_url(path: str) -> str:
    """Turn a thumbnail path into the full-size artwork URL.

    The path ends in a 4-character extension (`.jpg`) that is replaced by
    `_org.jpg` on the static host.
    """
    if not isinstance(path, str) or len(path) <= 4:
        raise InvalidFieldError("artwork_url")
    return ARTWORK_URL_TEMPLATE.format(path=path[:-4])
