# src/album_meta/extractors/up_front_works.py

"""Extractor for www.up-front-works.jp release pages (HTML only)."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, Tag

from album_meta.domain.models import Album, AlbumBuilder, AlbumKind, Song, SongBuilder
from album_meta.extractors.base import (
    Extractor,
    lookup_kind,
    parse_date,
    parse_duration,
    parse_int,
    title_names,
)
from album_meta.scraper.errors import InvalidUrlError, MissingFieldError

logger = logging.getLogger(__name__)

HOST = "www.up-front-works.jp"
BASE_URL = "http://www.up-front-works.jp/release/detail"

COUNTRY = "JP"
LOCALE = "ja"

KINDS: dict[str, AlbumKind] = {
    "CDシングル": AlbumKind.SINGLE,
    "CDミニアルバム": AlbumKind.EP,
    "CDアルバム": AlbumKind.LP,
}


class UpFrontWorksExtractor(Extractor):
    host = HOST

    @staticmethod
    def parse_album_id(url: str) -> str:
        """Return the catalog number, e.g. `EPCE-7387`.

        Catalog numbers always contain a hyphen; other pages on the host
        (artist lists, news) do not end in one.
        """
        pieces = [p for p in urlsplit(url).path.split("/") if p]
        if not pieces or "-" not in pieces[-1]:
            raise InvalidUrlError("album id")
        return pieces[-1]

    def extract(self) -> Album:
        html = self.fetch(album_url(self.album_id))

        album = parse(self.album_id, html)
        logger.info(
            "Extracted up-front-works release %s (%s tracks).",
            self.album_id,
            len(album.songs),
        )
        return album


def album_url(album_id: str) -> str:
    return f"{BASE_URL}/{album_id}/"


def parse(album_id: str, html: str) -> Album:
    builder = AlbumBuilder().set_country(COUNTRY).set_url(album_url(album_id))
    builder = parse_html(html, builder)
    return builder.build()


def parse_html(html: str, builder: AlbumBuilder) -> AlbumBuilder:
    soup = BeautifulSoup(html, "lxml")

    title = soup.find(class_="product_title")
    if title is None:
        raise MissingFieldError("name")

    # The product data box lists kind, release date, catalog number, ...
    meta_cells = soup.select(".data1 .columnB")
    if len(meta_cells) < 1:
        raise MissingFieldError("kind")
    kind = parse_kind(meta_cells[0].get_text(strip=True))

    if len(meta_cells) < 2:
        raise MissingFieldError("release date")
    released_on = parse_date(meta_cells[1].get_text(strip=True), "%Y/%m/%d")

    builder = builder.set_kind(kind).set_released_on(released_on)
    for name in title_names(title.get_text(strip=True), LOCALE):
        builder = builder.add_name(name)

    return parse_songs(soup, builder)


def parse_songs(soup: BeautifulSoup, builder: AlbumBuilder) -> AlbumBuilder:
    table = soup.find(class_="data2")
    if table is None:
        raise MissingFieldError("songs")

    # First row is the table header.
    rows = table.find_all("tr")[1:]

    for i, row in enumerate(rows):
        # Odd rows hold the track's artist credit.
        if i % 2 != 0:
            continue
        builder = builder.add_song(parse_song_row(row))

    return builder


def parse_song_row(row: Tag) -> Song:
    cells = row.find_all("td")

    if len(cells) < 1:
        raise MissingFieldError("songs[_].track_number")
    position = parse_int(cells[0].get_text(strip=True), "position")

    if len(cells) < 2:
        raise MissingFieldError("songs[_].name")
    raw_name = cells[1].get_text(strip=True)

    if len(cells) < 3:
        raise MissingFieldError("songs[_].duration")
    duration = parse_duration(cells[2].get_text(strip=True))

    song = SongBuilder().set_position(position).set_duration(duration)
    for name in title_names(raw_name, LOCALE):
        song = song.add_name(name)
    return song.build()


def parse_kind(label: str) -> AlbumKind:
    return lookup_kind(label, KINDS)
