"""Tests for the melon.com extractor."""

from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from album_meta.domain.models import AlbumBuilder, AlbumKind, Name
from album_meta.extractors import melon
from album_meta.extractors.melon import MelonExtractor
from album_meta.scraper.errors import (
    FetchRequestError,
    InvalidDocumentError,
    InvalidFieldError,
    InvalidUrlError,
    MissingFieldError,
)

from conftest import read_fixture

ALBUM_ID = "10123637"
URL = f"https://www.melon.com/album/detail.htm?albumId={ALBUM_ID}"


def test_matches() -> None:
    assert MelonExtractor.matches(URL)
    assert not MelonExtractor.matches("https://mora.jp/package/43000001/4547366347050/")
    assert not MelonExtractor.matches("https://m.melon.com/album/detail.htm?albumId=1")


def test_parse_album_id() -> None:
    assert MelonExtractor.parse_album_id(URL) == ALBUM_ID
    assert MelonExtractor.parse_album_id(f"{URL}&foo=bar") == ALBUM_ID


@pytest.mark.parametrize(
    "url",
    [
        "https://www.melon.com/album/detail.htm",
        "https://www.melon.com/album/detail.htm?albumId=",
        "https://www.melon.com/album/detail.htm?id=10123637",
    ],
)
def test_parse_album_id_missing(url: str) -> None:
    with pytest.raises(InvalidUrlError) as exc_info:
        MelonExtractor.parse_album_id(url)
    assert str(exc_info.value) == "invalid url: missing albumId"


def test_parse() -> None:
    album = melon.parse(
        ALBUM_ID,
        read_fixture("melon-10123637.html"),
        read_fixture("melon-10123637.json"),
    )

    assert album.id == "chuu"
    assert album.kind is AlbumKind.SINGLE
    assert album.country == "KR"
    assert album.released_on == date(2017, 12, 28)
    assert album.url == URL
    assert album.artwork_url == (
        "https://static.melon.co.kr/cm/album/images/101/23/637/10123637_org.jpg"
    )
    assert album.names == (Name("Chuu", "ko", is_original=True, is_default=True),)

    assert len(album.songs) == 2

    first, second = album.songs
    assert first.position == 1
    assert first.duration == 195
    assert first.names == (Name("Heart Attack (츄)", "ko", True, True),)
    assert first.id == "heart-attack-cyu"

    assert second.position == 2
    assert second.duration == 197
    assert second.names == (Name("Girl's Talk (이브, 츄)", "ko", True, True),)
    assert second.id == "girl-s-talk-ibeu-cyu"


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("싱글", AlbumKind.SINGLE),
        ("EP", AlbumKind.EP),
        ("정규", AlbumKind.LP),
        ("OST", AlbumKind.SINGLE),
        ("리믹스", AlbumKind.SINGLE),
        ("옴니버스", AlbumKind.LP),
    ],
)
def test_parse_album_kind(label: str, expected: AlbumKind) -> None:
    assert melon.parse_album_kind(label) is expected


def test_parse_album_kind_unknown() -> None:
    with pytest.raises(InvalidFieldError):
        melon.parse_album_kind("베스트")


def test_parse_html_without_kind() -> None:
    with pytest.raises(MissingFieldError) as exc_info:
        melon.parse_html("<html><body></body></html>", AlbumBuilder())
    assert exc_info.value.field == "kind"


def test_parse_artwork_url() -> None:
    assert melon.parse_artwork_url("/cm/album/images/101/23/637/10123637.jpg") == (
        "https://static.melon.co.kr/cm/album/images/101/23/637/10123637_org.jpg"
    )


@pytest.mark.parametrize("payload", ["not json", "[]"])
def test_parse_json_invalid_document(payload: str) -> None:
    with pytest.raises(InvalidDocumentError):
        melon.parse_json(payload, AlbumBuilder())


@pytest.mark.parametrize("payload", ['{"contsList": []}', "{}"])
def test_parse_json_without_songs(payload: str) -> None:
    with pytest.raises(MissingFieldError) as exc_info:
        melon.parse_json(payload, AlbumBuilder())
    assert exc_info.value.field == "songs"


def test_parse_json_missing_song_field() -> None:
    payload = (
        '{"contsList": [{"issueDate": "20171228", "albumImgPath": "/a.jpg",'
        ' "albumNameWebList": "Chuu", "trackNo": "1", "songName": "x"}]}'
    )
    with pytest.raises(MissingFieldError) as exc_info:
        melon.parse_json(payload, AlbumBuilder())
    assert exc_info.value.field == "playTime"


def test_extract(make_client) -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        if request.url.path == "/album/detail.htm":
            return httpx.Response(200, text=read_fixture("melon-10123637.html"))
        if request.url.path == "/webplayer/getContsInfo.json":
            return httpx.Response(200, text=read_fixture("melon-10123637.json"))
        return httpx.Response(404)

    extractor = MelonExtractor.from_url(URL, client=make_client(handler))
    album = extractor.extract()

    assert album.id == "chuu"
    assert len(album.songs) == 2

    assert seen[0].params["albumId"] == ALBUM_ID
    assert seen[1].params["contsType"] == "A"
    assert seen[1].params["contsIds"] == ALBUM_ID


def test_extract_fails_on_error_status(make_client) -> None:
    client = make_client(lambda request: httpx.Response(503))
    extractor = MelonExtractor(ALBUM_ID, client=client)

    with pytest.raises(FetchRequestError):
        extractor.extract()


def _payload(**overrides: object) -> str:
    entry = {
        "albumImgPath": "/cm/album/images/101/23/637/10123637.jpg",
        "albumNameWebList": "Chuu",
        "issueDate": "20171228",
        "playTime": 195,
        "songName": "Heart Attack (츄)",
        "trackNo": "1",
    }
    entry.update(overrides)
    return json.dumps({"contsList": [entry]})


@pytest.mark.parametrize("path", [None, 42, ".jpg", ""])
def test_parse_artwork_url_invalid(path: object) -> None:
    with pytest.raises(InvalidFieldError) as exc_info:
        melon.parse_artwork_url(path)
    assert exc_info.value.field == "artwork_url"


def test_parse_json_null_artwork_path() -> None:
    with pytest.raises(InvalidFieldError) as exc_info:
        melon.parse_json(_payload(albumImgPath=None), AlbumBuilder())
    assert exc_info.value.field == "artwork_url"


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"albumNameWebList": None}, "albumNameWebList"),
        ({"songName": 7}, "songName"),
        ({"issueDate": None}, "release date"),
    ],
)
def test_parse_json_non_string_fields(overrides: dict[str, object], field: str) -> None:
    with pytest.raises(InvalidFieldError) as exc_info:
        melon.parse_json(_payload(**overrides), AlbumBuilder())
    assert exc_info.value.field == field


def test_parse_json_songs_not_a_list() -> None:
    with pytest.raises(InvalidDocumentError):
        melon.parse_json('{"contsList": {"0": {}}}', AlbumBuilder())
