"""End-to-end tests for the album-meta CLI, with the network mocked."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from album_meta.scraper import cli
from album_meta.scraper.storage import write_album

from conftest import read_fixture
from test_session import ScriptedReader, _album

MELON_URL = "https://www.melon.com/album/detail.htm?albumId=10123637"
UFW_URL = "http://www.up-front-works.jp/release/detail/EPCE-7387/"


def _melon_handler(artwork_status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "static.melon.co.kr":
            return httpx.Response(artwork_status, content=b"jpeg")
        if request.url.path == "/album/detail.htm":
            return httpx.Response(200, text=read_fixture("melon-10123637.html"))
        return httpx.Response(200, text=read_fixture("melon-10123637.json"))

    return handler


@pytest.fixture
def use_handler(monkeypatch: pytest.MonkeyPatch, make_client):
    def install(handler) -> None:
        monkeypatch.setattr(cli, "FetchClient", lambda: make_client(handler))

    return install


def test_extract_without_edit(tmp_path: Path, use_handler) -> None:
    use_handler(_melon_handler())

    cli.main(["-o", str(tmp_path), "extract", "chuu", MELON_URL, "--no-edit"])

    album = json.loads((tmp_path / "albums" / "chuu" / "chuu.json").read_text(encoding="utf-8"))
    assert album["kind"] == "single"
    assert album["released_on"] == "2017-12-28"
    assert len(album["songs"]) == 2
    assert len(list((tmp_path / "songs" / "chuu").glob("*.json"))) == 2

    artwork = tmp_path / "-attachments" / "albums" / "chuu" / "chuu" / "default.jpg"
    assert artwork.read_bytes() == b"jpeg"


def test_extract_without_artwork(tmp_path: Path, use_handler) -> None:
    use_handler(_melon_handler())

    cli.main(["-o", str(tmp_path), "extract", "chuu", MELON_URL, "--no-edit", "--no-artwork"])

    assert (tmp_path / "albums" / "chuu" / "chuu.json").exists()
    assert not (tmp_path / "-attachments").exists()


def test_extract_artwork_failure_is_not_fatal(
    tmp_path: Path,
    use_handler,
    caplog: pytest.LogCaptureFixture,
) -> None:
    use_handler(_melon_handler(artwork_status=404))

    cli.main(["-o", str(tmp_path), "extract", "chuu", MELON_URL, "--no-edit"])

    assert (tmp_path / "albums" / "chuu" / "chuu.json").exists()
    assert "Failed to download artwork" in caplog.text


def test_extract_with_edit(tmp_path: Path, use_handler, monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=read_fixture("up-front-works-epce-7387.html"))

    use_handler(handler)
    # Add an English default name to the album, accept every song as is.
    lines = ["a", "20-sai no Morning Musume", "ja-Latn", "", "t", ""] + [""] * 8 + ["y"]
    monkeypatch.setattr(cli, "ConsoleReader", lambda: ScriptedReader(lines))

    cli.main(["-o", str(tmp_path), "extract", "morning-musume", UFW_URL])

    path = tmp_path / "albums" / "morning-musume" / "20-sai-no-morning-musume.json"
    album = json.loads(path.read_text(encoding="utf-8"))
    assert album["kind"] == "ep"
    assert [n["is_default"] for n in album["names"]] == [False, True]
    assert len(list((tmp_path / "songs" / "morning-musume").glob("*.json"))) == 8


def test_extract_unknown_url_exits_with_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["-o", str(tmp_path), "extract", "chuu", "https://example.com/album/1"])

    assert exc_info.value.code == 1
    assert not (tmp_path / "albums").exists()


def test_cancelled_edit_exits_interrupted(
    tmp_path: Path,
    use_handler,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    use_handler(_melon_handler())
    monkeypatch.setattr(cli, "ConsoleReader", lambda: ScriptedReader([]))

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["-o", str(tmp_path), "extract", "chuu", MELON_URL])

    assert exc_info.value.code == cli.EXIT_INTERRUPTED
    assert not (tmp_path / "albums").exists()


def test_edit_rewrites_album(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = write_album(tmp_path, "wjsn", _album())[0]
    lines = ["a", "Bimil", "en", "", "t", "", "", ""]
    monkeypatch.setattr(cli, "ConsoleReader", lambda: ScriptedReader(lines))

    cli.main(["-o", str(tmp_path), "edit", "wjsn", str(path)])

    edited = json.loads((tmp_path / "albums" / "wjsn" / "bimil.json").read_text(encoding="utf-8"))
    assert [n["text"] for n in edited["names"]] == ["비밀이야", "Bimil"]
    # The old file is left in place.
    assert path.exists()


@pytest.mark.parametrize("content", ['{"id": "x"}', "{oops"])
def test_edit_malformed_file_exits_with_error(
    tmp_path: Path,
    content: str,
    caplog: pytest.LogCaptureFixture,
) -> None:
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["-o", str(tmp_path), "edit", "wjsn", str(path)])

    assert exc_info.value.code == 1
    assert "AlbumFileError" in caplog.text


def test_edit_missing_file_exits_with_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["-o", str(tmp_path), "edit", "wjsn", str(tmp_path / "missing.json")])

    assert exc_info.value.code == 1
