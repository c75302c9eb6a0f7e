"""Shared test helpers: fixture documents and an offline FetchClient."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from album_meta.config import Settings
from album_meta.scraper.client import FetchClient

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def make_client() -> Iterator[Callable[[Callable[[httpx.Request], httpx.Response]], FetchClient]]:
    """Build FetchClients backed by an httpx.MockTransport handler."""
    clients: list[FetchClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> FetchClient:
        client = FetchClient(
            settings=Settings(user_agent="album-meta-tests/1.0", timeout=1.0),
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
