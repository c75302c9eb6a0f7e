# src/album_meta/scraper/client.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from album_meta.config import Settings, get_settings
from album_meta.scraper.errors import FetchBodyError, FetchRequestError

logger = logging.getLogger(__name__)


class FetchClient:
    """Synchronous HTTP client used by the extractors.

    Requests are never retried: a failed fetch ends the extraction.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()

        headers = {
            # mora.jp rejects requests without a user agent.
            "User-Agent": settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
        }

        self._client = httpx.Client(
            headers=headers,
            timeout=settings.timeout,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "FetchClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    def fetch_text(self, url: str, params: dict[str, Any] | None = None) -> str:
        """Fetch `url` and return the decoded body.

        Raises:
            FetchRequestError: the request failed or the status was not 2xx.
            FetchBodyError: the body could not be read or decoded.
        """
        try:
            with self._client.stream("GET", url, params=params) as response:
                response.raise_for_status()
                try:
                    response.read()
                    text = response.text
                except (httpx.TransportError, httpx.DecodingError, httpx.StreamError) as exc:
                    msg = f"could not read body of {response.url}: {exc}"
                    raise FetchBodyError(msg) from exc

                logger.debug(
                    "Fetched %s (status=%s, %s bytes).",
                    response.url,
                    response.status_code,
                    len(response.content),
                )
                return text
        except httpx.HTTPStatusError as exc:
            msg = f"request to {url} failed with status {exc.response.status_code}"
            raise FetchRequestError(msg) from exc
        except httpx.RequestError as exc:
            msg = f"request to {url} failed: {exc}"
            raise FetchRequestError(msg) from exc

    def download(self, url: str, path: Path) -> int:
        """Stream `url` into `path` and return the number of bytes written."""
        path.parent.mkdir(parents=True, exist_ok=True)
        written = 0

        try:
            with self._client.stream("GET", url) as response:
                response.raise_for_status()
                try:
                    with path.open("wb") as f:
                        for chunk in response.iter_bytes():
                            f.write(chunk)
                            written += len(chunk)
                except (httpx.TransportError, httpx.DecodingError, httpx.StreamError) as exc:
                    path.unlink(missing_ok=True)
                    msg = f"could not read body of {response.url}: {exc}"
                    raise FetchBodyError(msg) from exc
        except httpx.HTTPStatusError as exc:
            msg = f"request to {url} failed with status {exc.response.status_code}"
            raise FetchRequestError(msg) from exc
        except httpx.RequestError as exc:
            msg = f"request to {url} failed: {exc}"
            raise FetchRequestError(msg) from exc

        logger.info("Downloaded %s to %s (%s bytes).", url, path, written)
        return written
