# src/album_meta/scraper/errors.py

"""Errors raised while dispatching and extracting albums.

Each is terminal for the current extraction attempt.
"""

from __future__ import annotations

from pathlib import Path


class ExtractionError(Exception):
    """Base class for every dispatch/fetch/parse failure."""


class FactoryError(ExtractionError):
    def __init__(self, url: str) -> None:
        super().__init__(f"could not construct an extractor from the url: {url}")
        self.url = url


class FetchRequestError(ExtractionError):
    """The request could not be sent or returned a non-success status."""


class FetchBodyError(ExtractionError):
    """The response body could not be read."""


class InvalidDocumentError(ExtractionError):
    def __init__(self, reason: str = "could not parse document") -> None:
        super().__init__(reason)


class _FieldError(ExtractionError):
    prefix = ""

    def __init__(self, field: str) -> None:
        super().__init__(f"{self.prefix}: {field}")
        self.field = field


class InvalidUrlError(_FieldError):
    prefix = "invalid url: missing"


class MissingFieldError(_FieldError):
    prefix = "missing field"


class InvalidFieldError(_FieldError):
    prefix = "invalid field"


class AlbumFileError(Exception):
    """An album JSON file could not be read back into an Album."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"could not load album file {path}: {reason}")
        self.path = path
