# src/album_meta/extractors/dispatch.py

"""Pick the extractor for a URL."""

from __future__ import annotations

import logging

from album_meta.extractors.base import Extractor
from album_meta.extractors.melon import MelonExtractor
from album_meta.extractors.mora import MoraExtractor
from album_meta.extractors.up_front_works import UpFrontWorksExtractor
from album_meta.scraper.client import FetchClient
from album_meta.scraper.errors import FactoryError

logger = logging.getLogger(__name__)

# Tried in order; the first host match wins.
EXTRACTORS: tuple[type[Extractor], ...] = (
    MelonExtractor,
    MoraExtractor,
    UpFrontWorksExtractor,
)


def dispatch(url: str, *, client: FetchClient | None = None) -> Extractor:
    """Return an extractor for `url`.

    Raises:
        FactoryError: no known source matches the URL's host.
        InvalidUrlError: the source matched but the album id is missing.
    """
    for extractor_cls in EXTRACTORS:
        if extractor_cls.matches(url):
            extractor = extractor_cls.from_url(url, client=client)
            logger.debug("Dispatched %s to %r.", url, extractor)
            return extractor

    raise FactoryError(url)
