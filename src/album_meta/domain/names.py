# src/album_meta/domain/names.py

"""Flag rules for name lists.

Within one album's names, or one song's names, at most one entry may be
flagged original and at most one default. `set_flags` is the only routine
that toggles those flags; extractors and the edit session both go through it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from album_meta.domain.models import Name
from album_meta.text.inflector import romanize_hangul, titlecase

logger = logging.getLogger(__name__)

KOREAN_LOCALE = "ko"
ROMANIZED_SUFFIX = "-Latn"


def set_flags(
    names: list[Name],
    index: int,
    *,
    is_original: bool | None = None,
    is_default: bool | None = None,
) -> None:
    """Set the flags of `names[index]` and clear them on every other entry.

    A flag passed as None keeps its current value. The two flags are cleared
    independently: an original entry does not steal the default flag.
    """
    target = names[index]
    if is_original is not None:
        target = replace(target, is_original=is_original)
    if is_default is not None:
        target = replace(target, is_default=is_default)
    names[index] = target

    for i, name in enumerate(names):
        if i == index:
            continue
        if target.is_original and name.is_original:
            name = replace(name, is_original=False)
        if target.is_default and name.is_default:
            name = replace(name, is_default=False)
        names[i] = name


def canonical_names(text: str, locale: str) -> list[Name]:
    """Return the singleton name list for a freshly extracted title."""
    names = [Name(text=text, locale=locale)]
    set_flags(names, 0, is_original=True, is_default=True)
    return names


def guess_name(names: list[Name], locale: str = KOREAN_LOCALE) -> bool:
    """Append a romanized default name derived from the original name.

    Only Hangul romanization is supported. Returns False, leaving `names`
    untouched, when no original name in `locale` exists.
    """
    original = next(
        (n for n in names if n.is_original and n.locale == locale),
        None,
    )
    if original is None:
        logger.debug("No original %r name to romanize; nothing to do.", locale)
        return False

    names.append(
        Name(
            text=titlecase(romanize_hangul(original.text)),
            locale=f"{locale}{ROMANIZED_SUFFIX}",
            is_original=False,
            is_default=True,
        ),
    )
    set_flags(names, len(names) - 1)
    return True


def default_name(names: Sequence[Name]) -> str | None:
    """Return the text of the default entry, if any."""
    for name in names:
        if name.is_default:
            return name.text
    return None
