# src/album_meta/text/inflector.py

"""String transforms for titles and identifiers."""

from __future__ import annotations

import re

from korean_romanizer.romanizer import Romanizer
from slugify import slugify as _slugify

MINOR_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "as", "at", "but", "by", "for", "from",
        "in", "into", "of", "on", "sans", "than", "the", "to",
        "via", "with",
    },
)

ACRONYMS: frozenset[str] = frozenset({"dj", "ost"})

TITLE_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("`", "'"),
    ("‘", "'"),
    ("’", "'"),
    ("&#34;", '"'),
    ("&#39;", "'"),
    (" Of ", " of "),
)

_DISALLOWED_SLUG_CHARS = r"[^-a-z0-9_]+"

# python-slugify drops commas between digits; a comma is a separator here.
_SLUG_REPLACEMENTS = [[",", "-"]]

_FIRST_WORD_RE = re.compile(r"^\w+")
_WORD_RE = re.compile(r"\b([\w']+)")


def slugify(text: str) -> str:
    """Turn a display name into an ASCII, lower-case, hyphenated slug.

    Works like ActiveSupport's `parameterize`:

        >>> slugify("Kkumkkuneun Maeumeuro (Chinese Ver.)")
        'kkumkkuneun-maeumeuro-chinese-ver'
        >>> slugify("über")
        'uber'
        >>> slugify("Tom &amp; Jerry")
        'tom-amp-jerry'
    """
    return _slugify(
        text,
        entities=False,
        decimal=False,
        hexadecimal=False,
        regex_pattern=_DISALLOWED_SLUG_CHARS,
        lowercase=True,
        replacements=_SLUG_REPLACEMENTS,
    )


def capitalize(word: str) -> str:
    """Upper-case the first character only, leaving the rest untouched."""
    return word[:1].upper() + word[1:]


def is_minor_word(word: str) -> bool:
    return word in MINOR_WORDS


def is_acronym(word: str) -> bool:
    return word in ACRONYMS


def titlecase(text: str) -> str:
    """Title-case `text`, keeping minor words lower and acronyms upper.

    The first word is always capitalized, even if it is a minor word.
    """
    text = text.lower()
    text = _FIRST_WORD_RE.sub(lambda m: capitalize(m.group(0)), text, count=1)
    return _WORD_RE.sub(_inflect_word, text)


def _inflect_word(match: re.Match[str]) -> str:
    word = match.group(1)
    if is_minor_word(word):
        return word
    if is_acronym(word):
        return word.upper()
    return capitalize(word)


def romanize_hangul(text: str) -> str:
    """Best-effort Revised Romanization of the Hangul in `text`."""
    return Romanizer(text).romanize()


def normalize_title(title: str) -> str:
    """Clean up quote variants, numeric entities and the "Of" casing quirk."""
    for old, new in TITLE_REPLACEMENTS:
        title = title.replace(old, new)
    return title


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `M:SS`."""
    minutes, rest = divmod(seconds, 60)
    return f"{minutes}:{rest:02d}"
