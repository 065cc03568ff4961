"""Materialized path helpers for the location hierarchy.

A path is the dot-joined list of sanitized segments from the root location
down to the location itself, e.g. ``garaz.regal_a.polka_metalowa``.
"""
import re
import unicodedata
from typing import Optional

from box_organizer.errors import EmptySegmentError

MAX_LOCATION_DEPTH = 5
PATH_SEPARATOR = "."

# Letters that have no Unicode decomposition to a base letter
_TRANSLITERATION = {
    "ą": "a", "ć": "c", "ę": "e", "ł": "l", "ń": "n",
    "ó": "o", "ś": "s", "ź": "z", "ż": "z",
    "Ą": "A", "Ć": "C", "Ę": "E", "Ł": "L", "Ń": "N",
    "Ó": "O", "Ś": "S", "Ź": "Z", "Ż": "Z",
    "ø": "o", "Ø": "O", "đ": "d", "Đ": "D", "ħ": "h", "Ħ": "H",
    "ß": "ss", "æ": "ae", "Æ": "AE", "œ": "oe", "Œ": "OE",
    "þ": "th", "Þ": "TH", "ð": "d", "Ð": "D", "ı": "i",
}
_TRANSLITERATION_TABLE = str.maketrans(_TRANSLITERATION)

_NON_SEGMENT_CHARS = re.compile(r"[^a-z0-9]+")


def transliterate(text: str) -> str:
    """Fold Latin-extended letters to their closest ASCII equivalent.

    >>> transliterate("Garaż")
    'Garaz'
    """
    text = text.translate(_TRANSLITERATION_TABLE)
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def sanitize_segment(name: str) -> str:
    """Turn a location name into a path segment.

    >>> sanitize_segment("Półka #1")
    'polka_1'
    """
    segment = transliterate(name).lower()
    segment = _NON_SEGMENT_CHARS.sub("_", segment)
    return segment.strip("_")


def require_segment(name: str) -> str:
    """Sanitize a name, rejecting names made only of punctuation."""
    segment = sanitize_segment(name)
    if not segment:
        raise EmptySegmentError()
    return segment


def build_path(parent: Optional[str], segment: str) -> str:
    if not parent:
        return segment
    return f"{parent}{PATH_SEPARATOR}{segment}"


def parent_path(path: str) -> str:
    """Path of the parent, or an empty string for a root."""
    if PATH_SEPARATOR not in path:
        return ""
    return path.rsplit(PATH_SEPARATOR, 1)[0]


def path_depth(path: str) -> int:
    return len(path.split(PATH_SEPARATOR))


def replace_last_segment(path: str, segment: str) -> str:
    return build_path(parent_path(path), segment)


def is_descendant_path(path: str, ancestor: str) -> bool:
    return path.startswith(ancestor + PATH_SEPARATOR)
