"""Search index for boxes.

The index is a plain text document of weighted tokens computed from the
box name, description and tags, e.g. ``" a:drill a:set b:cordless c:garage "``.
Weight letters follow the usual full-text convention: ``a`` for the name,
``b`` for the description, ``c`` for tags. The document is stored on the box
row and rebuilt on every write that touches one of the three fields.
"""
import re
from typing import Iterable, List, Optional

from sqlalchemy import and_, case, literal

from box_organizer.services.paths import transliterate

TOKEN_PATTERN = re.compile(r"[a-z0-9]+")

NAME_WEIGHT = "a"
DESCRIPTION_WEIGHT = "b"
TAGS_WEIGHT = "c"

RANKS = {NAME_WEIGHT: 3, DESCRIPTION_WEIGHT: 2, TAGS_WEIGHT: 1}


def normalize_text(text: Optional[str]) -> List[str]:
    """Lowercase ASCII tokens of a text."""
    if not text:
        return []
    return TOKEN_PATTERN.findall(transliterate(text).lower())


def build_search_index(name: str, description: Optional[str], tags: Optional[Iterable[str]]) -> str:
    """Build the weighted token document for a box."""
    parts = []
    for weight, text in (
        (NAME_WEIGHT, name),
        (DESCRIPTION_WEIGHT, description),
        (TAGS_WEIGHT, " ".join(tags or [])),
    ):
        parts.extend(f"{weight}:{token}" for token in normalize_text(text))
    # Padding lets every token be matched whole as " x:token "
    return " " + " ".join(parts) + " " if parts else " "


def query_tokens(q: str) -> List[str]:
    """Unique normalized tokens of a search query, in order."""
    seen = []
    for token in normalize_text(q):
        if token not in seen:
            seen.append(token)
    return seen


def match_clause(column, tokens: List[str]):
    """Every query token must equal some indexed token."""
    return and_(*[column.contains(f":{token} ") for token in tokens])


def rank_expression(column, tokens: List[str]):
    """Relevance: per token, the weight of the best field it matches."""
    rank = literal(0)
    for token in tokens:
        rank = rank + case(
            (column.contains(f" {NAME_WEIGHT}:{token} "), RANKS[NAME_WEIGHT]),
            (column.contains(f" {DESCRIPTION_WEIGHT}:{token} "), RANKS[DESCRIPTION_WEIGHT]),
            else_=RANKS[TAGS_WEIGHT],
        )
    return rank
