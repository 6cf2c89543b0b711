import re
import unicodedata
from collections.abc import Callable, Mapping, Sequence
from typing import Any

_TAG_RE = re.compile(r"<[^>]+>")


def clean_name(text: str) -> str:
    """Remove HTML tags and bracketed/parenthesized codes like [C81] or (CDG)."""
    text = _TAG_RE.sub("", text)
    text = re.sub(r"\[.*?\]", "", text)
    text = re.sub(r"\(.*?\)", "", text)
    return text.strip()


def normalize_text(text: str) -> str:
    """Lowercase, strip accents, and drop everything after the first comma."""
    nfkd = unicodedata.normalize("NFKD", clean_name(text).split(",")[0].lower())
    return " ".join("".join(c for c in nfkd if not unicodedata.combining(c)).split())


def best_match(
    query: str,
    candidates: Sequence[Any],
    name: Callable[[Mapping[str, Any]], Any],
) -> Mapping[str, Any] | None:
    """Pick the candidate whose name equals the query, else one containing it, else the first.

    Non-mapping candidates are ignored.
    """
    items = [c for c in candidates if isinstance(c, Mapping)]
    if not items:
        return None

    wanted = normalize_text(query)
    names = []
    for item in items:
        value = name(item)
        names.append(normalize_text(value) if isinstance(value, str) else "")

    for item, item_name in zip(items, names):
        if item_name == wanted:
            return item
    for item, item_name in zip(items, names):
        if item_name and (wanted in item_name or item_name in wanted):
            return item
    return items[0]
