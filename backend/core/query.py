"""
Item queries: filter by category, favorite flag, tag and free text, then
sort by a case and accent insensitive name key.

Free text is matched as typed against name, notes, location and tags; text
that is only whitespace does not filter.
"""

import unicodedata
from typing import Iterable, List, Optional

from core.models import Item, ToolboxModel


class QueryCriteria(ToolboxModel):
    """Item filters; every supplied criterion must match, blank ones are ignored."""

    category_id: Optional[str] = None
    favorite_only: bool = False
    tag: Optional[str] = None
    text: Optional[str] = None


def search_text(item: Item) -> str:
    return " ".join([item.name, item.notes, item.location, " ".join(item.tags)])


def name_key(name: str) -> str:
    # accent and case insensitive, so "éclair" sorts next to "eclair" and "Eclair"
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def matches(item: Item, criteria: QueryCriteria) -> bool:
    if criteria.category_id and item.category_id != criteria.category_id:
        return False
    if criteria.favorite_only and not item.favorite:
        return False
    if criteria.tag and criteria.tag not in item.tags:
        return False
    text = criteria.text or ""
    if text.strip() and text.lower() not in search_text(item).lower():
        return False
    return True


def query(items: Iterable[Item], criteria: Optional[QueryCriteria] = None) -> List[Item]:
    """Filter ``items`` by ``criteria`` and sort by name (stable on ties)."""
    criteria = criteria or QueryCriteria()
    return sorted((i for i in items if matches(i, criteria)), key=lambda i: name_key(i.name))
