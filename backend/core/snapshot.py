"""
Snapshot document <-> InventoryState.

Document shape (camelCase, the only file/storage format):

    {
      "categories": [{"id", "name", "order"}],
      "items": [{"id", "name", "categoryId", "quantity", "location",
                 "tags", "notes", "favorite", "pos": {"drawerId", "r", "c"} | null}],
      "drawers": [{"id", "name", "rows", "cols"}],
      "updatedAt": "<ISO-8601>"
    }
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from core.errors import ParseError
from core.layout import reconcile_items
from core.models import Category, Drawer, InventoryState, Item, utcnow
from core.store import IdGenerator, random_id

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("categories", "items")


def default_drawers() -> List[Drawer]:
    return [
        Drawer(id="d1", name="Top Tray", rows=3, cols=6),
        Drawer(id="d2", name="Drawer 1", rows=3, cols=6),
        Drawer(id="d3", name="Drawer 2", rows=4, cols=8),
        Drawer(id="d4", name="Drawer 3", rows=2, cols=5),
    ]


def default_state(new_id: IdGenerator = random_id) -> InventoryState:
    """Built-in sample toolbox used when storage holds no snapshot."""
    return InventoryState(
        categories=[
            Category(id="c1", name="Drivers", order=1),
            Category(id="c2", name="Sockets", order=2),
            Category(id="c3", name="Soldering", order=3),
            Category(id="c4", name="Measuring", order=4),
        ],
        items=[
            Item(id=new_id(), name="Phillips #2 Screwdriver", category_id="c1", quantity=2, location="Tray 1",
                 tags=["driver", "#2", "phillips"], notes="Primary"),
            Item(id=new_id(), name="Flathead 5mm", category_id="c1", quantity=1, location="Tray 1",
                 tags=["driver", "flat"]),
            Item(id=new_id(), name='1/2" Socket 10mm', category_id="c2", quantity=1, location="Rail A",
                 tags=["socket", "10mm", "1/2"], favorite=True),
            Item(id=new_id(), name="Hakko FX-888D Iron", category_id="c3", quantity=1, location="Bin S1",
                 tags=["solder", "iron"]),
            Item(id=new_id(), name="Fluke 87V DMM", category_id="c4", quantity=1, location="Case",
                 tags=["meter", "dmm"], notes="Calibrated 2025-06"),
        ],
        drawers=default_drawers(),
    )


def dump_snapshot(state: InventoryState, refresh: bool = False) -> Dict[str, Any]:
    """Serialize ``state``; ``refresh`` stamps ``updatedAt`` with the current time."""
    if refresh:
        state = state.model_copy(update={"updated_at": utcnow()})
    return state.model_dump(mode="json", by_alias=True)


def load_snapshot(document: Union[str, bytes, Dict[str, Any]]) -> InventoryState:
    """Parse a snapshot document.

    Raises ParseError when the document is not a JSON object, lacks
    ``categories`` or ``items``, or holds malformed records. Missing or empty
    ``drawers`` fall back to the default layout; placements that do not fit
    the drawers (or collide) are cleared.
    """
    if isinstance(document, (str, bytes, bytearray)):
        try:
            document = json.loads(document)
        except (UnicodeDecodeError, ValueError) as e:
            raise ParseError(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise ParseError("Snapshot must be a JSON object")

    missing = [k for k in REQUIRED_KEYS if document.get(k) is None]
    if missing:
        raise ParseError(f"Snapshot is missing {', '.join(missing)}")

    data = {
        "categories": document["categories"],
        "items": document["items"],
        "drawers": document.get("drawers") or [d.model_dump(by_alias=True) for d in default_drawers()],
    }
    if document.get("updatedAt"):
        data["updatedAt"] = document["updatedAt"]
    try:
        state = InventoryState.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(f"Snapshot has invalid records: {e.error_count()} error(s)") from e

    items, cleared = reconcile_items(state.items, state.drawers)
    if cleared:
        logger.warning("[snapshot] cleared %d invalid placement(s) while loading", len(cleared))
        state = state.model_copy(update={"items": items})
    return state


def hydrate_state(document: Optional[Dict[str, Any]], new_id: IdGenerator = random_id) -> InventoryState:
    """Initial state from stored ``document``; the default toolbox when absent or unreadable."""
    if document is None:
        logger.info("[snapshot] no stored snapshot, starting from the default toolbox")
        return default_state(new_id)
    try:
        state = load_snapshot(document)
    except ParseError as e:
        logger.warning("[snapshot] stored snapshot unreadable (%s), starting from the default toolbox", e)
        return default_state(new_id)
    logger.info(
        "[snapshot] loaded %d categories, %d items, %d drawers",
        len(state.categories), len(state.items), len(state.drawers),
    )
    return state


def export_filename(now: Optional[datetime] = None) -> str:
    return f"toolbox-{(now or utcnow()).date().isoformat()}.json"
