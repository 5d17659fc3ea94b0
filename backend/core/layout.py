"""
Layout engine: which item sits in which drawer slot.

Slot exclusivity is enforced by eviction: placing an item into an occupied
slot unplaces the previous occupant. Drawer changes go through
``replace_drawers``, which clears every placement that no longer fits.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from core.errors import DrawerNotFoundError, ItemNotFoundError, ValidationError
from core.models import Drawer, InventoryState, Item, SlotPosition

logger = logging.getLogger(__name__)

NEW_DRAWER_ROWS = 3
NEW_DRAWER_COLS = 6


@dataclass(frozen=True)
class ReconciliationAdjustment:
    """Outcome of a drawer change: ids of items whose placement was cleared."""

    cleared: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.cleared)


def find_drawer(drawers: Iterable[Drawer], drawer_id: str) -> Optional[Drawer]:
    for d in drawers:
        if d.id == drawer_id:
            return d
    return None


def fits(drawers: Iterable[Drawer], pos: SlotPosition) -> bool:
    """True when ``pos`` names an existing drawer and an in-bounds slot."""
    d = find_drawer(drawers, pos.drawer_id)
    return d is not None and d.contains(pos)


def default_drawer(state: InventoryState) -> Optional[Drawer]:
    # first drawer is the fallback for callers without an active drawer
    return state.drawers[0] if state.drawers else None


def item_at(state: InventoryState, drawer_id: str, r: int, c: int) -> Optional[Item]:
    for item in state.items:
        if item.pos and item.pos.drawer_id == drawer_id and item.pos.r == r and item.pos.c == c:
            return item
    return None


def drawer_grid(state: InventoryState, drawer_id: str) -> List[List[Optional[str]]]:
    """Row-major matrix of the item ids occupying a drawer (None = empty slot)."""
    drawer = find_drawer(state.drawers, drawer_id)
    if drawer is None:
        raise DrawerNotFoundError(drawer_id)
    grid: List[List[Optional[str]]] = [[None] * drawer.cols for _ in range(drawer.rows)]
    for item in state.items:
        if item.pos and drawer.contains(item.pos):
            grid[item.pos.r][item.pos.c] = item.id
    return grid


def place_item(state: InventoryState, item_id: str, pos: Optional[SlotPosition]) -> InventoryState:
    """Place ``item_id`` at ``pos``, or unplace it when ``pos`` is None.

    Any other item already in the target slot is unplaced. Placing an item
    into the slot it already holds returns ``state`` unchanged.
    """
    target = next((i for i in state.items if i.id == item_id), None)
    if target is None:
        raise ItemNotFoundError(item_id)

    if pos is None:
        if target.pos is None:
            return state
        items = [i.model_copy(update={"pos": None}) if i.id == item_id else i for i in state.items]
        return state.model_copy(update={"items": items})

    if not fits(state.drawers, pos):
        raise ValidationError(f"Slot ({pos.r}, {pos.c}) does not exist in drawer {pos.drawer_id}")
    if target.pos == pos:
        return state

    items = []
    for item in state.items:
        if item.id == item_id:
            item = item.model_copy(update={"pos": pos})
        elif item.pos == pos:
            logger.debug("[layout] %s evicted from %s (%d, %d) by %s", item.id, pos.drawer_id, pos.r, pos.c, item_id)
            item = item.model_copy(update={"pos": None})
        items.append(item)
    return state.model_copy(update={"items": items})


def request_placement(state: InventoryState, item_id: str, drawer_id: str, r: int, c: int) -> InventoryState:
    """Drop command: the dragged item's id plus the target slot coordinates."""
    if find_drawer(state.drawers, drawer_id) is None:
        raise DrawerNotFoundError(drawer_id)
    if r < 0 or c < 0:
        raise ValidationError(f"Slot ({r}, {c}) does not exist in drawer {drawer_id}")
    return place_item(state, item_id, SlotPosition(drawer_id=drawer_id, r=r, c=c))


def reconcile_items(items: Sequence[Item], drawers: Sequence[Drawer]) -> Tuple[List[Item], List[str]]:
    """Clear placements that reference a missing drawer or an out-of-bounds slot,
    and placements that collide with an earlier item in the same slot."""
    out: List[Item] = []
    cleared: List[str] = []
    taken = set()
    for item in items:
        if item.pos is not None:
            key = (item.pos.drawer_id, item.pos.r, item.pos.c)
            if not fits(drawers, item.pos) or key in taken:
                cleared.append(item.id)
                item = item.model_copy(update={"pos": None})
            else:
                taken.add(key)
        out.append(item)
    return out, cleared


def replace_drawers(state: InventoryState, drawers: Sequence[Drawer]) -> Tuple[InventoryState, ReconciliationAdjustment]:
    """Swap in a new drawer list and unplace items that no longer fit.

    The order of ``drawers`` becomes the display order.
    """
    drawers = list(drawers)
    items, cleared = reconcile_items(state.items, drawers)
    if cleared:
        logger.info("[layout] drawer change cleared %d placement(s): %s", len(cleared), ", ".join(cleared))
    new_state = state.model_copy(update={"drawers": drawers, "items": items})
    return new_state, ReconciliationAdjustment(cleared=tuple(cleared))


def new_drawer(drawers: Sequence[Drawer], new_id: Callable[[], str]) -> Drawer:
    """A fresh drawer with the default grid, named after its position."""
    return Drawer(id=new_id(), name=f"Drawer {len(drawers) + 1}", rows=NEW_DRAWER_ROWS, cols=NEW_DRAWER_COLS)
