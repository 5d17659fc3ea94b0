"""
Inventory store commands.

Each command takes the current ``InventoryState`` and returns a new one; the
input is never mutated, so a command that raises leaves the caller's state
untouched. ``InventoryStore`` is the single owner that threads the state
through successive commands.
"""

import logging
import uuid
from typing import Callable, List, Optional, Sequence, Tuple, Union

from core import layout
from core.errors import CategoryNotFoundError, ItemNotFoundError, ValidationError
from core.layout import ReconciliationAdjustment
from core.models import Category, Drawer, InventoryState, Item, ItemDraft, SlotPosition, utcnow
from core.query import QueryCriteria, query

logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]


def random_id() -> str:
    return uuid.uuid4().hex


def get_item(state: InventoryState, item_id: str) -> Optional[Item]:
    return next((i for i in state.items if i.id == item_id), None)


def get_category(state: InventoryState, category_id: str) -> Optional[Category]:
    return next((c for c in state.categories if c.id == category_id), None)


def ordered_categories(state: InventoryState) -> List[Category]:
    return sorted(state.categories, key=lambda c: c.order)


def all_tags(state: InventoryState) -> List[str]:
    return sorted({t for item in state.items for t in item.tags})


def split_tags(tags: Union[str, Sequence[str], None]) -> List[str]:
    """Comma separated string or list -> trimmed non-empty tags, order kept."""
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [t.strip() for t in tags if t and t.strip()]


def _normalize_quantity(value) -> int:
    if value is None or value == "":
        return 1
    try:
        q = int(float(value))
    except (TypeError, ValueError):
        raise ValidationError("quantity must be a number")
    return max(q, 0)


def _require_name(name: Optional[str], what: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(f"{what} name is required")
    return name


def upsert_item(state: InventoryState, draft: ItemDraft, new_id: IdGenerator = random_id) -> Tuple[InventoryState, Item]:
    """Create or update an item from ``draft``.

    A draft whose id matches an existing item updates it; anything else creates
    a new item with a generated id. Name is always required; a category is
    required on create (editing may leave an item uncategorized). The previous
    placement is kept unless the draft supplies a new ``pos``.
    """
    existing = get_item(state, draft.id) if draft.id else None
    name = _require_name(draft.name, "Item")
    category_id = (draft.category_id or "").strip() or None
    if existing is None and category_id is None:
        raise ValidationError("Name and category are required")
    if category_id is not None and get_category(state, category_id) is None:
        raise ValidationError(f"Category with id {category_id} does not exist")

    item = Item(
        id=existing.id if existing else new_id(),
        name=name,
        category_id=category_id,
        quantity=_normalize_quantity(draft.quantity),
        location=(draft.location or "").strip(),
        tags=split_tags(draft.tags),
        notes=(draft.notes or "").strip(),
        favorite=bool(draft.favorite),
        pos=existing.pos if existing else None,
    )
    if existing:
        items = [item if i.id == item.id else i for i in state.items]
    else:
        items = [*state.items, item]
    new_state = state.model_copy(update={"items": items})

    if draft.pos is not None and draft.pos != item.pos:
        new_state = layout.place_item(new_state, item.id, draft.pos)
        item = get_item(new_state, item.id)
    return new_state, item


def delete_item(state: InventoryState, item_id: str) -> InventoryState:
    return state.model_copy(update={"items": [i for i in state.items if i.id != item_id]})


def set_item_category(state: InventoryState, item_id: str, category_id: Optional[str]) -> InventoryState:
    if get_item(state, item_id) is None:
        raise ItemNotFoundError(item_id)
    category_id = category_id or None
    if category_id is not None and get_category(state, category_id) is None:
        raise CategoryNotFoundError(category_id)
    items = [i.model_copy(update={"category_id": category_id}) if i.id == item_id else i for i in state.items]
    return state.model_copy(update={"items": items})


def add_category(state: InventoryState, name: str, new_id: IdGenerator = random_id) -> Tuple[InventoryState, Category]:
    name = _require_name(name, "Category")
    last_order = state.categories[-1].order if state.categories else 0
    category = Category(id=new_id(), name=name, order=last_order + 1)
    return state.model_copy(update={"categories": [*state.categories, category]}), category


def rename_category(state: InventoryState, category_id: str, name: str) -> InventoryState:
    name = _require_name(name, "Category")
    if get_category(state, category_id) is None:
        raise CategoryNotFoundError(category_id)
    categories = [c.model_copy(update={"name": name}) if c.id == category_id else c for c in state.categories]
    return state.model_copy(update={"categories": categories})


def delete_category(state: InventoryState, category_id: str) -> InventoryState:
    """Remove a category; its items stay, uncategorized and still placed."""
    categories = [c for c in state.categories if c.id != category_id]
    items = [i.model_copy(update={"category_id": None}) if i.category_id == category_id else i for i in state.items]
    return state.model_copy(update={"categories": categories, "items": items})


class InventoryStore:
    """Owner of the current inventory state.

    Commands replace ``state`` with the command's result and stamp
    ``updated_at``; persisting the new state is the caller's job.
    """

    def __init__(self, state: InventoryState, new_id: IdGenerator = random_id):
        self._state = state
        self.new_id = new_id

    @property
    def state(self) -> InventoryState:
        return self._state

    def _commit(self, state: InventoryState) -> InventoryState:
        if state is not self._state:
            self._state = state.model_copy(update={"updated_at": utcnow()})
        return self._state

    def replace_state(self, state: InventoryState) -> InventoryState:
        """Swap in a whole new state, e.g. after an import."""
        logger.info(
            "[store] state replaced: %d categories, %d items, %d drawers",
            len(state.categories), len(state.items), len(state.drawers),
        )
        self._state = state
        return state

    def query(self, criteria: Optional[QueryCriteria] = None) -> List[Item]:
        return query(self._state.items, criteria)

    def get_item(self, item_id: str) -> Item:
        item = get_item(self._state, item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def upsert_item(self, draft: ItemDraft) -> Item:
        state, item = upsert_item(self._state, draft, self.new_id)
        self._commit(state)
        return item

    def delete_item(self, item_id: str) -> None:
        self._commit(delete_item(self._state, item_id))

    def set_item_category(self, item_id: str, category_id: Optional[str]) -> Item:
        self._commit(set_item_category(self._state, item_id, category_id))
        return self.get_item(item_id)

    def add_category(self, name: str) -> Category:
        state, category = add_category(self._state, name, self.new_id)
        self._commit(state)
        return category

    def rename_category(self, category_id: str, name: str) -> Category:
        self._commit(rename_category(self._state, category_id, name))
        return get_category(self._state, category_id)

    def delete_category(self, category_id: str) -> None:
        self._commit(delete_category(self._state, category_id))

    def place_item(self, item_id: str, pos: Optional[SlotPosition]) -> Item:
        self._commit(layout.place_item(self._state, item_id, pos))
        return self.get_item(item_id)

    def request_placement(self, item_id: str, drawer_id: str, r: int, c: int) -> Item:
        self._commit(layout.request_placement(self._state, item_id, drawer_id, r, c))
        return self.get_item(item_id)

    def replace_drawers(self, drawers: Sequence[Drawer]) -> ReconciliationAdjustment:
        state, adjustment = layout.replace_drawers(self._state, drawers)
        self._commit(state)
        return adjustment

    def add_drawer(self) -> Drawer:
        drawer = layout.new_drawer(self._state.drawers, self.new_id)
        self.replace_drawers([*self._state.drawers, drawer])
        return drawer
