"""
Toolbox entity model.

- Category: display group for items, ordered by an advisory ``order`` key.
- Item: a tool, optionally placed in one drawer slot.
- Drawer: a named ``rows x cols`` grid of slots.
- SlotPosition: reference to one slot of one drawer.

Field names are snake_case in Python and camelCase on the wire
(``categoryId``, ``drawerId``, ``updatedAt``); both spellings are accepted
on input.
"""

from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ToolboxModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ToolboxEntity(ToolboxModel):
    # Entities are values: commands build new ones with model_copy(update=...)
    model_config = ConfigDict(frozen=True)


class SlotPosition(ToolboxEntity):
    drawer_id: str
    r: int
    c: int


class Category(ToolboxEntity):
    id: str
    name: str
    order: int = 0


class Drawer(ToolboxEntity):
    id: str
    name: str
    rows: int = Field(ge=1)
    cols: int = Field(ge=1)

    def contains(self, pos: SlotPosition) -> bool:
        return pos.drawer_id == self.id and 0 <= pos.r < self.rows and 0 <= pos.c < self.cols


class Item(ToolboxEntity):
    id: str
    name: str
    # None means uncategorized; the wire format spells it ""
    category_id: Optional[str] = None
    quantity: int = Field(default=1, ge=0)
    location: str = ""
    tags: List[str] = Field(default_factory=list)
    notes: str = ""
    favorite: bool = False
    pos: Optional[SlotPosition] = None

    @field_validator("category_id", mode="before")
    @classmethod
    def _empty_category(cls, v):
        return v or None

    @field_validator("location", "notes", mode="before")
    @classmethod
    def _none_as_blank(cls, v):
        return "" if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def _none_as_no_tags(cls, v):
        return [] if v is None else v

    @field_validator("favorite", mode="before")
    @classmethod
    def _none_as_false(cls, v):
        return False if v is None else v

    @field_serializer("category_id")
    def _category_on_wire(self, v: Optional[str]) -> str:
        return v or ""


class ItemDraft(ToolboxModel):
    """Input of the item upsert command.

    ``id`` selects update over create. ``quantity`` and ``tags`` are accepted
    loosely (numeric strings, comma separated tags) and normalized by the store.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    category_id: Optional[str] = None
    quantity: Union[int, float, str, None] = None
    location: Optional[str] = None
    tags: Union[str, List[str], None] = None
    notes: Optional[str] = None
    favorite: bool = False
    pos: Optional[SlotPosition] = None


class InventoryState(ToolboxEntity):
    """The whole working set. Drawer order is display order."""

    categories: List[Category] = Field(default_factory=list)
    items: List[Item] = Field(default_factory=list)
    drawers: List[Drawer] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utcnow)
