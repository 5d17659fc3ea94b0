from typing import List, Optional, Union

from pydantic import field_validator

from core.models import ItemDraft, SlotPosition, ToolboxModel


class ItemCreate(ToolboxModel):
    name: str
    category_id: Optional[str] = None
    quantity: Union[int, float, str, None] = None
    location: Optional[str] = None
    tags: Union[str, List[str], None] = None  # list or "comma,separated"
    notes: Optional[str] = None
    favorite: bool = False
    pos: Optional[SlotPosition] = None

    def to_draft(self, item_id: Optional[str] = None) -> ItemDraft:
        return ItemDraft(id=item_id, **self.model_dump())


class ItemUpdate(ItemCreate):
    pass


class ItemCategoryUpdate(ToolboxModel):
    category_id: Optional[str] = None

    @field_validator("category_id")
    @classmethod
    def _blank_is_uncategorized(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None
