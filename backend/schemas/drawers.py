from typing import List

from pydantic import BaseModel, field_validator, model_validator

from core.models import Drawer, ToolboxModel


class DrawerLayoutUpdate(BaseModel):
    """Full drawer list from the layout editor; list order is display order."""
    drawers: List[Drawer]

    @field_validator("drawers")
    @classmethod
    def _names_required(cls, v: List[Drawer]) -> List[Drawer]:
        out = []
        for d in v:
            name = d.name.strip()
            if not name:
                raise ValueError("drawer name is required")
            out.append(d.model_copy(update={"name": name}))
        return out

    @model_validator(mode="after")
    def _non_empty_unique(self):
        if not self.drawers:
            raise ValueError("at least one drawer is required")
        ids = [d.id for d in self.drawers]
        if len(set(ids)) != len(ids):
            raise ValueError("drawer ids must be unique")
        return self


class DrawerLayoutOut(ToolboxModel):
    drawers: List[Drawer]
    cleared: List[str]


class SlotDrop(ToolboxModel):
    # the dragged item's id; the slot comes from the URL
    item_id: str
