from datetime import datetime

from core.models import ToolboxModel


class ImportResult(ToolboxModel):
    categories: int
    items: int
    drawers: int
    updated_at: datetime
