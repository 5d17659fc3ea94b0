"""Errors raised by the toolbox core.

Every core command is a pure function over an ``InventoryState``; when one of
these is raised the caller's state is left exactly as it was.
"""


class InventoryError(Exception):
    """Base class for toolbox inventory errors."""


class ValidationError(InventoryError):
    """A user supplied draft is missing required fields or is out of range."""


class ParseError(InventoryError):
    """An imported snapshot document is malformed or structurally incomplete."""


class ItemNotFoundError(InventoryError):
    def __init__(self, item_id: str):
        super().__init__(f"Item with id {item_id} not found")
        self.item_id = item_id


class CategoryNotFoundError(InventoryError):
    def __init__(self, category_id: str):
        super().__init__(f"Category with id {category_id} not found")
        self.category_id = category_id


class DrawerNotFoundError(InventoryError):
    def __init__(self, drawer_id: str):
        super().__init__(f"Drawer with id {drawer_id} not found")
        self.drawer_id = drawer_id
