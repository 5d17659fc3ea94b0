from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from core import layout
from core.deps import get_store, http_error, mutation
from core.errors import InventoryError
from core.models import Drawer, Item
from core.store import InventoryStore
from schemas.drawers import DrawerLayoutOut, DrawerLayoutUpdate, SlotDrop

router = APIRouter()


@router.get("/", response_model=List[Drawer])
async def list_drawers(store: InventoryStore = Depends(get_store)):
    """Drawers in display order; the first one is the default."""
    return store.state.drawers


@router.put("/", response_model=DrawerLayoutOut)
async def replace_drawers(payload: DrawerLayoutUpdate, request: Request):
    """
    Save the drawer layout.

    Items placed in a removed drawer, or in a slot a resize cut off, are
    unplaced; their ids are returned in ``cleared``.
    """
    async with mutation(request) as store:
        adjustment = store.replace_drawers(payload.drawers)
        drawers = store.state.drawers
    return DrawerLayoutOut(drawers=drawers, cleared=list(adjustment.cleared))


@router.post("/", response_model=Drawer, status_code=status.HTTP_201_CREATED)
async def add_drawer(request: Request):
    async with mutation(request) as store:
        drawer = store.add_drawer()
    return drawer


@router.get("/{drawer_id}/grid", response_model=List[List[Optional[str]]])
async def get_drawer_grid(drawer_id: str, store: InventoryStore = Depends(get_store)):
    """Item ids per slot, row by row; null marks an empty slot."""
    try:
        return layout.drawer_grid(store.state, drawer_id)
    except InventoryError as e:
        raise http_error(e)


@router.put("/{drawer_id}/slots/{r}/{c}", response_model=Item)
async def drop_item_on_slot(drawer_id: str, r: int, c: int, payload: SlotDrop, request: Request):
    """Place an item in a slot, unplacing whatever was there before."""
    async with mutation(request) as store:
        item = store.request_placement(payload.item_id, drawer_id, r, c)
    return item
