from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, status

from core.deps import get_store, http_error, mutation
from core.errors import InventoryError
from core.models import Item
from core.query import QueryCriteria
from core.store import InventoryStore, all_tags
from schemas.items import ItemCategoryUpdate, ItemCreate, ItemUpdate

router = APIRouter()


@router.get("/", response_model=List[Item])
async def list_items(
    category_id: Optional[str] = None,
    favorite_only: bool = False,
    tag: Optional[str] = None,
    q: Optional[str] = None,
    store: InventoryStore = Depends(get_store),
):
    """List items matching every given filter, sorted by name."""
    criteria = QueryCriteria(category_id=category_id, favorite_only=favorite_only, tag=tag, text=q)
    return store.query(criteria)


@router.get("/tags", response_model=List[str])
async def list_tags(store: InventoryStore = Depends(get_store)):
    return all_tags(store.state)


@router.get("/{item_id}", response_model=Item)
async def get_item(item_id: str, store: InventoryStore = Depends(get_store)):
    try:
        return store.get_item(item_id)
    except InventoryError as e:
        raise http_error(e)


@router.post("/", response_model=Item, status_code=status.HTTP_201_CREATED)
async def create_item(payload: ItemCreate, request: Request):
    """Create an item; name and category are required."""
    async with mutation(request) as store:
        item = store.upsert_item(payload.to_draft())
    return item


@router.put("/{item_id}", response_model=Item)
async def update_item(item_id: str, payload: ItemUpdate, request: Request):
    """Replace an item's fields; its placement is kept unless ``pos`` is given."""
    async with mutation(request) as store:
        # PUT never creates: an unknown id would otherwise get a fresh item
        store.get_item(item_id)
        item = store.upsert_item(payload.to_draft(item_id))
    return item


@router.patch("/{item_id}/category", response_model=Item)
async def move_item_to_category(item_id: str, payload: ItemCategoryUpdate, request: Request):
    async with mutation(request) as store:
        item = store.set_item_category(item_id, payload.category_id)
    return item


@router.delete("/{item_id}/placement", response_model=Item)
async def clear_item_placement(item_id: str, request: Request):
    async with mutation(request) as store:
        item = store.place_item(item_id, None)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: str, request: Request):
    """Delete an item; its slot becomes free."""
    async with mutation(request) as store:
        store.get_item(item_id)
        store.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
