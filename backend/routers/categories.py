from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from core.deps import get_store, mutation
from core.errors import CategoryNotFoundError
from core.models import Category
from core.store import InventoryStore, get_category, ordered_categories
from schemas.categories import CategoryCreate, CategoryRename

router = APIRouter()


@router.get("/", response_model=List[Category])
async def list_categories(store: InventoryStore = Depends(get_store)):
    """List categories in display order."""
    return ordered_categories(store.state)


@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, request: Request):
    async with mutation(request) as store:
        category = store.add_category(payload.name)
    return category


@router.patch("/{category_id}", response_model=Category)
async def rename_category(category_id: str, payload: CategoryRename, request: Request):
    async with mutation(request) as store:
        category = store.rename_category(category_id, payload.name)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: str, request: Request):
    """Delete a category. Its items remain, uncategorized."""
    async with mutation(request) as store:
        if get_category(store.state, category_id) is None:
            raise CategoryNotFoundError(category_id)
        store.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
