"""FastAPI dependencies shared by the toolbox routers."""

import logging
from contextlib import asynccontextmanager

from fastapi import HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from core.errors import (
    CategoryNotFoundError,
    DrawerNotFoundError,
    InventoryError,
    ItemNotFoundError,
    ParseError,
)
from core.snapshot import dump_snapshot
from core.store import InventoryStore
from db.snapshot import SnapshotRepository

logger = logging.getLogger(__name__)

NOT_FOUND_ERRORS = (ItemNotFoundError, CategoryNotFoundError, DrawerNotFoundError)


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store


def get_snapshots(request: Request) -> SnapshotRepository:
    return request.app.state.snapshots


def http_error(exc: InventoryError) -> HTTPException:
    if isinstance(exc, NOT_FOUND_ERRORS):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ParseError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Import failed.")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@asynccontextmanager
async def mutation(request: Request):
    """
    Run one store command and save its result as a single unit.

    Commands and saves are serialized by the app's lock, so a slow save can
    never land after a newer one. Core errors become 4xx responses; a failed
    save restores the previous state and becomes a 500.
    """
    store = get_store(request)
    snapshots = get_snapshots(request)
    async with request.app.state.lock:
        previous = store.state
        try:
            yield store
        except InventoryError as e:
            raise http_error(e) from e

        if store.state is previous:
            return
        try:
            await snapshots.save(dump_snapshot(store.state))
        except SQLAlchemyError as e:
            store.replace_state(previous)
            logger.exception("[toolbox] saving snapshot failed, change rolled back: %r", e)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to save inventory: {e}")
