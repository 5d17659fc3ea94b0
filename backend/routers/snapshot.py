import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse

from core.deps import get_store, http_error, mutation
from core.errors import ParseError
from core.snapshot import dump_snapshot, export_filename, load_snapshot
from core.store import InventoryStore
from schemas.snapshot import ImportResult

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_IMPORT_BYTES = 10 * 1024 * 1024


@router.get("/export")
async def export_snapshot(store: InventoryStore = Depends(get_store)):
    """Download the whole inventory as a snapshot document."""
    return JSONResponse(
        content=dump_snapshot(store.state, refresh=True),
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post("/import", response_model=ImportResult)
async def import_snapshot(request: Request, file: UploadFile = File(...)):
    """
    Replace the whole inventory with an uploaded snapshot document.

    A malformed document leaves the current inventory untouched.
    """
    # never hold more than the limit in memory, even when the size is unknown
    too_large = file.size is not None and file.size > MAX_IMPORT_BYTES
    if not too_large:
        data = await file.read(MAX_IMPORT_BYTES + 1)
        too_large = len(data) > MAX_IMPORT_BYTES
    if too_large:
        logger.warning("[snapshot] import of %r rejected: larger than %d bytes", file.filename, MAX_IMPORT_BYTES)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Import failed.")
    try:
        state = load_snapshot(data)
    except ParseError as e:
        logger.warning("[snapshot] import of %r failed: %s", file.filename, e)
        raise http_error(e)

    async with mutation(request) as store:
        store.replace_state(state)
    return ImportResult(
        categories=len(state.categories),
        items=len(state.items),
        drawers=len(state.drawers),
        updated_at=state.updated_at,
    )
