import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from core.config import settings
from core.snapshot import hydrate_state
from core.store import IdGenerator, InventoryStore, random_id
from db.database import async_session_maker, create_db_and_tables, engine
from db.snapshot import SnapshotRepository
from routers.categories import router as categories_router
from routers.drawers import router as drawers_router
from routers.items import router as items_router
from routers.snapshot import router as snapshot_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def create_app(
    bind: Optional[AsyncEngine] = None,
    session_maker: Optional[async_sessionmaker] = None,
    new_id: IdGenerator = random_id,
) -> FastAPI:
    """Build the API; ``bind``/``session_maker`` default to the configured database."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await create_db_and_tables(bind or engine)
        snapshots = SnapshotRepository(session_maker or async_session_maker, settings.snapshot_key)
        app.state.snapshots = snapshots
        app.state.lock = asyncio.Lock()
        app.state.store = InventoryStore(hydrate_state(await snapshots.load(), new_id), new_id=new_id)
        yield

    app = FastAPI(
        title="Toolbox Inventory API",
        description="API for organizing tools into categories and drawer slots",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(items_router, prefix="/items", tags=["items"])
    app.include_router(categories_router, prefix="/categories", tags=["categories"])
    app.include_router(drawers_router, prefix="/drawers", tags=["drawers"])
    app.include_router(snapshot_router, prefix="/snapshot", tags=["snapshot"])
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
