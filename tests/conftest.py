"""
Pytest fixtures for the toolbox backend.

The backend is laid out as top-level modules under ``backend/`` (``core``,
``db``, ``routers``, ``schemas``, ``main``), so it is put on sys.path here.
"""

import itertools
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

backend_dir = Path(__file__).resolve().parent.parent / "backend"
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from core.models import Category, Drawer, InventoryState, Item, SlotPosition  # noqa: E402


@pytest.fixture
def new_id():
    """Deterministic id generator: id1, id2, ..."""
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


@pytest.fixture
def state():
    """Two categories, two drawers, three items (one placed)."""
    return InventoryState(
        categories=[
            Category(id="c1", name="Drivers", order=1),
            Category(id="c2", name="Sockets", order=2),
        ],
        drawers=[
            Drawer(id="d1", name="d1", rows=1, cols=1),
            Drawer(id="d2", name="Drawer 2", rows=2, cols=3),
        ],
        items=[
            Item(id="x", name="Phillips #2", category_id="c1", tags=["driver", "phillips"],
                 pos=SlotPosition(drawer_id="d2", r=1, c=2)),
            Item(id="y", name="Flathead 5mm", category_id="c1", tags=["driver", "flat"], favorite=True),
            Item(id="z", name="10mm Socket", category_id="c2", tags=["socket"], location="Rail A"),
        ],
    )


@pytest.fixture
def db_engine(tmp_path):
    # NullPool: every TestClient runs its own event loop, so no pooled connections
    return create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'toolbox.db'}", poolclass=NullPool)


@pytest.fixture
def make_client(db_engine, new_id):
    from main import create_app

    def _make():
        app = create_app(
            bind=db_engine,
            session_maker=async_sessionmaker(db_engine, expire_on_commit=False),
            new_id=new_id,
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    with make_client() as c:
        yield c
