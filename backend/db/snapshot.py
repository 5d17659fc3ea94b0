from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import func

from .database import Base


class SnapshotRecord(Base):
    """One stored snapshot document per storage key."""
    __tablename__ = "snapshots"

    key = Column(String, primary_key=True)
    document = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class SnapshotRepository:
    """Load/save boundary for the whole inventory, stored as one JSON document."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], key: str):
        self.session_maker = session_maker
        self.key = key

    async def load(self) -> Optional[Dict[str, Any]]:
        async with self.session_maker() as db:
            record = await db.get(SnapshotRecord, self.key)
            return record.document if record else None

    async def save(self, document: Dict[str, Any]) -> None:
        async with self.session_maker() as db:
            record = await db.get(SnapshotRecord, self.key)
            if record is None:
                db.add(SnapshotRecord(key=self.key, document=document))
            else:
                record.document = document
            await db.commit()

    async def clear(self) -> None:
        async with self.session_maker() as db:
            record = await db.get(SnapshotRecord, self.key)
            if record is not None:
                await db.delete(record)
                await db.commit()
