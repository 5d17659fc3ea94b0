"""
Reset the stored toolbox snapshot.

- default: store the built-in sample toolbox (4 categories, 5 items, 4 drawers)
- --from-file PATH: store the snapshot document read from PATH
- --empty: delete the stored snapshot (the API falls back to the sample on start)

Run:
- inside backend/: `uv run python scripts/reset_toolbox.py`
- from repo root: `uv run python backend/scripts/reset_toolbox.py --from-file toolbox-2026-01-01.json`
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from core.config import settings  # noqa: E402
from core.errors import ParseError  # noqa: E402
from core.snapshot import default_state, dump_snapshot, load_snapshot  # noqa: E402
from db.database import async_session_maker, create_db_and_tables  # noqa: E402
from db.snapshot import SnapshotRepository  # noqa: E402


async def main(from_file: Optional[str] = None, empty: bool = False) -> int:
    await create_db_and_tables()
    snapshots = SnapshotRepository(async_session_maker, settings.snapshot_key)

    if empty:
        await snapshots.clear()
        print(f"[reset_toolbox] cleared snapshot '{settings.snapshot_key}'")
        return 0

    if from_file:
        try:
            state = load_snapshot(Path(from_file).read_bytes())
        except (OSError, ParseError) as e:
            print(f"[reset_toolbox] import failed: {e}", file=sys.stderr)
            return 1
    else:
        state = default_state()

    await snapshots.save(dump_snapshot(state, refresh=True))
    print(
        f"[reset_toolbox] stored categories={len(state.categories)} "
        f"items={len(state.items)} drawers={len(state.drawers)}"
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reset the stored toolbox snapshot")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--from-file", help="snapshot JSON document to store")
    group.add_argument("--empty", action="store_true", help="delete the stored snapshot")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(from_file=args.from_file, empty=args.empty)))
