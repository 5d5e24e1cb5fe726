"""Seed the game_templates table with every registered game kind.

Game creation fails with "Template not found. Run seed!" until this has run
against the target database.

Usage:
  uv run scripts/seed_templates.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path so `app` package imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.db.base import get_session
from app.core.db_services import GameService
from app.modules.games.kinds import registered_kinds


async def main() -> int:
    async for session in get_session():  # get_session is an async generator
        db = GameService(session)
        for kind in registered_kinds():
            template = await db.ensure_template(kind.slug, kind.display_name)
            print(f"  • {template.slug} -> id {template.id} ({template.name})")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
