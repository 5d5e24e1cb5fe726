"""Local file storage for game thumbnails."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol
from uuid import uuid4

from app.core.config import settings
from app.core.logging import get_logger


logger = get_logger(__name__)


class FileStorage(Protocol):
    async def upload(self, path_prefix: str, filename: str, content: bytes) -> str: ...

    async def remove(self, stored_path: str) -> None: ...


class LocalFileStorage:
    """Stores uploads under a base directory and returns paths relative to it."""

    def __init__(self, base_dir: str | Path = "uploads"):
        """Initialize with base directory for uploaded files."""
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _sanitize_filename(self, filename: str) -> str:
        """Sanitize filename for safe filesystem usage."""

        unsafe_chars = '<>:"/\\|?*'
        for char in unsafe_chars:
            filename = filename.replace(char, "_")

        filename = filename.strip(" .")[:50]

        filename = filename.replace(" ", "_")

        while "__" in filename:
            filename = filename.replace("__", "_")

        return filename or "upload"

    def _resolve(self, stored_path: str) -> Path:
        target = (self.base_dir / stored_path).resolve()
        if self.base_dir.resolve() not in target.parents:
            raise ValueError(f"Path escapes storage root: {stored_path}")
        return target

    async def upload(self, path_prefix: str, filename: str, content: bytes) -> str:
        """Write ``content`` under ``path_prefix`` and return the stored path."""
        name = f"{uuid4().hex[:8]}_{self._sanitize_filename(filename)}"
        stored_path = f"{path_prefix.strip('/')}/{name}"
        target = self._resolve(stored_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.info("Stored upload %s (%d bytes)", stored_path, len(content))
        return stored_path

    async def remove(self, stored_path: str) -> None:
        target = self._resolve(stored_path)
        if not target.exists():
            logger.warning("Upload %s already gone", stored_path)
            return
        target.unlink()

        # Drop now-empty per-game directories
        parent = target.parent
        while parent != self.base_dir.resolve() and not any(parent.iterdir()):
            parent.rmdir()
            parent = parent.parent


file_storage = LocalFileStorage(settings.games.uploads_dir)
