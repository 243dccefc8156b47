"""Local disk storage for generated documents."""

from __future__ import annotations

from pathlib import Path

from stockpos.app.core.config import settings


class FileStorageService:
    """Store and retrieve files under ``FILE_STORAGE_PATH``."""

    def __init__(self, root: str | Path | None = None) -> None:
        if settings.FILE_STORAGE_BACKEND != "local":
            raise ValueError(f"Unsupported file storage backend: {settings.FILE_STORAGE_BACKEND}")
        self._root = Path(root or settings.FILE_STORAGE_PATH)
        self._root.mkdir(parents=True, exist_ok=True)

    def save(self, relative_path: str, data: bytes) -> str:
        """Persist *data* under *relative_path* and return the full path."""
        dest = self._root / relative_path
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)
        return str(dest)

    def read(self, relative_path: str) -> bytes:
        return (self._root / relative_path).read_bytes()

    def exists(self, relative_path: str) -> bool:
        return (self._root / relative_path).exists()
