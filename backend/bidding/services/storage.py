# backend/bidding/services/storage.py
"""Durable object storage for uploaded deliverables."""
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from uuid import uuid4

from ..config import settings
from ..utils.files import get_relative_path
from ..utils.logging import service_logger

DELIVERABLES_FOLDER = "project-deliverables"


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod
    def upload(self, local_path: Path, folder: str) -> str:
        """Upload file, return its public URL."""

    @abstractmethod
    def delete(self, remote_path: str) -> bool:
        """Delete file, return success."""


class LocalStorage(StorageBackend):
    """Stores files under DELIVERABLES_PATH, served by the app at /storage."""

    def __init__(self, root: Path | None = None, base_url: str | None = None):
        self._root = root
        self._base_url = base_url

    @property
    def root(self) -> Path:
        return Path(self._root or settings.DELIVERABLES_PATH)

    @property
    def base_url(self) -> str:
        return (self._base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def upload(self, local_path: Path, folder: str) -> str:
        local_path = Path(local_path)
        target_dir = self.root / folder
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"{uuid4()}{local_path.suffix}"

        shutil.copyfile(local_path, target)
        remote_path = get_relative_path(target, self.root)
        service_logger.info("Stored file", extra={
            "source": str(local_path),
            "remote_path": remote_path
        })
        return f"{self.base_url}/storage/{remote_path}"

    def delete(self, remote_path: str) -> bool:
        target = (self.root / remote_path).resolve()
        if self.root.resolve() not in target.parents or not target.exists():
            return False
        target.unlink()
        service_logger.info("Deleted stored file", extra={"remote_path": remote_path})
        return True


storage_backend = LocalStorage()


def get_storage() -> StorageBackend:
    return storage_backend
