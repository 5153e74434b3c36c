"""Stockage des blobs (snapshots html, screenshots) sur le disque"""

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional, Protocol

from webarchive.core.config import settings
from webarchive.core.errors import ValidationError

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def put(self, key: str, data: bytes) -> None: ...

    def delete(self, keys: Iterable[str]) -> int: ...


class LocalBlobStore:
    def __init__(self, root):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        parts = PurePosixPath(key).parts
        # refuse les clés qui sortent du dossier racine
        if not key or key.startswith("/") or ".." in parts:
            raise ValidationError(f"Invalid blob key: {key!r}")
        return self.root.joinpath(*parts)

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_bytes()

    def put(self, key: str, data: bytes) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def delete(self, keys: Iterable[str]) -> int:
        # une clé absente n'est pas une erreur (ex: page sans screenshot)
        removed = 0
        for key in keys:
            path = self._path(key)
            if path.is_file():
                path.unlink()
                removed += 1
        logger.info(f"Removed {removed} blob(s)")
        return removed


blob_store = LocalBlobStore(settings.BLOB_DIR)


def get_blob_store() -> BlobStore:
    return blob_store
