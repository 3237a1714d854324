"""Object storage for uploaded images.

Services hand `FilePayload` values to an `ObjectStorage` and keep only the
returned URL and file name; the storage backend is swappable through
`get_storage`.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from seed_mission.core.errors import ExternalIOError
from seed_mission.core.settings import settings

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class FilePayload:
    """An uploaded file detached from the web framework's upload object."""

    filename: str
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class StoredObject:
    """Location of an object after upload."""

    url: str
    file_name: str


class ObjectStorage(Protocol):
    """Minimal object storage contract used by the services."""

    def upload(self, file: FilePayload) -> StoredObject:
        ...

    def delete(self, file_name: str) -> None:
        ...

    def file_name_for(self, url: str) -> str | None:
        ...


def _safe_name(filename: str) -> str:
    stem = Path(filename or "upload").name
    cleaned = _UNSAFE_CHARS.sub("_", stem).strip("._")
    return cleaned or "upload"


class LocalObjectStorage:
    """Filesystem-backed storage serving files under a public base URL."""

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def upload(self, file: FilePayload) -> StoredObject:
        """Write the payload under a collision-free name.

        Raises:
            ExternalIOError: If the file cannot be written.
        """
        file_name = f"{uuid.uuid4().hex}_{_safe_name(file.filename)}"
        target = self.root / file_name
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file.content)
        except OSError as err:
            logger.error("Upload of %s failed: %s", file.filename, err)
            raise ExternalIOError(f"Failed to store file {file.filename}") from err
        logger.debug("Stored %s (%d bytes)", file_name, len(file.content))
        return StoredObject(url=f"{self.base_url}/{file_name}", file_name=file_name)

    def delete(self, file_name: str) -> None:
        """Remove a stored object; a missing object is not an error."""
        try:
            (self.root / _safe_name(file_name)).unlink(missing_ok=True)
        except OSError as err:
            raise ExternalIOError(f"Failed to delete file {file_name}") from err

    def file_name_for(self, url: str) -> str | None:
        """Name of the object behind `url`, or None for URLs this storage did not issue."""
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix) or "/" in url[len(prefix):]:
            return None
        return url[len(prefix):] or None


def discard_quietly(storage: ObjectStorage, file_names: list[str]) -> None:
    """Delete objects whose rows are gone, logging instead of raising."""
    for file_name in file_names:
        try:
            storage.delete(file_name)
        except ExternalIOError as err:
            logger.warning("Could not remove stored object %s: %s", file_name, err)


@lru_cache(maxsize=1)
def get_storage() -> ObjectStorage:
    """Return the process-wide storage backend."""
    return LocalObjectStorage(settings.upload_dir, settings.upload_base_url)
