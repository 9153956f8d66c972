"""
Back Office API - Blob Storage
===============================

What:  Abstract blob storage interface plus the filesystem-backed
       implementation used by the upload endpoint.
How:   Blobs live in containers (one directory per container under
       STORAGE_ROOT). Each upload gets a unique blob name, is written with
       async file I/O, and is addressable at
       <STORAGE_PUBLIC_BASE_URL>/<container>/<blob_name>.
Who:   UploadService (writes), the blob route (reads), /health (probe).

Failure contract:
    Backends raise StorageError tagged with a FailureKind. Callers branch on
    the kind only:
        NOT_FOUND      container missing and auto-create disabled
        AUTH_FAILURE   permission denied by the storage provider / filesystem
        INVALID_URL    container or blob name escapes the storage root
        UNAVAILABLE    transient I/O failure (retried with backoff)
        UNKNOWN        anything else

Retry policy (tenacity):
    Only UNAVAILABLE failures are retried: settings.retry_max_attempts
    attempts, exponential backoff with jitter between retry_min_wait and
    retry_max_wait seconds.

Directory Structure:
    storage/
    └── uploads/
        ├── 3f0c...-logo.png
        └── 9b1a...-letterhead.jpg
"""

import errno
import logging
import os
import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import aiofiles
from pydantic import BaseModel
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app.config import settings
from app.exceptions import FailureKind, StorageError

logger = logging.getLogger(__name__)

_CONTAINER_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{1,61}[a-z0-9])?$")
_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


class UploadedBlob(BaseModel):
    """Location of a stored blob."""

    url: str
    blob_name: str


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, StorageError) and exc.kind is FailureKind.UNAVAILABLE


def _classify_os_error(exc: OSError) -> FailureKind:
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM, errno.EROFS):
        return FailureKind.AUTH_FAILURE
    if isinstance(exc, FileNotFoundError):
        return FailureKind.NOT_FOUND
    return FailureKind.UNAVAILABLE


def sanitize_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to a safe basename.

    "../../My Logo (final).PNG" → "My-Logo-final-.PNG"
    """
    name = Path(filename.replace("\\", "/")).name
    name = _UNSAFE_CHARS_RE.sub("-", name).strip(".-")
    return name[:100] or "upload"


class BlobStorage(ABC):
    """
    Contract for blob storage providers.

    Implementations translate every provider-specific failure into a
    StorageError with the appropriate FailureKind.
    """

    @abstractmethod
    async def upload(self, content: bytes, filename: str, container: str) -> UploadedBlob:
        """Store `content` under a new unique blob name in `container`."""
        ...

    @abstractmethod
    def resolve(self, container: str, blob_name: str) -> Path:
        """Absolute path of an existing blob. Raises StorageError(NOT_FOUND) if absent."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """True when the storage backend can accept writes."""
        ...


class LocalBlobStorage(BlobStorage):
    """Filesystem blob storage rooted at settings.storage_root."""

    def __init__(
        self,
        storage_root: Optional[str] = None,
        public_base_url: Optional[str] = None,
        create_containers: Optional[bool] = None,
    ):
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.public_base_url = (
            public_base_url if public_base_url is not None else settings.storage_public_base_url
        ).rstrip("/")
        self.create_containers = (
            settings.storage_create_containers if create_containers is None else create_containers
        )
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("LocalBlobStorage initialized with storage_root=%s", self.storage_root)

    # ── Path handling ─────────────────────────────────────────────────────

    def _container_path(self, container: str) -> Path:
        if not _CONTAINER_RE.match(container or ""):
            raise StorageError(
                kind=FailureKind.INVALID_URL,
                message=f"Invalid container name '{container}'",
                context={"container": container},
            )
        return self.storage_root / container

    def _blob_path(self, container: str, blob_name: str) -> Path:
        container_path = self._container_path(container)
        path = (container_path / blob_name).resolve()
        # Blob names are flat; anything resolving elsewhere is rejected
        if path.parent != container_path.resolve():
            raise StorageError(
                kind=FailureKind.INVALID_URL,
                message="Blob name escapes its container",
                context={"container": container, "blob_name": blob_name},
            )
        return path

    def url_for(self, container: str, blob_name: str) -> str:
        return f"{self.public_base_url}/{container}/{blob_name}"

    # ── Operations ────────────────────────────────────────────────────────

    async def _ensure_container(self, container: str) -> Path:
        path = self._container_path(container)
        if path.is_dir():
            return path
        if not self.create_containers:
            raise StorageError(
                kind=FailureKind.NOT_FOUND,
                message=f"Container '{container}' does not exist",
                context={"container": container},
            )
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                kind=_classify_os_error(e),
                message=f"Could not create container '{container}'",
                context={"container": container, "os_error": str(e)},
            ) from e
        logger.info("Created blob container %s", container)
        return path

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait, max=settings.retry_max_wait
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _write(self, path: Path, content: bytes) -> None:
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise StorageError(
                kind=_classify_os_error(e),
                message="Failed to write blob",
                context={"path": str(path), "os_error": str(e)},
            ) from e

    async def upload(self, content: bytes, filename: str, container: str) -> UploadedBlob:
        await self._ensure_container(container)
        blob_name = f"{uuid.uuid4()}-{sanitize_filename(filename)}"
        path = self._blob_path(container, blob_name)

        await self._write(path, content)

        logger.info("Blob stored: %s/%s (%d bytes)", container, blob_name, len(content))
        return UploadedBlob(url=self.url_for(container, blob_name), blob_name=blob_name)

    def resolve(self, container: str, blob_name: str) -> Path:
        path = self._blob_path(container, blob_name)
        if not path.is_file():
            raise StorageError(
                kind=FailureKind.NOT_FOUND,
                message="Blob not found",
                context={"container": container, "blob_name": blob_name},
            )
        return path

    async def health_check(self) -> bool:
        return self.storage_root.is_dir() and os.access(self.storage_root, os.W_OK)


# Storage root doesn't change at runtime; one instance serves all requests
blob_storage: BlobStorage = LocalBlobStorage()
