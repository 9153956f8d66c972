"""
Back Office API - Blob Storage Tests
=====================================

What:  LocalBlobStorage behavior and its FailureKind contract.
How:   Each test gets its own storage root from the temp_storage fixture.
"""

import os
from pathlib import Path
from unittest.mock import patch

import aiofiles
import pytest

from app.exceptions import FailureKind, StorageError
from app.services.blob_storage import LocalBlobStorage, sanitize_filename


class TestSanitizeFilename:

    def test_strips_directories(self):
        assert sanitize_filename("../../etc/passwd") == "passwd"

    def test_windows_separators(self):
        assert sanitize_filename("C:\\Users\\me\\logo.png") == "logo.png"

    def test_replaces_unsafe_characters(self):
        assert sanitize_filename("My Logo (final).PNG") == "My-Logo-final-.PNG"

    def test_empty_falls_back(self):
        assert sanitize_filename("...") == "upload"


class TestUpload:

    @pytest.mark.asyncio
    async def test_writes_blob_and_returns_url(self, temp_storage, sample_png_bytes):
        storage = LocalBlobStorage(storage_root=temp_storage, public_base_url="https://cdn.test/blobs/")

        blob = await storage.upload(sample_png_bytes, "logo.png", "uploads")

        assert blob.blob_name.endswith("-logo.png")
        assert blob.url == f"https://cdn.test/blobs/uploads/{blob.blob_name}"
        stored = Path(temp_storage) / "uploads" / blob.blob_name
        assert stored.read_bytes() == sample_png_bytes

    @pytest.mark.asyncio
    async def test_names_are_unique(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)

        first = await storage.upload(b"a", "logo.png", "uploads")
        second = await storage.upload(b"b", "logo.png", "uploads")

        assert first.blob_name != second.blob_name

    @pytest.mark.asyncio
    async def test_missing_container_without_auto_create(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage, create_containers=False)

        with pytest.raises(StorageError) as exc_info:
            await storage.upload(b"a", "logo.png", "uploads")

        assert exc_info.value.kind is FailureKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_invalid_container_name(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)

        with pytest.raises(StorageError) as exc_info:
            await storage.upload(b"a", "logo.png", "../outside")

        assert exc_info.value.kind is FailureKind.INVALID_URL

    @pytest.mark.asyncio
    async def test_permission_error_is_auth_failure(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)

        with patch("app.services.blob_storage.aiofiles.open", side_effect=PermissionError("denied")):
            with pytest.raises(StorageError) as exc_info:
                await storage.upload(b"a", "logo.png", "uploads")

        assert exc_info.value.kind is FailureKind.AUTH_FAILURE

    @pytest.mark.asyncio
    async def test_transient_error_is_retried(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)
        real_open = aiofiles.open
        calls = {"n": 0}

        def flaky_open(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise OSError(5, "Input/output error")
            return real_open(*args, **kwargs)

        with patch("app.services.blob_storage.aiofiles.open", side_effect=flaky_open):
            blob = await storage.upload(b"data", "logo.png", "uploads")

        assert calls["n"] == 2
        assert (Path(temp_storage) / "uploads" / blob.blob_name).read_bytes() == b"data"

    @pytest.mark.asyncio
    async def test_persistent_transient_error_gives_up_unavailable(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)

        with patch(
            "app.services.blob_storage.aiofiles.open", side_effect=OSError(5, "Input/output error")
        ) as mock_open:
            with pytest.raises(StorageError) as exc_info:
                await storage.upload(b"a", "logo.png", "uploads")

        assert exc_info.value.kind is FailureKind.UNAVAILABLE
        assert mock_open.call_count > 1


class TestResolve:

    @pytest.mark.asyncio
    async def test_resolves_existing_blob(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)
        blob = await storage.upload(b"x", "a.png", "uploads")

        path = storage.resolve("uploads", blob.blob_name)

        assert path.is_file()

    def test_missing_blob(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)

        with pytest.raises(StorageError) as exc_info:
            storage.resolve("uploads", "nope.png")

        assert exc_info.value.kind is FailureKind.NOT_FOUND

    def test_traversal_rejected(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)

        with pytest.raises(StorageError) as exc_info:
            storage.resolve("uploads", "../secret.txt")

        assert exc_info.value.kind is FailureKind.INVALID_URL


class TestHealthCheck:

    @pytest.mark.asyncio
    async def test_writable_root_is_healthy(self, temp_storage):
        assert await LocalBlobStorage(storage_root=temp_storage).health_check() is True

    @pytest.mark.asyncio
    async def test_unwritable_root(self, temp_storage):
        storage = LocalBlobStorage(storage_root=temp_storage)

        with patch("app.services.blob_storage.os.access", return_value=False):
            assert await storage.health_check() is False


def test_storage_root_is_created(tmp_path):
    root = tmp_path / "nested" / "root"

    LocalBlobStorage(storage_root=str(root))

    assert os.path.isdir(root)
