"""Tests for the blob storage service and Cloudinary helpers."""
import hashlib

import pytest

from driveclone.services import file_storage as file_storage_module
from driveclone.services.cloudinary_client import CloudinaryClient, resource_type_for, sign_params
from driveclone.services.file_storage import FileStorageService


async def test_local_save_read_delete(tmp_path):
    storage = FileStorageService(storage_type="local", base_path=str(tmp_path))

    blob = await storage.save(b"hello", "notes.txt", "text/plain", folder="driveClone/user-one")

    assert blob.public_id.startswith("driveClone/user-one/")
    assert blob.public_id.endswith(".txt")
    assert (tmp_path / blob.public_id).read_bytes() == b"hello"
    assert await storage.read(blob.public_id) == b"hello"

    await storage.delete(blob.public_id)
    assert not (tmp_path / blob.public_id).exists()


async def test_local_delete_missing_is_noop(tmp_path):
    storage = FileStorageService(storage_type="local", base_path=str(tmp_path))

    await storage.delete("driveClone/user-one/gone.txt")


async def test_local_rejects_escaping_ids(tmp_path):
    storage = FileStorageService(storage_type="local", base_path=str(tmp_path / "blobs"))

    with pytest.raises(ValueError):
        await storage.read("../outside.txt")


async def test_unknown_storage_type():
    storage = FileStorageService(storage_type="tape")

    with pytest.raises(ValueError):
        await storage.save(b"x", "x.bin")


class FakeCloudinary:
    def __init__(self):
        self.destroyed = []

    async def upload(self, file_bytes, filename, content_type, folder):
        return {
            "secure_url": f"https://res.cloudinary.test/{folder}/{filename}",
            "public_id": f"{folder}/{filename}",
            "resource_type": "image",
        }

    async def destroy(self, public_id, resource_type="image"):
        self.destroyed.append((public_id, resource_type))
        return {"result": "ok"}


async def test_cloudinary_backend_delegates_to_client():
    storage = FileStorageService(storage_type="cloudinary")
    fake = FakeCloudinary()
    storage._cloudinary = fake

    blob = await storage.save(b"png", "cat.png", "image/png", folder="driveClone/u1")
    await storage.delete(blob.public_id, mime_type="video/mp4")

    assert blob.url == "https://res.cloudinary.test/driveClone/u1/cat.png"
    assert blob.resource_type == "image"
    assert fake.destroyed == [("driveClone/u1/cat.png", "video")]


def test_cloudinary_client_needs_credentials(monkeypatch):
    monkeypatch.setattr(file_storage_module.settings, "CLOUDINARY_CLOUD_NAME", "")

    with pytest.raises(ValueError):
        CloudinaryClient("", "key", "secret")
    with pytest.raises(ValueError):
        FileStorageService(storage_type="cloudinary").cloudinary


def test_sign_params_sorts_and_skips_empty():
    params = {"timestamp": 1315060510, "public_id": "sample", "folder": "", "eager": None}

    expected = hashlib.sha1(b"public_id=sample&timestamp=1315060510abcd").hexdigest()
    assert sign_params(params, "abcd") == expected


@pytest.mark.parametrize("mime_type, expected", [
    ("image/png", "image"),
    ("application/pdf", "image"),
    ("video/mp4", "video"),
    ("audio/mpeg", "video"),
    ("text/plain", "raw"),
    (None, "raw"),
])
def test_resource_type_for(mime_type, expected):
    assert resource_type_for(mime_type) == expected


async def test_read_is_local_only():
    storage = FileStorageService(storage_type="cloudinary")

    with pytest.raises(ValueError):
        await storage.read("driveClone/user-one/cat.png")
