"""Tests for the file registry service."""
import uuid

import pytest

from driveclone.exceptions import NotFoundError, ValidationError
from driveclone.services.file_service import (
    create_file, delete_file, get_file, list_files, update_file,
)
from driveclone.services.folder_service import create_folder, delete_folder, list_folders

U1 = "user-one"
U2 = "user-two"


def _meta(**overrides):
    meta = {
        "name": "a.pdf",
        "original_name": "a.pdf",
        "type": "application/pdf",
        "size": 2048,
        "url": "https://blobs.test/driveClone/user-one/a.pdf",
        "cloudinary_public_id": "driveClone/user-one/a.pdf",
    }
    meta.update(overrides)
    return meta


async def test_create_root_file(db):
    file_rec = await create_file(db, U1, **_meta())

    assert file_rec.id is not None
    assert file_rec.folder_id is None
    assert file_rec.user_id == U1
    assert file_rec.size_bytes == 2048
    assert file_rec.mime_type == "application/pdf"
    assert file_rec.created_at is not None


@pytest.mark.parametrize("field", ["name", "original_name", "type", "size", "url"])
async def test_create_requires_field(db, field):
    with pytest.raises(ValidationError):
        await create_file(db, U1, **_meta(**{field: None}))


async def test_create_parses_string_size(db):
    file_rec = await create_file(db, U1, **_meta(size="4096"))

    assert file_rec.size_bytes == 4096


@pytest.mark.parametrize("size", ["big", -1])
async def test_create_rejects_bad_size(db, size):
    with pytest.raises(ValidationError):
        await create_file(db, U1, **_meta(size=size))


async def test_create_in_folder(db):
    docs = await create_folder(db, U1, "Docs")

    file_rec = await create_file(db, U1, **_meta(folder_id=str(docs.id)))

    assert file_rec.folder_id == docs.id
    assert [f.id for f in await list_files(db, U1, str(docs.id))] == [file_rec.id]
    assert await list_files(db, U1) == []


async def test_create_in_other_users_folder(db):
    docs = await create_folder(db, U1, "Docs")

    with pytest.raises(NotFoundError):
        await create_file(db, U2, **_meta(folder_id=str(docs.id)))


async def test_file_names_need_not_be_unique(db):
    await create_file(db, U1, **_meta())
    await create_file(db, U1, **_meta())

    assert len(await list_files(db, U1)) == 2


async def test_list_newest_first(db):
    for name in ("one", "two", "three"):
        await create_file(db, U1, **_meta(name=name))

    assert [f.name for f in await list_files(db, U1, "null")] == ["three", "two", "one"]


async def test_rename_leaves_folder_alone(db):
    docs = await create_folder(db, U1, "Docs")
    file_rec = await create_file(db, U1, **_meta(folder_id=str(docs.id)))

    updated = await update_file(db, U1, str(file_rec.id), " b.pdf ")

    assert updated.name == "b.pdf"
    assert updated.folder_id == docs.id


async def test_move_to_folder_and_back_to_root(db):
    docs = await create_folder(db, U1, "Docs")
    file_rec = await create_file(db, U1, **_meta())

    moved = await update_file(db, U1, str(file_rec.id), "a.pdf", str(docs.id))
    assert moved.folder_id == docs.id

    back = await update_file(db, U1, str(file_rec.id), "a.pdf", None)
    assert back.folder_id is None


async def test_move_to_missing_folder(db):
    file_rec = await create_file(db, U1, **_meta())

    with pytest.raises(NotFoundError):
        await update_file(db, U1, str(file_rec.id), "a.pdf", str(uuid.uuid4()))


async def test_rename_blank_name(db):
    file_rec = await create_file(db, U1, **_meta())

    with pytest.raises(ValidationError):
        await update_file(db, U1, str(file_rec.id), "")


async def test_delete_removes_blob_and_record(db, storage):
    file_rec = await create_file(db, U1, **_meta())

    public_id = await delete_file(db, U1, str(file_rec.id), storage)

    assert public_id == "driveClone/user-one/a.pdf"
    assert storage.deleted == [public_id]
    with pytest.raises(NotFoundError):
        await get_file(db, U1, file_rec.id)


async def test_delete_survives_blob_failure(db, storage):
    storage.fail_delete = True
    file_rec = await create_file(db, U1, **_meta())

    await delete_file(db, U1, str(file_rec.id), storage)

    assert await list_files(db, U1) == []


async def test_delete_without_blob_id(db, storage):
    file_rec = await create_file(db, U1, **_meta(cloudinary_public_id=None))

    assert await delete_file(db, U1, str(file_rec.id), storage) is None
    assert storage.deleted == []


async def test_other_user_cannot_touch_file(db, storage):
    file_rec = await create_file(db, U1, **_meta())

    with pytest.raises(NotFoundError):
        await get_file(db, U2, str(file_rec.id))
    with pytest.raises(NotFoundError):
        await update_file(db, U2, str(file_rec.id), "stolen.pdf")
    with pytest.raises(NotFoundError):
        await delete_file(db, U2, str(file_rec.id), storage)

    assert storage.deleted == []
    assert (await get_file(db, U1, str(file_rec.id))).name == "a.pdf"


async def test_folder_with_file_lifecycle(db, storage):
    docs = await create_folder(db, U1, "Docs")
    year = await create_folder(db, U1, "2024", str(docs.id))
    file_rec = await create_file(db, U1, **_meta(folder_id=str(year.id)))

    with pytest.raises(ValidationError):
        await delete_folder(db, U1, str(year.id))

    await delete_file(db, U1, str(file_rec.id), storage)
    await delete_folder(db, U1, str(year.id))

    assert await list_folders(db, U1, str(docs.id)) == []


@pytest.mark.parametrize("public_id", [
    "driveClone/user-two/a.pdf",
    "driveClone/user-one-evil/a.pdf",
    "driveClone/user-one/../user-two/a.pdf",
    "elsewhere/a.pdf",
])
async def test_create_rejects_foreign_blob(db, public_id):
    with pytest.raises(ValidationError):
        await create_file(db, U1, **_meta(cloudinary_public_id=public_id))

    assert await list_files(db, U1) == []
