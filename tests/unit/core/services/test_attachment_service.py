import uuid

import pytest
from sqlalchemy.exc import SQLAlchemyError

from src.notevault.config import Settings
from src.notevault.core.errors import DatabaseError, NotFoundError, ValidationError
from src.notevault.core.services.attachment_service import AttachmentService
from src.notevault.core.storage import LocalAttachmentStorage


@pytest.fixture
def storage_dir(tmp_path):
    return tmp_path / "attachments"


@pytest.fixture
def service(db_session, storage_dir):
    storage = LocalAttachmentStorage(str(storage_dir))
    return AttachmentService(db_session, storage, Settings(max_attachment_bytes=16))


def _stored_files(storage_dir):
    return sorted(p.name for p in storage_dir.iterdir()) if storage_dir.exists() else []


@pytest.mark.asyncio
async def test_upload_stores_file_and_row(service, world, storage_dir):
    created = await service.upload(world.note.id, "todo.txt", "text/plain", b"buy milk")

    assert created.note_id == world.note.id
    assert created.file_name == "todo.txt"
    assert created.file_size == 8
    assert _stored_files(storage_dir) == [created.file_url.rsplit("/", 1)[-1]]

    listed = await service.list_attachments(world.note.id)
    assert [a.id for a in listed] == [created.id]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "filename, content_type, data, code",
    [
        ("", "text/plain", b"x", "FILE_REQUIRED"),
        ("run.sh", "x-shell/script", b"x", "INVALID_FILE_TYPE"),
        ("run.sh", None, b"x", "INVALID_FILE_TYPE"),
        ("big.txt", "text/plain", b"x" * 17, "FILE_TOO_LARGE"),
    ],
)
async def test_rejected_uploads_store_nothing(
    service, world, storage_dir, filename, content_type, data, code
):
    with pytest.raises(ValidationError) as exc_info:
        await service.upload(world.note.id, filename, content_type, data)

    assert exc_info.value.code == code
    assert _stored_files(storage_dir) == []
    assert await service.list_attachments(world.note.id) == []


@pytest.mark.asyncio
async def test_failed_insert_removes_the_stored_file(service, world, storage_dir, monkeypatch):
    async def broken_create(_data):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(service.attachment_repo, "create_attachment", broken_create)

    with pytest.raises(DatabaseError):
        await service.upload(world.note.id, "todo.txt", "text/plain", b"buy milk")
    assert _stored_files(storage_dir) == []


@pytest.mark.asyncio
async def test_delete_removes_file_and_row(service, world, storage_dir):
    created = await service.upload(world.note.id, "todo.txt", "text/plain", b"buy milk")

    await service.delete_attachment(world.note.id, created.id)

    assert _stored_files(storage_dir) == []
    assert await service.list_attachments(world.note.id) == []


@pytest.mark.asyncio
async def test_delete_unknown_or_foreign_attachment(service, world):
    created = await service.upload(world.note.id, "todo.txt", "text/plain", b"buy milk")

    with pytest.raises(NotFoundError) as exc_info:
        await service.delete_attachment(world.note.id, uuid.uuid4())
    assert exc_info.value.code == "ATTACHMENT_NOT_FOUND"

    with pytest.raises(NotFoundError):
        await service.delete_attachment(uuid.uuid4(), created.id)
