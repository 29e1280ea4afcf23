"""Access decisions for every share configuration."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from src.notevault.core.errors import ForbiddenError, NotFoundError
from src.notevault.core.models import NoteStatus
from src.notevault.core.repositories.share_repository import ShareRepository
from src.notevault.core.services.access_guard import AccessGuard


async def _share(session, note, share_type, users=(), expires_at=None):
    repo = ShareRepository(session)
    share = await repo.create_session(note.id, share_type, expires_at)
    if users:
        await repo.add_assignments(share.id, [u.id for u in users])
    await session.commit()
    return share


@pytest.mark.asyncio
async def test_unshared_note_is_owner_only(db_session, world):
    guard = AccessGuard(db_session)
    assert await guard.has_access(world.note.id, world.alice.id)
    assert not await guard.has_access(world.note.id, world.bob.id)
    assert not await guard.has_access(world.note.id, None)


@pytest.mark.asyncio
async def test_public_share_admits_everyone(db_session, world):
    await _share(db_session, world.note, "public")
    guard = AccessGuard(db_session)
    assert await guard.has_access(world.note.id, world.bob.id)
    assert await guard.has_access(world.note.id, None)


@pytest.mark.asyncio
async def test_private_share_admits_assigned_users_only(db_session, world):
    await _share(db_session, world.note, "private", users=[world.bob])
    guard = AccessGuard(db_session)
    assert await guard.has_access(world.note.id, world.alice.id)
    assert await guard.has_access(world.note.id, world.bob.id)
    assert not await guard.has_access(world.note.id, world.carol.id)
    assert not await guard.has_access(world.note.id, None)


@pytest.mark.asyncio
async def test_expired_share_grants_nothing(db_session, world):
    past = datetime.now(timezone.utc) - timedelta(minutes=1)
    await _share(db_session, world.note, "public", expires_at=past)
    guard = AccessGuard(db_session)
    assert not await guard.has_access(world.note.id, world.bob.id)
    assert await guard.has_access(world.note.id, world.alice.id)


@pytest.mark.asyncio
async def test_non_active_note_is_owner_only(db_session, world):
    await _share(db_session, world.note, "public")
    world.note.set_status(NoteStatus.ARCHIVED)
    await db_session.commit()

    guard = AccessGuard(db_session)
    assert not await guard.has_access(world.note.id, world.bob.id)
    assert await guard.has_access(world.note.id, world.alice.id)


@pytest.mark.asyncio
async def test_missing_note(db_session, world):
    guard = AccessGuard(db_session)
    with pytest.raises(NotFoundError):
        await guard.has_access(uuid.uuid4(), world.alice.id)
    with pytest.raises(NotFoundError):
        await guard.is_owner(uuid.uuid4(), world.alice.id)


@pytest.mark.asyncio
async def test_is_owner(db_session, world):
    guard = AccessGuard(db_session)
    assert await guard.is_owner(world.note.id, world.alice.id)
    assert not await guard.is_owner(world.note.id, world.bob.id)
    assert not await guard.is_owner(world.note.id, None)


@pytest.mark.asyncio
async def test_require_owner_and_access(db_session, world):
    await _share(db_session, world.note, "private", users=[world.bob])
    guard = AccessGuard(db_session)

    assert (await guard.require_owner(world.note.id, world.alice.id)).id == world.note.id
    with pytest.raises(ForbiddenError) as exc_info:
        await guard.require_owner(world.note.id, world.bob.id)
    assert exc_info.value.code == "NOT_NOTE_OWNER"

    assert (await guard.require_access(world.note.id, world.bob.id)).id == world.note.id
    with pytest.raises(ForbiddenError) as exc_info:
        await guard.require_access(world.note.id, world.carol.id)
    assert exc_info.value.code == "NOTE_ACCESS_DENIED"
