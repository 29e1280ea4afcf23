"""SharingService against the in-memory SQLite database."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from src.notevault.core.errors import BadRequestError, NotFoundError
from src.notevault.core.models import NoteStatus
from src.notevault.core.repositories.share_repository import ShareRepository
from src.notevault.core.schemas.sharing import ShareUpsertRequest
from src.notevault.core.services.sharing_service import SharingService, _dedupe_emails, share_url


def _private(*emails):
    return ShareUpsertRequest(share_type="private", user_emails=list(emails))


def test_dedupe_emails_keeps_first_seen_order():
    assert _dedupe_emails(["B@x.com", "a@x.com", "b@x.com "]) == ["b@x.com", "a@x.com"]


def test_share_url():
    assert share_url("abc") == "/share/abc"


@pytest.mark.asyncio
async def test_status_of_unshared_note_is_empty(db_session, world):
    status = await SharingService(db_session).get_share_status(world.note.id)
    assert status.share_type is None
    assert status.public_id is None
    assert status.shared_users == []


@pytest.mark.asyncio
async def test_upsert_public_share(db_session, world):
    result = await SharingService(db_session).upsert_share(world.note.id, ShareUpsertRequest())
    assert result.share_type.value == "public"
    assert result.share_url == f"/share/{result.public_id}"
    assert result.shared_users == []
    assert result.skipped_emails == []


@pytest.mark.asyncio
async def test_upsert_is_idempotent_and_keeps_public_id(db_session, world):
    svc = SharingService(db_session)
    first = await svc.upsert_share(world.note.id, _private("bob@example.com"))
    second = await svc.upsert_share(world.note.id, _private("bob@example.com"))

    assert first.public_id == second.public_id
    assert first.id == second.id
    assert [u.email for u in second.shared_users] == ["bob@example.com"]


@pytest.mark.asyncio
async def test_upsert_private_replaces_assignment_set(db_session, world):
    svc = SharingService(db_session)
    await svc.upsert_share(world.note.id, _private("bob@example.com"))
    result = await svc.upsert_share(world.note.id, _private("carol@example.com"))

    assert [u.username for u in result.shared_users] == ["carol"]
    share = await ShareRepository(db_session).get_by_note_id(world.note.id)
    assert not await ShareRepository(db_session).has_assignment(share.id, world.bob.id)


@pytest.mark.asyncio
async def test_upsert_reports_unknown_and_owner_emails(db_session, world):
    result = await SharingService(db_session).upsert_share(
        world.note.id,
        _private("ghost@example.com", "BOB@example.com", "alice@example.com", "bob@example.com"),
    )
    assert [u.username for u in result.shared_users] == ["bob"]
    assert result.skipped_emails == ["ghost@example.com", "alice@example.com"]


@pytest.mark.asyncio
async def test_switching_to_public_drops_assignments(db_session, world):
    svc = SharingService(db_session)
    private = await svc.upsert_share(world.note.id, _private("bob@example.com"))
    public = await svc.upsert_share(world.note.id, ShareUpsertRequest(share_type="public"))

    assert public.public_id == private.public_id
    assert public.shared_users == []
    assert not await ShareRepository(db_session).has_assignment(private.id, world.bob.id)


@pytest.mark.asyncio
async def test_upsert_sets_and_clears_expiry(db_session, world):
    svc = SharingService(db_session)
    expires = datetime.now(timezone.utc) + timedelta(days=2)
    with_expiry = await svc.upsert_share(world.note.id, ShareUpsertRequest(expires_at=expires))
    assert with_expiry.expires_at is not None
    assert with_expiry.is_expired is False

    cleared = await svc.upsert_share(world.note.id, ShareUpsertRequest())
    assert cleared.expires_at is None


@pytest.mark.asyncio
async def test_upsert_rejects_non_active_note_and_leaves_share(db_session, world):
    svc = SharingService(db_session)
    before = await svc.upsert_share(world.note.id, _private("bob@example.com"))

    world.note.set_status(NoteStatus.DELETED)
    await db_session.commit()

    with pytest.raises(BadRequestError) as exc_info:
        await svc.upsert_share(world.note.id, ShareUpsertRequest(share_type="public"))
    assert exc_info.value.code == "NOTE_NOT_ACTIVE"

    after = await svc.get_share_status(world.note.id)
    assert after.share_type.value == "private"
    assert after.public_id == before.public_id
    assert [u.username for u in after.shared_users] == ["bob"]


@pytest.mark.asyncio
async def test_upsert_missing_note(db_session, world):
    with pytest.raises(NotFoundError):
        await SharingService(db_session).upsert_share(uuid.uuid4(), ShareUpsertRequest())


@pytest.mark.asyncio
async def test_get_by_public_id(db_session, world):
    svc = SharingService(db_session)
    share = await svc.upsert_share(world.note.id, _private("bob@example.com"))

    note = await svc.get_by_public_id(share.public_id, world.bob.id)
    assert note.title == "Plan"
    assert note.owner_username == "alice"
    assert note.share_type.value == "private"

    for caller in (world.carol.id, None):
        with pytest.raises(NotFoundError) as exc_info:
            await svc.get_by_public_id(share.public_id, caller)
        assert exc_info.value.code == "SHARE_NOT_FOUND"

    with pytest.raises(NotFoundError):
        await svc.get_by_public_id("does-not-exist", world.bob.id)


@pytest.mark.asyncio
async def test_public_link_stops_resolving_once_expired(db_session, world):
    svc = SharingService(db_session)
    share = await svc.upsert_share(world.note.id, ShareUpsertRequest())
    assert (await svc.get_by_public_id(share.public_id, None)).id == world.note.id

    session = await ShareRepository(db_session).get_by_note_id(world.note.id)
    session.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    await db_session.commit()

    with pytest.raises(NotFoundError):
        await svc.get_by_public_id(share.public_id, None)
    status = await svc.get_share_status(world.note.id)
    assert status.is_expired is True


@pytest.mark.asyncio
async def test_remove_assignment(db_session, world):
    svc = SharingService(db_session)
    with pytest.raises(NotFoundError):
        await svc.remove_assignment(world.note.id, world.bob.id)

    await svc.upsert_share(world.note.id, ShareUpsertRequest())
    with pytest.raises(BadRequestError) as exc_info:
        await svc.remove_assignment(world.note.id, world.bob.id)
    assert exc_info.value.code == "SHARE_NOT_PRIVATE"

    await svc.upsert_share(world.note.id, _private("bob@example.com", "carol@example.com"))
    await svc.remove_assignment(world.note.id, world.bob.id)
    status = await svc.get_share_status(world.note.id)
    assert [u.username for u in status.shared_users] == ["carol"]

    with pytest.raises(NotFoundError) as exc_info:
        await svc.remove_assignment(world.note.id, world.bob.id)
    assert exc_info.value.code == "ASSIGNMENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_remove_share_is_idempotent(db_session, world):
    svc = SharingService(db_session)
    share = await svc.upsert_share(world.note.id, _private("bob@example.com"))
    await svc.remove_share(world.note.id)
    await svc.remove_share(world.note.id)

    assert (await svc.get_share_status(world.note.id)).share_type is None
    with pytest.raises(NotFoundError):
        await svc.get_by_public_id(share.public_id, world.bob.id)


@pytest.mark.asyncio
async def test_list_shared_with_me(db_session, world):
    svc = SharingService(db_session)
    await svc.upsert_share(world.note.id, _private("bob@example.com"))

    shared = await svc.list_shared_with_me(world.bob.id)
    assert [n.id for n in shared] == [world.note.id]
    assert shared[0].owner_username == "alice"
    assert await svc.list_shared_with_me(world.carol.id) == []
