"""Seed data for the service tests that run against SQLite."""

from types import SimpleNamespace

import pytest

from src.notevault.core.repositories.note_repository import NoteRepository
from src.notevault.core.repositories.user_repository import UserRepository


@pytest.fixture
async def world(db_session):
    """alice owns ``note``; bob and carol are other users."""
    users = UserRepository(db_session)
    people = {}
    for name in ("alice", "bob", "carol"):
        people[name] = await users.create_user(
            {
                "username": name,
                "email": f"{name}@example.com",
                "password_hash": "h" * 64,
                "password_salt": "s" * 32,
            }
        )
    note = await NoteRepository(db_session).create_note(
        {"user_id": people["alice"].id, "title": "Plan", "content": "<p>secret</p>"}
    )
    await db_session.commit()
    return SimpleNamespace(note=note, **people)
