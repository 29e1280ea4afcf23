"""Note attachments through the HTTP API, stored on local disk."""

from pathlib import Path

import pytest

from src.notevault.main import app


def _url(note):
    return f"/api/notes/{note['id']}/attachments"


async def _upload(client, user, note, name="plan.txt", data=b"hello", content_type="text/plain"):
    return await client.post(
        _url(note), files={"file": (name, data, content_type)}, headers=user.headers
    )


async def _share(client, owner, note, **payload):
    response = await client.post(
        f"/api/notes/{note['id']}/share", json=payload, headers=owner.headers
    )
    assert response.status_code == 201, response.text


@pytest.mark.asyncio
async def test_owner_uploads_and_lists(client, alice, create_note, test_settings):
    note = await create_note(alice)

    response = await _upload(client, alice, note)
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["note_id"] == note["id"]
    assert body["file_name"] == "plan.txt"
    assert body["file_mime_type"] == "text/plain"
    assert body["file_size"] == 5
    assert body["file_url"].startswith("/attachments/")

    stored = Path(test_settings.attachment_dir) / body["file_url"].rsplit("/", 1)[-1]
    assert stored.read_bytes() == b"hello"

    listed = await client.get(_url(note), headers=alice.headers)
    assert listed.status_code == 200
    assert [a["id"] for a in listed.json()] == [body["id"]]


@pytest.mark.asyncio
async def test_grantee_lists_and_non_grantee_is_forbidden(client, alice, bob, carol, create_note):
    note = await create_note(alice)
    assert (await _upload(client, alice, note)).status_code == 201

    assert (await client.get(_url(note), headers=bob.headers)).status_code == 403

    await _share(client, alice, note, share_type="private", user_emails=[bob.email])
    granted = await client.get(_url(note), headers=bob.headers)
    assert granted.status_code == 200
    assert [a["file_name"] for a in granted.json()] == ["plan.txt"]

    denied = await client.get(_url(note), headers=carol.headers)
    assert denied.status_code == 403

    await _share(client, alice, note, share_type="public")
    assert (await client.get(_url(note), headers=carol.headers)).status_code == 200


@pytest.mark.asyncio
async def test_only_the_owner_uploads_and_removes(client, alice, bob, create_note):
    note = await create_note(alice)
    await _share(client, alice, note, share_type="private", user_emails=[bob.email])
    attachment = (await _upload(client, alice, note)).json()

    assert (await _upload(client, bob, note)).status_code == 403
    removed = await client.delete(f"{_url(note)}/{attachment['id']}", headers=bob.headers)
    assert removed.status_code == 403

    assert (await client.get(_url(note))).status_code == 401


@pytest.mark.asyncio
async def test_upload_rules(client, alice, create_note, test_settings):
    note = await create_note(alice)
    test_settings.max_attachment_bytes = 4

    too_big = await _upload(client, alice, note, data=b"hello")
    assert too_big.status_code == 400
    assert too_big.json()["error"] == "FILE_TOO_LARGE"

    bad_type = await _upload(client, alice, note, name="run.sh", data=b"ls", content_type="x-shell/sh")
    assert bad_type.status_code == 400
    assert bad_type.json()["error"] == "INVALID_FILE_TYPE"

    missing = await client.post(_url(note), headers=alice.headers)
    assert missing.status_code == 400
    assert missing.json()["error"] == "VALIDATION_ERROR"

    assert (await client.get(_url(note), headers=alice.headers)).json() == []


@pytest.mark.asyncio
async def test_delete_removes_file(client, alice, create_note, test_settings):
    note = await create_note(alice)
    attachment = (await _upload(client, alice, note)).json()
    stored = Path(test_settings.attachment_dir) / attachment["file_url"].rsplit("/", 1)[-1]

    url = f"{_url(note)}/{attachment['id']}"
    assert (await client.delete(url, headers=alice.headers)).status_code == 204
    assert not stored.exists()

    again = await client.delete(url, headers=alice.headers)
    assert again.status_code == 404
    assert again.json()["error"] == "ATTACHMENT_NOT_FOUND"


def test_local_attachment_directory_is_mounted():
    assert "/attachments" in {getattr(route, "path", None) for route in app.routes}
