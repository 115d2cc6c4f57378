from datetime import datetime

import pytest

from conftest import auth_headers, register


@pytest.fixture
def note_schema():
    yield {
        "title": "Groceries",
        "content": "milk, eggs, bread",
        "tags": ["home", "shopping"],
        "color": "#ffcc00",
    }


def stamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def create_note(tester, headers, **fields) -> dict:
    body = {"title": "Note", "content": "Some content", **fields}
    response = tester.post(url="/api/notes", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]["note"]


def test_create_note(tester, headers, note_schema) -> None:
    response = tester.post(url="/api/notes", json=note_schema, headers=headers)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Note created successfully"
    note = body["data"]["note"]
    assert note["title"] == "Groceries"
    assert note["content"] == "milk, eggs, bread"
    assert note["tags"] == ["home", "shopping"]
    assert note["color"] == "#ffcc00"
    assert note["isPinned"] is False
    assert note["isArchived"] is False
    assert isinstance(note["id"], int)
    assert note["createdAt"] and note["updatedAt"]
    assert "isDeleted" not in note


def test_create_note_defaults(tester, headers) -> None:
    note = create_note(tester, headers)

    assert note["tags"] == []
    assert note["color"] == "#ffffff"
    assert note["isPinned"] is False


def test_create_note_keeps_tag_order(tester, headers) -> None:
    note = create_note(tester, headers, tags=["zeta", "alpha", "mid"])

    response = tester.get(url=f"/api/notes/{note['id']}", headers=headers)

    assert response.json()["data"]["note"]["tags"] == ["zeta", "alpha", "mid"]


@pytest.mark.parametrize(
    "fields, field",
    [
        ({"title": ""}, "title"),
        ({"title": "x" * 101}, "title"),
        ({"content": ""}, "content"),
        ({"content": "x" * 10001}, "content"),
        ({"tags": [f"t{i}" for i in range(11)]}, "tags"),
        ({"tags": ["x" * 21]}, "tags.0"),
        ({"color": "red"}, "color"),
        ({"color": "#12345"}, "color"),
    ],
)
def test_create_note_invalid(tester, headers, fields, field) -> None:
    response = tester.post(url="/api/notes", json={"title": "Note", "content": "Some content", **fields}, headers=headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["errors"][0]["field"] == field


def test_get_note(tester, headers) -> None:
    note = create_note(tester, headers, title="Mine")

    response = tester.get(url=f"/api/notes/{note['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"note": note}}


def test_get_note_not_found(tester, headers) -> None:
    response = tester.get(url="/api/notes/12345", headers=headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Note not found"}


def test_get_note_invalid_id(tester, headers) -> None:
    response = tester.get(url="/api/notes/abc", headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_other_users_note_is_hidden(tester, headers) -> None:
    note = create_note(tester, headers)
    other = auth_headers(register(tester, email="other@example.com")["token"])

    assert tester.get(url=f"/api/notes/{note['id']}", headers=other).status_code == 404
    assert tester.put(url=f"/api/notes/{note['id']}", json={"title": "Hacked"}, headers=other).status_code == 404
    assert tester.patch(url=f"/api/notes/{note['id']}/pin", headers=other).status_code == 404
    assert tester.delete(url=f"/api/notes/{note['id']}", headers=other).status_code == 404
    assert tester.get(url="/api/notes", headers=other).json()["data"]["notes"] == []

    # untouched for the owner
    response = tester.get(url=f"/api/notes/{note['id']}", headers=headers)
    assert response.json()["data"]["note"]["title"] == "Note"


def test_update_note(tester, headers) -> None:
    note = create_note(tester, headers, tags=["a"])

    response = tester.put(
        url=f"/api/notes/{note['id']}",
        json={"title": "Renamed", "tags": ["b", "c"], "isArchived": True},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Note updated successfully"
    updated = body["data"]["note"]
    assert updated["title"] == "Renamed"
    assert updated["content"] == "Some content"
    assert updated["tags"] == ["b", "c"]
    assert updated["isArchived"] is True
    assert updated["createdAt"] == note["createdAt"]
    assert stamp(updated["updatedAt"]) > stamp(note["updatedAt"])


def test_update_note_invalid(tester, headers) -> None:
    note = create_note(tester, headers)

    response = tester.put(url=f"/api/notes/{note['id']}", json={"color": "blue"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "color"


def test_update_note_last_write_wins(tester, headers) -> None:
    note = create_note(tester, headers)

    tester.put(url=f"/api/notes/{note['id']}", json={"title": "First"}, headers=headers)
    tester.put(url=f"/api/notes/{note['id']}", json={"title": "Second"}, headers=headers)

    response = tester.get(url=f"/api/notes/{note['id']}", headers=headers)
    assert response.json()["data"]["note"]["title"] == "Second"


def test_delete_note(tester, headers) -> None:
    note = create_note(tester, headers)

    response = tester.delete(url=f"/api/notes/{note['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Note deleted successfully"}
    assert tester.get(url=f"/api/notes/{note['id']}", headers=headers).status_code == 404
    assert tester.delete(url=f"/api/notes/{note['id']}", headers=headers).status_code == 404
    assert tester.get(url="/api/notes", headers=headers).json()["data"]["pagination"]["totalNotes"] == 0


def test_toggle_pin(tester, headers) -> None:
    note = create_note(tester, headers)

    first = tester.patch(url=f"/api/notes/{note['id']}/pin", headers=headers)
    second = tester.patch(url=f"/api/notes/{note['id']}/pin", headers=headers)

    assert first.status_code == 200
    assert first.json()["message"] == "Note pinned successfully"
    assert first.json()["data"]["note"]["isPinned"] is True
    assert second.json()["message"] == "Note unpinned successfully"
    assert second.json()["data"]["note"]["isPinned"] is False


def test_writes_move_updated_at(tester, headers) -> None:
    note = create_note(tester, headers, tags=["a"])

    retagged = tester.put(url=f"/api/notes/{note['id']}", json={"tags": ["b"]}, headers=headers).json()["data"]["note"]
    pinned = tester.patch(url=f"/api/notes/{note['id']}/pin", headers=headers).json()["data"]["note"]
    stored = tester.get(url=f"/api/notes/{note['id']}", headers=headers).json()["data"]["note"]

    assert retagged["tags"] == ["b"]
    assert stamp(note["updatedAt"]) < stamp(retagged["updatedAt"]) < stamp(pinned["updatedAt"])
    assert stored["updatedAt"] == pinned["updatedAt"]
    assert stored["createdAt"] == note["createdAt"]
