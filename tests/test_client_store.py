from contextlib import asynccontextmanager

import httpx
import pytest

from client.api import APIError, NotesAPI
from client.store import NotesStore


@asynccontextmanager
async def notes_api(app, db):
    # ASGITransport skips the lifespan
    await db.create_all_tables()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        api = NotesAPI(client)
        await api.register("Client User", "client@example.com", "secret123")
        yield api
    await db.dispose()


@pytest.mark.asyncio
async def test_api_keeps_token(app, db) -> None:
    async with notes_api(app, db) as api:
        assert api.token

        me = await api.me()

        assert me["data"]["user"]["email"] == "client@example.com"


@pytest.mark.asyncio
async def test_api_error_carries_server_message(app, db) -> None:
    async with notes_api(app, db) as api:
        api.set_token(None)

        with pytest.raises(APIError) as exc:
            await api.get_notes()

        assert exc.value.status_code == 401
        assert exc.value.message == "Access denied. No token provided."


@pytest.mark.asyncio
async def test_api_validation_errors(app, db) -> None:
    async with notes_api(app, db) as api:
        with pytest.raises(APIError) as exc:
            await api.create_note({"title": "", "content": "x"})

        assert exc.value.status_code == 400
        assert exc.value.errors[0]["field"] == "title"


@pytest.mark.asyncio
async def test_store_crud_flow(app, db) -> None:
    async with notes_api(app, db) as api:
        store = NotesStore(api)

        created = await store.create_note({"title": "first", "content": "body", "tags": ["a"]})
        assert created["success"] is True
        note_id = created["note"]["id"]
        assert store.state.notes[0]["id"] == note_id
        assert store.state.pagination.total_notes == 1
        assert store.state.loading is False

        fetched = await store.fetch_note(note_id)
        assert fetched["success"] is True
        assert store.state.current_note["title"] == "first"

        updated = await store.update_note(note_id, {"title": "renamed"})
        assert updated["success"] is True
        assert store.state.notes[0]["title"] == "renamed"
        assert store.state.current_note["title"] == "renamed"

        pinned = await store.toggle_pin(note_id)
        assert pinned["note"]["isPinned"] is True
        assert store.state.notes[0]["isPinned"] is True

        deleted = await store.delete_note(note_id)
        assert deleted == {"success": True}
        assert store.state.notes == ()
        assert store.state.current_note is None
        assert store.state.pagination.total_notes == 0


@pytest.mark.asyncio
async def test_store_fetch_notes_with_filters(app, db) -> None:
    async with notes_api(app, db) as api:
        for title, tags in (("milk", ["home"]), ("report", ["work"]), ("bread", ["home"])):
            await api.create_note({"title": title, "content": "body", "tags": tags})
        store = NotesStore(api)

        result = await store.set_filters(tags=["home"], sort_by="title", sort_order="asc")

        assert result == {"success": True}
        assert [note["title"] for note in store.state.notes] == ["bread", "milk"]
        assert store.state.pagination.total_notes == 2
        assert store.state.pagination.current_page == 1

        # per call overrides leave the stored filters alone
        await store.fetch_notes(1, tags=())
        assert len(store.state.notes) == 3
        assert store.state.filters.tags == ("home",)


@pytest.mark.asyncio
async def test_store_debounced_search(app, db) -> None:
    async with notes_api(app, db) as api:
        for title in ("apple pie", "apple juice", "banana"):
            await api.create_note({"title": title, "content": "body"})
        store = NotesStore(api, search_delay=0.05)

        first = store.search("b")
        last = store.search("apple")
        result = await last

        assert result == {"success": True}
        assert first.cancelled()
        assert store.state.filters.search == "apple"
        assert sorted(note["title"] for note in store.state.notes) == ["apple juice", "apple pie"]


@pytest.mark.asyncio
async def test_store_records_errors(app, db) -> None:
    async with notes_api(app, db) as api:
        store = NotesStore(api)

        result = await store.fetch_note(9999)

        assert result == {"success": False, "error": "Note not found"}
        assert store.state.error == "Note not found"
        assert store.state.loading is False

        store.clear_error()
        assert store.state.error is None


@pytest.mark.asyncio
async def test_store_default_error_message(app, db) -> None:
    async with notes_api(app, db) as api:
        store = NotesStore(api)

        async def unreachable(*args, **kwargs):
            raise APIError(None)

        api.get_notes = unreachable
        result = await store.fetch_notes()

        assert result == {"success": False, "error": "Failed to fetch notes"}
        assert store.state.error == "Failed to fetch notes"
