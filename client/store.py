import asyncio
import logging
from dataclasses import replace
from typing import Any

from client.api import APIError, NotesAPI
from client.debounce import Debouncer
from client.state import (
    ADD_NOTE,
    CLEAR_CURRENT_NOTE,
    CLEAR_ERROR,
    DELETE_NOTE,
    SET_CURRENT_NOTE,
    SET_ERROR,
    SET_FILTERS,
    SET_LOADING,
    SET_NOTES,
    UPDATE_NOTE,
    Action,
    NotesState,
    notes_reducer,
)

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.5


class NotesStore:
    """Keeps a NotesState in sync with the API.

    Every operation returns ``{"success": bool, ...}`` and never raises for
    API failures; the failure message is stored in ``state.error`` instead.
    Responses are applied in the order they arrive.
    """

    def __init__(self, api: NotesAPI, search_delay: float = SEARCH_DEBOUNCE_SECONDS) -> None:
        self.api = api
        self.state = NotesState()
        self._search = Debouncer(search_delay)

    def dispatch(self, action: Action) -> NotesState:
        self.state = notes_reducer(self.state, action)
        return self.state

    def _fail(self, error: APIError, default: str) -> dict[str, Any]:
        message = error.message or default
        logger.debug("Store action failed status=%s message=%s", error.status_code, message)
        self.dispatch(Action(SET_ERROR, message))
        return {"success": False, "error": message}

    async def fetch_notes(self, page: int = 1, **filters: Any) -> dict[str, Any]:
        """Load one page using the stored filters, overridden by `filters`"""
        self.dispatch(Action(SET_LOADING, True))
        effective = replace(self.state.filters, **filters) if filters else self.state.filters
        params = {"page": page, **effective.to_params()}
        try:
            body = await self.api.get_notes(params)
        except APIError as e:
            return self._fail(e, "Failed to fetch notes")

        data = body["data"]
        self.dispatch(Action(SET_NOTES, {"notes": data["notes"], "pagination": data["pagination"]}))
        return {"success": True}

    async def fetch_note(self, note_id: int) -> dict[str, Any]:
        self.dispatch(Action(SET_LOADING, True))
        try:
            body = await self.api.get_note(note_id)
        except APIError as e:
            return self._fail(e, "Failed to fetch note")

        note = body["data"]["note"]
        self.dispatch(Action(SET_CURRENT_NOTE, note))
        return {"success": True, "note": note}

    async def create_note(self, data: dict[str, Any]) -> dict[str, Any]:
        self.dispatch(Action(SET_LOADING, True))
        try:
            body = await self.api.create_note(data)
        except APIError as e:
            return self._fail(e, "Failed to create note")

        note = body["data"]["note"]
        self.dispatch(Action(ADD_NOTE, note))
        return {"success": True, "note": note}

    async def update_note(self, note_id: int, data: dict[str, Any]) -> dict[str, Any]:
        self.dispatch(Action(SET_LOADING, True))
        try:
            body = await self.api.update_note(note_id, data)
        except APIError as e:
            return self._fail(e, "Failed to update note")

        note = body["data"]["note"]
        self.dispatch(Action(UPDATE_NOTE, note))
        return {"success": True, "note": note}

    async def delete_note(self, note_id: int) -> dict[str, Any]:
        self.dispatch(Action(SET_LOADING, True))
        try:
            await self.api.delete_note(note_id)
        except APIError as e:
            return self._fail(e, "Failed to delete note")

        self.dispatch(Action(DELETE_NOTE, note_id))
        return {"success": True}

    async def toggle_pin(self, note_id: int) -> dict[str, Any]:
        try:
            body = await self.api.toggle_pin(note_id)
        except APIError as e:
            return self._fail(e, "Failed to toggle pin")

        note = body["data"]["note"]
        self.dispatch(Action(UPDATE_NOTE, note))
        return {"success": True, "note": note}

    async def set_filters(self, **filters: Any) -> dict[str, Any]:
        """Commit filter changes and reload from the first page"""
        self.dispatch(Action(SET_FILTERS, filters))
        return await self.fetch_notes(1)

    def search(self, term: str) -> asyncio.Task:
        """Debounced search, only the last term typed within the delay is fetched"""
        return self._search.call(self.set_filters, search=term)

    def clear_error(self) -> None:
        self.dispatch(Action(CLEAR_ERROR))

    def clear_current_note(self) -> None:
        self.dispatch(Action(CLEAR_CURRENT_NOTE))
