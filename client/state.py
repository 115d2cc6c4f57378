"""Client side notes state and the reducer that updates it.

The state is immutable: every action produces a new ``NotesState`` and the
previous one is left untouched, so views can compare snapshots cheaply.
Notes are kept as the JSON dicts returned by the API (camelCase keys).
"""

from dataclasses import dataclass, field, replace
from typing import Any

SET_LOADING = "SET_LOADING"
SET_ERROR = "SET_ERROR"
SET_NOTES = "SET_NOTES"
ADD_NOTE = "ADD_NOTE"
UPDATE_NOTE = "UPDATE_NOTE"
DELETE_NOTE = "DELETE_NOTE"
SET_CURRENT_NOTE = "SET_CURRENT_NOTE"
CLEAR_CURRENT_NOTE = "CLEAR_CURRENT_NOTE"
SET_FILTERS = "SET_FILTERS"
CLEAR_ERROR = "CLEAR_ERROR"


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


@dataclass(frozen=True)
class Pagination:
    current_page: int = 1
    total_pages: int = 1
    total_notes: int = 0
    has_next: bool = False
    has_prev: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Pagination":
        return cls(
            current_page=data.get("currentPage", 1),
            total_pages=data.get("totalPages", 0),
            total_notes=data.get("totalNotes", 0),
            has_next=data.get("hasNext", False),
            has_prev=data.get("hasPrev", False),
        )


@dataclass(frozen=True)
class Filters:
    search: str = ""
    tags: tuple[str, ...] = ()
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    def to_params(self) -> dict[str, str]:
        params = {"sortBy": self.sort_by, "sortOrder": self.sort_order}
        if self.search:
            params["search"] = self.search
        if self.tags:
            params["tags"] = ",".join(self.tags)
        return params


@dataclass(frozen=True)
class NotesState:
    notes: tuple[dict[str, Any], ...] = ()
    current_note: dict[str, Any] | None = None
    loading: bool = False
    error: str | None = None
    pagination: Pagination = field(default_factory=Pagination)
    filters: Filters = field(default_factory=Filters)


def _same_note(note: dict[str, Any] | None, note_id: Any) -> bool:
    return note is not None and note.get("id") == note_id


def notes_reducer(state: NotesState, action: Action) -> NotesState:
    payload = action.payload

    if action.type == SET_LOADING:
        return replace(state, loading=bool(payload))

    if action.type == SET_ERROR:
        return replace(state, error=payload, loading=False)

    if action.type == SET_NOTES:
        pagination = payload["pagination"]
        if isinstance(pagination, dict):
            pagination = Pagination.from_api(pagination)
        return replace(
            state,
            notes=tuple(payload["notes"]),
            pagination=pagination,
            loading=False,
            error=None,
        )

    if action.type == ADD_NOTE:
        return replace(
            state,
            notes=(payload, *state.notes),
            pagination=replace(state.pagination, total_notes=state.pagination.total_notes + 1),
            loading=False,
        )

    if action.type == UPDATE_NOTE:
        note_id = payload.get("id")
        current = payload if _same_note(state.current_note, note_id) else state.current_note
        return replace(
            state,
            notes=tuple(payload if _same_note(note, note_id) else note for note in state.notes),
            current_note=current,
            loading=False,
        )

    if action.type == DELETE_NOTE:
        current = None if _same_note(state.current_note, payload) else state.current_note
        return replace(
            state,
            notes=tuple(note for note in state.notes if not _same_note(note, payload)),
            pagination=replace(state.pagination, total_notes=max(state.pagination.total_notes - 1, 0)),
            current_note=current,
            loading=False,
        )

    if action.type == SET_CURRENT_NOTE:
        return replace(state, current_note=payload, loading=False)

    if action.type == CLEAR_CURRENT_NOTE:
        return replace(state, current_note=None)

    if action.type == SET_FILTERS:
        changes = dict(payload)
        if "tags" in changes:
            changes["tags"] = tuple(changes["tags"])
        return replace(state, filters=replace(state.filters, **changes))

    if action.type == CLEAR_ERROR:
        return replace(state, error=None)

    return state
