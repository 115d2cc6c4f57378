import logging

from fastapi import Request, APIRouter, status
from sqlalchemy.exc import SQLAlchemyError

from limiter import limiter
from auth import currentUserDep
from database import sessionDep
from errors import InternalError
from models.notesmodel import NotesModel
from constants import limit_value_api, SCOPE_API
from notes_query import find_notes, get_owned_note
from schemas.baseschema import envelope
from schemas.notesschema import (
    CreateNoteSchema,
    NoteFilterSchema,
    NoteSchema,
    UpdateNoteSchema,
)

logger = logging.getLogger(__name__)

router_notes = APIRouter(prefix="/notes", tags=["Notes"])


@router_notes.get(
    "",
    description="Accepts paging, search, tag and sort parameters. Returns the caller's notes that are not deleted, with pagination info",
    summary="Get notes",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def get_notes(
    request: Request,
    session: sessionDep,
    user: currentUserDep,
    page: str | None = None,
    limit: str | None = None,
    search: str | None = None,
    tags: str | None = None,
    sortBy: str | None = None,
    sortOrder: str | None = None,
):
    filters = NoteFilterSchema(
        page=page,
        limit=limit,
        search=search,
        tags=tags,
        sort_by=sortBy,
        sort_order=sortOrder,
    )
    try:
        notes, pagination = await find_notes(session, user.id, filters)
    except SQLAlchemyError as e:
        raise InternalError("Server error retrieving notes") from e

    logger.info(
        "Notes retrieved user_id=%s total=%s page=%s limit=%s",
        user.id,
        pagination.total_notes,
        filters.page,
        filters.limit,
    )

    return envelope(
        {
            "notes": [NoteSchema.serialize(note) for note in notes],
            "pagination": pagination.model_dump(by_alias=True),
        }
    )


@router_notes.get(
    "/{note_id}",
    description="Accepts note id. Returns the note if the caller owns it and it is not deleted",
    summary="Get note",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def get_note(note_id: int, request: Request, session: sessionDep, user: currentUserDep):
    note = await get_owned_note(session, user.id, note_id)
    return envelope({"note": NoteSchema.serialize(note)})


@router_notes.post(
    "",
    status_code=status.HTTP_201_CREATED,
    description="Accepts note object. Creates the note for the caller and returns it",
    summary="Create new note",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def create_new_note(
    createNote: CreateNoteSchema,
    request: Request,
    session: sessionDep,
    user: currentUserDep,
):
    try:
        new_note = NotesModel(
            user_id=user.id,
            title=createNote.title,
            content=createNote.content,
            tags=createNote.tags,
            color=createNote.color,
            is_pinned=createNote.is_pinned,
            is_archived=createNote.is_archived,
        )
        session.add(new_note)
        await session.commit()
    except SQLAlchemyError as e:
        raise InternalError("Server error creating note") from e

    logger.info("Note created note_id=%s user_id=%s", new_note.id, user.id)

    return envelope({"note": NoteSchema.serialize(new_note)}, "Note created successfully")


@router_notes.put(
    "/{note_id}",
    description="Accepts note id and the fields to change. Returns the updated note",
    summary="Update note",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def update_note(
    note_id: int,
    updateNote: UpdateNoteSchema,
    request: Request,
    session: sessionDep,
    user: currentUserDep,
):
    note = await get_owned_note(session, user.id, note_id)
    try:
        # last write wins, there is no version check
        for field, value in updateNote.model_dump(exclude_none=True).items():
            setattr(note, field, value)
        await session.commit()
    except SQLAlchemyError as e:
        raise InternalError("Server error updating note") from e

    logger.info("Note updated note_id=%s user_id=%s", note.id, user.id)

    return envelope({"note": NoteSchema.serialize(note)}, "Note updated successfully")


@router_notes.delete(
    "/{note_id}",
    description="Accepts note id. Marks the note as deleted, the row is kept",
    summary="Delete note",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def delete_note(note_id: int, request: Request, session: sessionDep, user: currentUserDep):
    note = await get_owned_note(session, user.id, note_id)
    try:
        note.is_deleted = True
        await session.commit()
    except SQLAlchemyError as e:
        raise InternalError("Server error deleting note") from e

    logger.info("Note deleted note_id=%s user_id=%s", note.id, user.id)

    return envelope(message="Note deleted successfully")


@router_notes.patch(
    "/{note_id}/pin",
    description="Accepts note id. Flips the pinned flag and returns the note",
    summary="Toggle note pin",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def toggle_pin(note_id: int, request: Request, session: sessionDep, user: currentUserDep):
    note = await get_owned_note(session, user.id, note_id)
    try:
        note.is_pinned = not note.is_pinned
        await session.commit()
    except SQLAlchemyError as e:
        raise InternalError("Server error toggling pin status") from e

    logger.info("Note pin toggled note_id=%s user_id=%s is_pinned=%s", note.id, user.id, note.is_pinned)

    state = "pinned" if note.is_pinned else "unpinned"
    return envelope({"note": NoteSchema.serialize(note)}, f"Note {state} successfully")
