"""Owner scoped note lookups: filtering, sorting and pagination of a user's notes."""

import logging

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from errors import NotFoundError
from models.notesmodel import NotesModel, NoteTagModel
from schemas.notesschema import NoteFilterSchema, PaginationSchema

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "createdAt": NotesModel.created_at,
    "updatedAt": NotesModel.updated_at,
    "title": NotesModel.title,
}


def owned_notes(uid: int) -> list[ColumnElement[bool]]:
    """Notes visible to their owner: owned by uid and not soft deleted"""
    return [NotesModel.user_id == uid, NotesModel.is_deleted.is_(False)]


def note_predicates(uid: int, filters: NoteFilterSchema) -> list[ColumnElement[bool]]:
    predicates = owned_notes(uid)

    if filters.search:
        predicates.append(
            or_(
                NotesModel.title.icontains(filters.search, autoescape=True),
                NotesModel.content.icontains(filters.search, autoescape=True),
            )
        )

    # any of the requested tags
    if filters.tags:
        predicates.append(NotesModel.tag_rows.any(NoteTagModel.name.in_(filters.tags)))

    return predicates


def build_notes_query(uid: int, filters: NoteFilterSchema) -> tuple[Select, Select]:
    """Page query and matching count query for the given filters"""
    predicates = note_predicates(uid, filters)

    column = SORT_COLUMNS[filters.sort_by]
    order = column.asc() if filters.sort_order == "asc" else column.desc()

    query = (
        select(NotesModel)
        .where(*predicates)
        .order_by(order, NotesModel.id.asc())
        .offset(filters.offset)
        .limit(filters.limit)
    )
    count_query = select(func.count(NotesModel.id)).where(*predicates)
    return query, count_query


async def find_notes(
    session: AsyncSession, uid: int, filters: NoteFilterSchema
) -> tuple[list[NotesModel], PaginationSchema]:
    query, count_query = build_notes_query(uid, filters)

    total = (await session.execute(count_query)).scalar_one()
    notes = list((await session.execute(query)).scalars().all())

    return notes, PaginationSchema.build(total, filters.page, filters.limit)


async def get_owned_note(session: AsyncSession, uid: int, note_id: int) -> NotesModel:
    query = select(NotesModel).where(NotesModel.id == note_id, *owned_notes(uid))
    note = (await session.execute(query)).scalar_one_or_none()

    if note is None:
        logger.warning("Note not found note_id=%s user_id=%s", note_id, uid)
        raise NotFoundError("Note not found")
    return note
