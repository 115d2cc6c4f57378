from math import ceil
from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field, StringConstraints, field_validator

from constants import (
    COLOR_PATTERN,
    CONTENT_MAX_LENGTH,
    DEFAULT_COLOR,
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    MAX_PAGING_VALUE,
    SORT_FIELDS,
    TAG_MAX_LENGTH,
    TAGS_MAX_COUNT,
    TITLE_MAX_LENGTH,
)
from schemas.baseschema import CamelSchema, UTCDateTime

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=CONTENT_MAX_LENGTH)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TAG_MAX_LENGTH)]
Tags = Annotated[list[Tag], Field(max_length=TAGS_MAX_COUNT)]
Color = Annotated[str, StringConstraints(pattern=COLOR_PATTERN)]


class CreateNoteSchema(CamelSchema):
    title: Title
    content: Content
    tags: Tags = Field(default_factory=list)
    color: Color = DEFAULT_COLOR
    is_pinned: bool = False
    is_archived: bool = False


class UpdateNoteSchema(CamelSchema):
    """Partial update, fields left out (or null) keep their value"""

    title: Title | None = None
    content: Content | None = None
    tags: Tags | None = None
    color: Color | None = None
    is_pinned: bool | None = None
    is_archived: bool | None = None


class NoteSchema(CamelSchema):
    id: int
    user_id: int | None
    title: str
    content: str
    tags: list[str]
    color: str
    is_pinned: bool
    is_archived: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if 1 <= number <= MAX_PAGING_VALUE else default


class NoteFilterSchema(CamelSchema):
    """Listing parameters, coerced to sane values instead of being rejected"""

    model_config = ConfigDict(frozen=True)

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: str | None = None
    tags: list[str] = Field(default_factory=list)
    sort_by: Literal["createdAt", "updatedAt", "title"] = DEFAULT_SORT_BY
    sort_order: Literal["asc", "desc"] = DEFAULT_SORT_ORDER

    @field_validator("page", mode="before")
    @classmethod
    def _coerce_page(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_PAGE)

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_LIMIT)

    @field_validator("search", mode="before")
    @classmethod
    def _coerce_search(cls, value: Any) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [str(tag).strip() for tag in value if str(tag).strip()]

    @field_validator("sort_by", mode="before")
    @classmethod
    def _coerce_sort_by(cls, value: Any) -> str:
        return value if value in SORT_FIELDS else DEFAULT_SORT_BY

    @field_validator("sort_order", mode="before")
    @classmethod
    def _coerce_sort_order(cls, value: Any) -> str:
        value = str(value).lower() if value is not None else ""
        return value if value in ("asc", "desc") else DEFAULT_SORT_ORDER

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationSchema(CamelSchema):
    current_page: int
    total_pages: int
    total_notes: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PaginationSchema":
        total_pages = ceil(total / limit) if total else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_notes=total,
            has_next=page < total_pages,
            has_prev=page > 1 and total > 0,
        )
