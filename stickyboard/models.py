"""Wire models for the StickyBoard API.

Pydantic v2 models mirroring the backend's JSON.  Python attributes are
snake_case; the wire uses camelCase via the alias generator, and
``populate_by_name`` lets callers construct models with either spelling.

Two decode rules apply across every model:

- **Dates** accept ISO-8601 (with or without fractional seconds, with an
  offset or ``Z``) and fall back to the legacy ``YYYY-MM-DD HH:MM:SS``
  format, read as UTC.  Outgoing dates are ISO-8601 UTC with milliseconds.
- **Int enums** accept the raw integer or a numeric string (``"2"``).
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Annotated, Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, JsonValue, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

LEGACY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Servers emit up to 7 fractional digits; datetime stores microseconds
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_api_datetime(value: Any) -> Any:
    """Parse an incoming date string; non-strings pass through untouched."""
    if not isinstance(value, str):
        return value

    try:
        parsed = datetime.fromisoformat(_LONG_FRACTION.sub(r"\1", value))
    except ValueError:
        parsed = None
    if parsed is not None and parsed.tzinfo is not None:
        return parsed

    try:
        return datetime.strptime(value, LEGACY_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        raise ValueError(f"Unrecognized date: {value}") from None


def format_api_datetime(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. ``2024-01-15T10:30:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


ApiDatetime = Annotated[
    datetime,
    BeforeValidator(parse_api_datetime),
    PlainSerializer(format_api_datetime, return_type=str, when_used="json"),
]

# ---------------------------------------------------------------------------
# Tolerant int enums
# ---------------------------------------------------------------------------

_NUMERIC = re.compile(r"[+-]?\d+")


def tolerant_int(value: Any) -> Any:
    """Accept an int or a numeric string for an int enum field."""
    if isinstance(value, Enum):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot decode enum from boolean {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _NUMERIC.fullmatch(value):
        return int(value)
    raise ValueError(f"Cannot decode enum from {value!r}")


class ErrorCode(IntEnum):
    SERVER_ERROR = 0
    AUTH_INVALID = 1
    AUTH_EXPIRED = 2
    NOT_FOUND = 3
    FORBIDDEN = 4
    VALIDATION_ERROR = 5


class UserRole(IntEnum):
    USER = 0
    ADMIN = 1
    MODERATOR = 2


class OrgRole(IntEnum):
    OWNER = 0
    ADMIN = 1
    MODERATOR = 2
    MEMBER = 3
    GUEST = 4


class BoardRole(IntEnum):
    OWNER = 0
    EDITOR = 1
    COMMENTER = 2
    VIEWER = 3


class BoardVisibility(IntEnum):
    PRIVATE = 0
    SHARED = 1
    PUBLIC = 2


class TabScope(IntEnum):
    BOARD = 0
    SECTION = 1


class TabType(IntEnum):
    BOARD = 0
    CALENDAR = 1
    TIMELINE = 2
    KANBAN = 3
    WHITEBOARD = 4
    CHAT = 5
    METRICS = 6
    CUSTOM = 7


class CardType(IntEnum):
    NOTE = 0
    TASK = 1
    EVENT = 2
    DRAWING = 3


class CardStatus(IntEnum):
    OPEN = 0
    IN_PROGRESS = 1
    BLOCKED = 2
    DONE = 3
    ARCHIVED = 4


ErrorCodeField = Annotated[ErrorCode, BeforeValidator(tolerant_int)]
UserRoleField = Annotated[UserRole, BeforeValidator(tolerant_int)]
BoardVisibilityField = Annotated[BoardVisibility, BeforeValidator(tolerant_int)]
TabTypeField = Annotated[TabType, BeforeValidator(tolerant_int)]
CardTypeField = Annotated[CardType, BeforeValidator(tolerant_int)]
CardStatusField = Annotated[CardStatus, BeforeValidator(tolerant_int)]

# ---------------------------------------------------------------------------
# Envelope and error payload
# ---------------------------------------------------------------------------


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Standard ``{success, message, data}`` response wrapper."""

    success: bool
    message: str | None = None
    data: T | None = None


class ErrorPayload(WireModel):
    code: ErrorCodeField
    message: str
    details: str | None = None


class IdResponse(WireModel):
    id: UUID


class SuccessResponse(WireModel):
    success: bool


# ---------------------------------------------------------------------------
# Users & auth
# ---------------------------------------------------------------------------


class UserDto(WireModel):
    id: UUID
    email: str
    display_name: str
    avatar_url: str | None = None
    role: UserRoleField


class UserSelfDto(WireModel):
    id: UUID
    email: str
    display_name: str
    avatar_url: str | None = None
    prefs: JsonValue = None
    created_at: ApiDatetime


class UserUpdateDto(WireModel):
    display_name: str | None = None
    avatar_url: str | None = None
    prefs: JsonValue = None


class ChangePasswordDto(WireModel):
    old_password: str
    new_password: str


class AuthLoginRequest(WireModel):
    email: str
    password: str


class AuthLoginResponse(WireModel):
    access_token: str
    refresh_token: str
    user: UserSelfDto


class AuthRefreshRequest(WireModel):
    refresh_token: str


class AuthRefreshResponse(WireModel):
    access_token: str
    refresh_token: str


class RegisterRequestDto(WireModel):
    email: str
    password: str
    display_name: str
    invite_token: str | None = None


class RegisterResponseDto(WireModel):
    access_token: str
    refresh_token: str
    user: UserSelfDto


# ---------------------------------------------------------------------------
# Boards
# ---------------------------------------------------------------------------


class BoardDto(WireModel):
    id: UUID
    title: str
    visibility: BoardVisibilityField
    owner_id: UUID
    org_id: UUID | None = None
    folder_id: UUID | None = None
    theme: JsonValue = None
    meta: JsonValue = None
    created_at: ApiDatetime
    updated_at: ApiDatetime


class BoardCreateDto(WireModel):
    title: str
    visibility: BoardVisibility = BoardVisibility.PRIVATE
    org_id: UUID | None = None
    folder_id: UUID | None = None
    theme: JsonValue = None
    meta: JsonValue = None


class BoardUpdateDto(WireModel):
    title: str | None = None
    visibility: BoardVisibility | None = None
    folder_id: UUID | None = None
    theme: JsonValue = None
    meta: JsonValue = None


class RenameBoardDto(WireModel):
    title: str


class MoveBoardFolderDto(WireModel):
    folder_id: UUID | None = None


class MoveBoardOrgDto(WireModel):
    org_id: UUID | None = None


# ---------------------------------------------------------------------------
# Tabs & sections
# ---------------------------------------------------------------------------


class TabDto(WireModel):
    id: UUID
    board_id: UUID
    title: str
    tab_type: TabTypeField
    position: int
    layout: JsonValue = None


class TabCreateDto(WireModel):
    board_id: UUID
    title: str
    tab_type: TabType = TabType.BOARD
    position: int = 0
    layout: JsonValue = None


class TabUpdateDto(WireModel):
    title: str | None = None
    tab_type: TabType | None = None
    position: int
    layout: JsonValue = None


class TabMoveDto(WireModel):
    new_position: int


class SectionDto(WireModel):
    id: UUID
    tab_id: UUID
    parent_section_id: UUID | None = None
    title: str
    position: int
    layout: JsonValue = None


class SectionCreateDto(WireModel):
    tab_id: UUID
    parent_section_id: UUID | None = None
    title: str
    position: int = 0
    layout: JsonValue = None


class SectionUpdateDto(WireModel):
    title: str | None = None
    position: int
    parent_section_id: UUID | None = None
    layout: JsonValue = None


class SectionMoveDto(WireModel):
    new_position: int
    parent_section_id: UUID | None = None


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


class CardDto(WireModel):
    id: UUID
    board_id: UUID
    tab_id: UUID
    section_id: UUID | None = None
    type: CardTypeField
    title: str | None = None
    content: JsonValue = None
    ink_data: JsonValue = None  # opaque; drawing data is not interpreted here
    tags: list[str] = []
    status: CardStatusField
    priority: int
    assignee_id: UUID | None = None
    due_date: ApiDatetime | None = None
    start_time: ApiDatetime | None = None
    end_time: ApiDatetime | None = None
    updated_at: ApiDatetime


class CardCreateDto(WireModel):
    board_id: UUID
    tab_id: UUID
    section_id: UUID | None = None
    type: CardType = CardType.NOTE
    title: str | None = None
    content: JsonValue = None
    ink_data: JsonValue = None
    tags: list[str] | None = None
    priority: int = 0
    assignee_id: UUID | None = None
    due_date: ApiDatetime | None = None


class CardUpdateDto(WireModel):
    title: str | None = None
    content: JsonValue = None
    ink_data: JsonValue = None
    tags: list[str] | None = None
    status: CardStatus | None = None
    priority: int
    assignee_id: UUID | None = None
    due_date: ApiDatetime | None = None
    start_time: ApiDatetime | None = None
    end_time: ApiDatetime | None = None
    section_id: UUID | None = None
    tab_id: UUID | None = None
