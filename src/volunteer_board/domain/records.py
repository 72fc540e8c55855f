"""Domain models for volunteer records and their comments."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from uuid import uuid4

MAX_PHOTOS = 10


@dataclass(frozen=True)
class PendingCommentId:
    """Client-side id for a comment the store has not echoed back yet."""

    token: str = field(default_factory=lambda: uuid4().hex)

    def __str__(self) -> str:
        return f"pending-{self.token}"


@dataclass(frozen=True)
class Comment:
    """A reply attached to exactly one record."""

    id: int | PendingCommentId
    record_id: int
    nickname: str
    password: str
    content: str
    timestamp: str
    created_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        """Return True for an optimistically appended comment."""
        return isinstance(self.id, PendingCommentId)


@dataclass(frozen=True)
class Record:
    """A logged volunteer-activity session."""

    id: int
    date: date
    name: str
    organization: str
    hours: float
    author_name: str
    author_password: str
    location: str | None = None
    participants: str | None = None
    description: str | None = None
    photos: tuple[str, ...] = ()
    created_at: datetime | None = None
    comments: tuple[Comment, ...] = ()

    def with_comments(self, comments: tuple[Comment, ...]) -> "Record":
        """Return a copy carrying the given comment thread."""
        return replace(self, comments=comments)


@dataclass(frozen=True)
class RecordFields:
    """Validated editable fields of a record, as written to the store."""

    date: date
    name: str
    organization: str
    hours: float
    location: str | None = None
    participants: str | None = None
    description: str | None = None
    photos: tuple[str, ...] = ()


@dataclass
class RecordDraft:
    """Working copy of a record's editable fields for the create/edit dialogs."""

    date: str = field(default_factory=lambda: date.today().isoformat())
    name: str = ""
    organization: str = ""
    hours: str = ""
    location: str = ""
    participants: str = ""
    description: str = ""
    author_name: str = ""
    author_password: str = ""
    photos: list[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Record) -> "RecordDraft":
        """Copy a record into a draft for editing, leaving the password blank."""
        return cls(
            date=record.date.isoformat(),
            name=record.name,
            organization=record.organization,
            hours=_format_hours(record.hours),
            location=record.location or "",
            participants=record.participants or "",
            description=record.description or "",
            author_name=record.author_name,
            author_password="",
            photos=list(record.photos),
        )


def format_activity_date(value: date) -> str:
    """Render an activity date the way the board shows it (2024년 3월 1일)."""
    return f"{value.year}년 {value.month}월 {value.day}일"


def format_comment_timestamp(moment: datetime) -> str:
    """Render a moment like the ko-KR locale string (2024. 3. 1. 오후 2:05:09)."""
    meridiem = "오전" if moment.hour < 12 else "오후"  # noqa: PLR2004
    hour = moment.hour % 12 or 12
    return (
        f"{moment.year}. {moment.month}. {moment.day}. "
        f"{meridiem} {hour}:{moment.minute:02d}:{moment.second:02d}"
    )


def _format_hours(hours: float) -> str:
    if float(hours).is_integer():
        return str(int(hours))
    return str(hours)
