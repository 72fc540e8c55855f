"""View-state types for the board: the screen and the single modal slot."""

from dataclasses import dataclass, field
from enum import Enum

from volunteer_board.domain.records import Comment, Record, RecordDraft


class SortOrder(Enum):
    """Presentation ordering of records by activity date."""

    NEWEST = "newest"
    OLDEST = "oldest"


@dataclass(frozen=True)
class Listing:
    """The record list screen."""


@dataclass(frozen=True)
class Viewing:
    """The detail screen for one selected record."""

    record: Record


Screen = Listing | Viewing


@dataclass
class CreateDialog:
    """Create dialog with its working draft."""

    draft: RecordDraft = field(default_factory=RecordDraft)


@dataclass
class EditDialog:
    """Edit dialog; the password must match the target's author password."""

    target: Record
    draft: RecordDraft
    password: str = ""


@dataclass
class AdminDeleteDialog:
    """Record deletion confirmation gated by the admin password."""

    record_id: int
    password: str = ""


@dataclass
class CommentDeleteDialog:
    """Comment deletion confirmation gated by the comment's password."""

    comment: Comment
    password: str = ""


Modal = CreateDialog | EditDialog | AdminDeleteDialog | CommentDeleteDialog


@dataclass(frozen=True)
class ActionResult:
    """User-facing outcome of a board action."""

    ok: bool
    message: str
    error: Exception | None = None
