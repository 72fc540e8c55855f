"""Gated board mutations: validation, password checks and cascade delete."""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime

from volunteer_board.domain.records import (
    MAX_PHOTOS,
    Comment,
    PendingCommentId,
    Record,
    RecordDraft,
    RecordFields,
    format_comment_timestamp,
)
from volunteer_board.errors import AuthorizationError, ValidationError
from volunteer_board.services.records import RecordRepository

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please fill in all required fields."
MISSING_COMMENT_MESSAGE = "Please enter a nickname, password and comment."
WRONG_PASSWORD_MESSAGE = "The password is incorrect."
WRONG_ADMIN_PASSWORD_MESSAGE = "The admin password is incorrect."


@dataclass
class BoardService:
    """Validates and performs record and comment mutations."""

    repository: RecordRepository
    admin_password: str

    async def create_record(self, draft: RecordDraft) -> Record | None:
        """Validate a draft and insert it as a new record."""
        if not draft.author_name or not draft.author_password:
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        fields = validate_draft(draft)
        record = await self.repository.create_record(
            fields,
            author_name=draft.author_name,
            author_password=draft.author_password,
        )
        logger.info("Created record", extra={"record_name": fields.name})
        return record

    async def update_record(
        self, target: Record, draft: RecordDraft, password: str
    ) -> None:
        """Replace a record's editable fields after the author password check."""
        if password != target.author_password:
            raise AuthorizationError(WRONG_PASSWORD_MESSAGE)
        fields = validate_draft(draft)
        await self.repository.update_record(target.id, fields)
        logger.info("Updated record", extra={"record_id": target.id})

    def authorize_admin(self, admin_password: str) -> None:
        """Raise unless the entered password equals the admin secret."""
        if admin_password != self.admin_password:
            raise AuthorizationError(WRONG_ADMIN_PASSWORD_MESSAGE)

    async def delete_record(self, record_id: int, admin_password: str) -> None:
        """Delete a record and its comments, comments first."""
        self.authorize_admin(admin_password)
        await self.repository.delete_comments_for_record(record_id)
        await self.repository.delete_record(record_id)
        logger.info("Deleted record", extra={"record_id": record_id})

    async def add_comment(  # noqa: PLR0913
        self,
        record_id: int,
        nickname: str,
        password: str,
        content: str,
        now: datetime | None = None,
    ) -> Comment:
        """Validate and insert a comment on a record.

        Nickname and content are stored trimmed; the password is stored as
        entered. When the store does not echo the row back, the returned
        comment carries a pending id.
        """
        nickname = nickname.strip()
        content = content.strip()
        if not nickname or not password.strip() or not content:
            raise ValidationError(MISSING_COMMENT_MESSAGE)
        timestamp = format_comment_timestamp(now or datetime.now())
        created = await self.repository.create_comment(
            record_id=record_id,
            nickname=nickname,
            password=password,
            content=content,
            timestamp=timestamp,
        )
        logger.info("Added comment", extra={"record_id": record_id})
        if created is not None:
            return created
        return Comment(
            id=PendingCommentId(),
            record_id=record_id,
            nickname=nickname,
            password=password,
            content=content,
            timestamp=timestamp,
        )

    async def delete_comment(self, comment: Comment, password: str) -> None:
        """Delete a comment after its password check."""
        if password != comment.password:
            raise AuthorizationError(WRONG_PASSWORD_MESSAGE)
        if isinstance(comment.id, PendingCommentId):
            raise ValidationError("This comment is still being saved.")
        await self.repository.delete_comment(comment.id)
        logger.info("Deleted comment", extra={"comment_id": comment.id})


def validate_draft(draft: RecordDraft) -> RecordFields:
    """Check the required fields of a draft and convert it to record fields."""
    if not draft.date or not draft.name or not draft.organization or not draft.hours:
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    try:
        activity_date = date.fromisoformat(draft.date)
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {draft.date}") from exc
    hours = _parse_hours(draft.hours)
    if len(draft.photos) > MAX_PHOTOS:
        raise ValidationError(f"At most {MAX_PHOTOS} photos can be attached.")
    return RecordFields(
        date=activity_date,
        name=draft.name,
        organization=draft.organization,
        hours=hours,
        location=draft.location or None,
        participants=draft.participants or None,
        description=draft.description or None,
        photos=tuple(draft.photos),
    )


def _parse_hours(raw: str) -> float:
    try:
        hours = float(raw.strip())
    except ValueError as exc:
        raise ValidationError("Hours must be a number.") from exc
    if not math.isfinite(hours) or hours < 0:
        raise ValidationError("Hours must be zero or more.")
    return hours
