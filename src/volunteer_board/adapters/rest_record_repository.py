"""REST repository for volunteer records and comments."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import TypeVar

from volunteer_board.adapters.rest_gateway import (
    RestGateway,
    Row,
    eq_filter,
    select_query,
)
from volunteer_board.domain.records import Comment, Record, RecordFields
from volunteer_board.errors import DecodeError
from volunteer_board.services.records import RecordRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECORDS = "records"
COMMENTS = "comments"


@dataclass
class RestRecordRepository(RecordRepository):
    """Record repository backed by the `records` and `comments` resources."""

    gateway: RestGateway

    async def list_records(self) -> list[Record]:
        """Return all records ordered by creation time, newest first."""
        rows = await self.gateway.select(
            RECORDS, select_query(order="created_at", desc=True)
        )
        return _parse_rows(rows, _parse_record)

    async def list_comments(self) -> list[Comment]:
        """Return all comments ordered by creation time, oldest first."""
        rows = await self.gateway.select(
            COMMENTS, select_query(order="created_at", desc=False)
        )
        return _parse_rows(rows, _parse_comment)

    async def create_record(
        self, fields: RecordFields, author_name: str, author_password: str
    ) -> Record | None:
        """Insert a record row."""
        payload = _fields_payload(fields)
        payload["author_name"] = author_name
        payload["author_password"] = author_password
        rows = await self.gateway.insert(RECORDS, payload)
        if not rows:
            return None
        return _parse_rows(rows[:1], _parse_record)[0]

    async def update_record(self, record_id: int, fields: RecordFields) -> None:
        """Patch the editable columns of one record."""
        await self.gateway.update(
            RECORDS, _fields_payload(fields), eq_filter("id", record_id)
        )

    async def delete_record(self, record_id: int) -> None:
        """Delete one record row."""
        await self.gateway.delete(RECORDS, eq_filter("id", record_id))

    async def delete_comments_for_record(self, record_id: int) -> None:
        """Delete all comments whose record_id matches."""
        await self.gateway.delete(COMMENTS, eq_filter("record_id", record_id))

    async def create_comment(  # noqa: PLR0913
        self,
        record_id: int,
        nickname: str,
        password: str,
        content: str,
        timestamp: str,
    ) -> Comment | None:
        """Insert a comment row."""
        rows = await self.gateway.insert(
            COMMENTS,
            {
                "record_id": record_id,
                "nickname": nickname,
                "password": password,
                "content": content,
                "timestamp": timestamp,
            },
        )
        if not rows:
            return None
        return _parse_rows(rows[:1], _parse_comment)[0]

    async def delete_comment(self, comment_id: int) -> None:
        """Delete one comment row."""
        await self.gateway.delete(COMMENTS, eq_filter("id", comment_id))


def _fields_payload(fields: RecordFields) -> Row:
    return {
        "date": fields.date.isoformat(),
        "name": fields.name,
        "organization": fields.organization,
        "hours": fields.hours,
        "location": fields.location,
        "participants": fields.participants,
        "description": fields.description,
        "photos": list(fields.photos),
    }


def _parse_rows(rows: list[Row], parse: Callable[[Row], T]) -> list[T]:
    """Parse decoded rows; a row that does not fit the model is a decode failure."""
    parsed = []
    for row in rows:
        try:
            parsed.append(parse(row))
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Unreadable row: %s", row)
            raise DecodeError(str(row)) from exc
    return parsed


def _parse_record(row: Row) -> Record:
    return Record(
        id=int(row["id"]),
        created_at=_parse_timestamp(row.get("created_at")),
        date=date.fromisoformat(str(row["date"])[:10]),
        name=str(row.get("name") or ""),
        organization=str(row.get("organization") or ""),
        hours=float(row.get("hours") or 0.0),
        location=row.get("location") or None,
        participants=row.get("participants") or None,
        description=row.get("description") or None,
        author_name=str(row.get("author_name") or ""),
        author_password=str(row.get("author_password") or ""),
        photos=tuple(row.get("photos") or ()),
    )


def _parse_comment(row: Row) -> Comment:
    return Comment(
        id=int(row["id"]),
        created_at=_parse_timestamp(row.get("created_at")),
        record_id=int(row["record_id"]),
        nickname=str(row.get("nickname") or ""),
        password=str(row.get("password") or ""),
        content=str(row.get("content") or ""),
        timestamp=str(row.get("timestamp") or ""),
    )


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
