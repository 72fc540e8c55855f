"""Record store: full reload, comment join, sorting and totals."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from volunteer_board.domain.records import Comment, Record, RecordFields
from volunteer_board.domain.stats import BoardStats
from volunteer_board.domain.view_state import SortOrder

logger = logging.getLogger(__name__)


class RecordRepository(Protocol):
    """Persistence interface for records and comments."""

    async def list_records(self) -> list[Record]:
        """Return all records, newest creation first, without comments."""

    async def list_comments(self) -> list[Comment]:
        """Return all comments, oldest creation first."""

    async def create_record(
        self, fields: RecordFields, author_name: str, author_password: str
    ) -> Record | None:
        """Insert a record and return it when the store echoes it back."""

    async def update_record(self, record_id: int, fields: RecordFields) -> None:
        """Replace the editable fields of a record."""

    async def delete_record(self, record_id: int) -> None:
        """Delete one record row."""

    async def delete_comments_for_record(self, record_id: int) -> None:
        """Delete every comment referencing a record."""

    async def create_comment(  # noqa: PLR0913
        self,
        record_id: int,
        nickname: str,
        password: str,
        content: str,
        timestamp: str,
    ) -> Comment | None:
        """Insert a comment and return it when the store echoes it back."""

    async def delete_comment(self, comment_id: int) -> None:
        """Delete one comment row."""


def assemble_records(
    records: Iterable[Record], comments: Iterable[Comment]
) -> list[Record]:
    """Attach to each record the comments whose foreign key matches its id."""
    by_record: dict[int, list[Comment]] = defaultdict(list)
    for comment in comments:
        by_record[comment.record_id].append(comment)
    return [
        record.with_comments(tuple(by_record.get(record.id, ()))) for record in records
    ]


@dataclass
class RecordStore:
    """In-memory record collection rebuilt from scratch on every reload."""

    repository: RecordRepository
    records: list[Record] = field(default_factory=list)
    loading: bool = False

    async def reload(self) -> list[Record]:
        """Re-fetch both collections and rebuild the join.

        The previous collection is kept when either fetch fails.
        """
        self.loading = True
        try:
            records = await self.repository.list_records()
            comments = await self.repository.list_comments()
        finally:
            self.loading = False
        self.records = assemble_records(records, comments)
        logger.info(
            "Reloaded %s records with %s comments", len(records), len(comments)
        )
        return self.records

    def get(self, record_id: int) -> Record | None:
        """Return a loaded record by id, if present."""
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def sorted_records(self, order: SortOrder) -> list[Record]:
        """Return the loaded records ordered by activity date."""
        return sort_records(self.records, order)

    def stats(self) -> BoardStats:
        """Return totals over the loaded records."""
        return board_stats(self.records)


def sort_records(records: Iterable[Record], order: SortOrder) -> list[Record]:
    """Stable sort by activity date; equal dates keep their input order."""
    return sorted(
        records,
        key=lambda record: record.date,
        reverse=order is SortOrder.NEWEST,
    )


def board_stats(records: list[Record]) -> BoardStats:
    """Compute record count, total hours and total comment count."""
    return BoardStats(
        record_count=len(records),
        total_hours=sum(record.hours or 0 for record in records),
        total_comments=sum(len(record.comments) for record in records),
    )
