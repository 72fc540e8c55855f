"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta

import pytest

from volunteer_board.config import Settings
from volunteer_board.containers import AppContainer
from volunteer_board.domain.records import Comment, Record, RecordFields
from volunteer_board.errors import RemoteError
from volunteer_board.services.board import BoardService
from volunteer_board.services.records import RecordRepository

ADMIN_PASSWORD = "admin-secret"
_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


@dataclass
class InMemoryRecordRepository(RecordRepository):
    """In-memory record repository for tests."""

    records: dict[int, Record] = field(default_factory=dict)
    comments: dict[int, Comment] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)
    echo_rows: bool = True
    _next_id: int = 0

    def _tick(self) -> tuple[int, datetime]:
        self._next_id += 1
        return self._next_id, _EPOCH + timedelta(seconds=self._next_id)

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise RemoteError(500, f"{name} failed")

    def add_record(self, **overrides: object) -> Record:
        record_id, created_at = self._tick()
        values: dict[str, object] = {
            "id": record_id,
            "created_at": created_at,
            "date": date(2024, 3, 1),
            "name": "Soup Kitchen",
            "organization": "City Shelter",
            "hours": 3.0,
            "author_name": "Ana",
            "author_password": "x1",
        }
        values.update(overrides)
        record = Record(**values)
        self.records[record.id] = record
        return record

    def add_comment(self, record_id: int, **overrides: object) -> Comment:
        comment_id, created_at = self._tick()
        values: dict[str, object] = {
            "id": comment_id,
            "created_at": created_at,
            "record_id": record_id,
            "nickname": "Bo",
            "password": "y2",
            "content": "Great work",
            "timestamp": "2024. 3. 1. 오후 2:05:09",
        }
        values.update(overrides)
        comment = Comment(**values)
        self.comments[comment.id] = comment
        return comment

    async def list_records(self) -> list[Record]:
        self.calls.append(("list_records", None))
        self._check("list_records")
        return sorted(
            self.records.values(), key=lambda record: record.created_at, reverse=True
        )

    async def list_comments(self) -> list[Comment]:
        self.calls.append(("list_comments", None))
        self._check("list_comments")
        return sorted(self.comments.values(), key=lambda comment: comment.created_at)

    async def create_record(
        self, fields: RecordFields, author_name: str, author_password: str
    ) -> Record | None:
        self.calls.append(("create_record", fields))
        self._check("create_record")
        record = self.add_record(
            date=fields.date,
            name=fields.name,
            organization=fields.organization,
            hours=fields.hours,
            location=fields.location,
            participants=fields.participants,
            description=fields.description,
            photos=fields.photos,
            author_name=author_name,
            author_password=author_password,
        )
        return record if self.echo_rows else None

    async def update_record(self, record_id: int, fields: RecordFields) -> None:
        self.calls.append(("update_record", record_id))
        self._check("update_record")
        self.records[record_id] = replace(
            self.records[record_id],
            date=fields.date,
            name=fields.name,
            organization=fields.organization,
            hours=fields.hours,
            location=fields.location,
            participants=fields.participants,
            description=fields.description,
            photos=fields.photos,
        )

    async def delete_record(self, record_id: int) -> None:
        self.calls.append(("delete_record", record_id))
        self._check("delete_record")
        self.records.pop(record_id, None)

    async def delete_comments_for_record(self, record_id: int) -> None:
        self.calls.append(("delete_comments_for_record", record_id))
        self._check("delete_comments_for_record")
        self.comments = {
            comment_id: comment
            for comment_id, comment in self.comments.items()
            if comment.record_id != record_id
        }

    async def create_comment(  # noqa: PLR0913
        self,
        record_id: int,
        nickname: str,
        password: str,
        content: str,
        timestamp: str,
    ) -> Comment | None:
        self.calls.append(("create_comment", record_id))
        self._check("create_comment")
        comment = self.add_comment(
            record_id,
            nickname=nickname,
            password=password,
            content=content,
            timestamp=timestamp,
        )
        return comment if self.echo_rows else None

    async def delete_comment(self, comment_id: int) -> None:
        self.calls.append(("delete_comment", comment_id))
        self._check("delete_comment")
        self.comments.pop(comment_id, None)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        admin_password=ADMIN_PASSWORD,
        environment="local",
    )


@pytest.fixture
def repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()


@pytest.fixture
def board_service(repository: InMemoryRecordRepository) -> BoardService:
    return BoardService(repository=repository, admin_password=ADMIN_PASSWORD)


@pytest.fixture
def container(
    settings: Settings,
    repository: InMemoryRecordRepository,
    board_service: BoardService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        record_repository=repository,
        board_service=board_service,
        close_resources=close_resources,
    )
