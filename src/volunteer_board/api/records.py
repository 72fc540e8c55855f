"""Record and comment endpoints."""

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from volunteer_board.api.schemas import (
    CommentCreatePayload,
    RecordCreatePayload,
    RecordUpdatePayload,
)
from volunteer_board.containers import AppContainer
from volunteer_board.domain.records import (
    Comment,
    Record,
    format_activity_date,
)
from volunteer_board.domain.stats import BoardStats
from volunteer_board.domain.view_state import SortOrder
from volunteer_board.services.records import RecordStore

router = APIRouter(prefix="/records", tags=["records"])

SETUP_REQUIRED_DETAIL = "Supabase setup is required."


def require_board(request: Request) -> AppContainer:
    """Return the container, refusing every board call until setup is done."""
    container: AppContainer = request.app.state.container
    if container.setup_required:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=SETUP_REQUIRED_DETAIL,
        )
    return container


@router.get("")
async def list_records(
    sort: SortOrder = SortOrder.NEWEST,
    container: AppContainer = Depends(require_board),
) -> dict[str, object]:
    """Return all records with their comments and board totals."""
    store = await _load_store(container)
    return {
        "records": [_serialize_record(record) for record in store.sorted_records(sort)],
        "stats": _serialize_stats(store.stats()),
    }


@router.get("/{record_id}")
async def get_record(
    record_id: int, container: AppContainer = Depends(require_board)
) -> dict[str, object]:
    """Return one record with its comments."""
    store = await _load_store(container)
    return _serialize_record(_find_record(store, record_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_record(
    payload: RecordCreatePayload, container: AppContainer = Depends(require_board)
) -> dict[str, object]:
    """Create a record."""
    draft = payload.to_draft(payload.author_name, payload.author_password)
    created = await container.board_service.create_record(draft)
    return {"status": "created", "id": created.id if created else None}


@router.put("/{record_id}")
async def update_record(
    record_id: int,
    payload: RecordUpdatePayload,
    container: AppContainer = Depends(require_board),
) -> dict[str, str]:
    """Edit a record; requires the author's password."""
    store = await _load_store(container)
    target = _find_record(store, record_id)
    await container.board_service.update_record(
        target, payload.to_draft(), payload.password
    )
    return {"status": "updated"}


@router.delete("/{record_id}")
async def delete_record(
    record_id: int,
    x_admin_password: str | None = Header(default=None),
    container: AppContainer = Depends(require_board),
) -> dict[str, str]:
    """Delete a record and its comments; requires the admin password."""
    password = x_admin_password or ""
    container.board_service.authorize_admin(password)
    store = await _load_store(container)
    _find_record(store, record_id)
    await container.board_service.delete_record(record_id, password)
    return {"status": "deleted"}


@router.post("/{record_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    record_id: int,
    payload: CommentCreatePayload,
    container: AppContainer = Depends(require_board),
) -> dict[str, object]:
    """Attach a comment to an existing record."""
    store = await _load_store(container)
    _find_record(store, record_id)
    comment = await container.board_service.add_comment(
        record_id, payload.nickname, payload.password, payload.content
    )
    return _serialize_comment(comment)


@router.delete("/{record_id}/comments/{comment_id}")
async def delete_comment(
    record_id: int,
    comment_id: int,
    x_comment_password: str | None = Header(default=None),
    container: AppContainer = Depends(require_board),
) -> dict[str, str]:
    """Delete a comment; requires the comment's password."""
    store = await _load_store(container)
    record = _find_record(store, record_id)
    comment = next((c for c in record.comments if c.id == comment_id), None)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    await container.board_service.delete_comment(comment, x_comment_password or "")
    return {"status": "deleted"}


async def _load_store(container: AppContainer) -> RecordStore:
    store = container.new_store()
    await store.reload()
    return store


def _find_record(store: RecordStore, record_id: int) -> Record:
    record = store.get(record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return record


def _serialize_record(record: Record) -> dict[str, object]:
    return {
        "id": record.id,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "date": record.date.isoformat(),
        "date_display": format_activity_date(record.date),
        "name": record.name,
        "organization": record.organization,
        "hours": record.hours,
        "location": record.location,
        "participants": record.participants,
        "description": record.description,
        "author_name": record.author_name,
        "photos": list(record.photos),
        "comments": [_serialize_comment(comment) for comment in record.comments],
    }


def _serialize_comment(comment: Comment) -> dict[str, object]:
    return {
        "id": str(comment.id) if comment.is_pending else comment.id,
        "pending": comment.is_pending,
        "record_id": comment.record_id,
        "nickname": comment.nickname,
        "content": comment.content,
        "timestamp": comment.timestamp,
        "created_at": comment.created_at.isoformat() if comment.created_at else None,
    }


def _serialize_stats(stats: BoardStats) -> dict[str, object]:
    return {
        "record_count": stats.record_count,
        "total_hours": stats.total_hours,
        "total_comments": stats.total_comments,
    }
