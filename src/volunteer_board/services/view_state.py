"""View-state controller for the board.

The controller owns the current screen (list or detail), the single modal
slot with its transient credential, the form draft and the sort toggle. Every
mutation goes through :class:`BoardService`, then the record store is rebuilt
from scratch and the selected record is reconciled against it.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field, fields, replace

from volunteer_board.domain.records import (
    Comment,
    PendingCommentId,
    Record,
    RecordDraft,
)
from volunteer_board.domain.stats import BoardStats
from volunteer_board.domain.view_state import (
    ActionResult,
    AdminDeleteDialog,
    CommentDeleteDialog,
    CreateDialog,
    EditDialog,
    Listing,
    Modal,
    Screen,
    SortOrder,
    Viewing,
)
from volunteer_board.errors import (
    AuthorizationError,
    GatewayError,
    SetupRequiredError,
    ValidationError,
)
from volunteer_board.services import photos
from volunteer_board.services.board import BoardService
from volunteer_board.services.records import RecordStore

logger = logging.getLogger(__name__)

SETUP_REQUIRED_MESSAGE = "Supabase setup is required before the board can load."
LOAD_FAILED_MESSAGE = "Failed to load data. Please check the Supabase settings."
NO_DIALOG_MESSAGE = "That dialog is not open."
MISSING_RECORD_MESSAGE = "That record no longer exists."

_DRAFT_TEXT_FIELDS = frozenset(
    item.name for item in fields(RecordDraft) if item.name != "photos"
)


@dataclass
class BoardController:
    """Single-page board state machine."""

    store: RecordStore | None
    board_service: BoardService | None
    screen: Screen = field(default_factory=Listing)
    modal: Modal | None = None
    sort_order: SortOrder = SortOrder.NEWEST

    @property
    def setup_required(self) -> bool:
        """Return True when no store is configured."""
        return self.store is None or self.board_service is None

    @property
    def loading(self) -> bool:
        """Return True while a reload is in flight."""
        return self.store is not None and self.store.loading

    @property
    def records(self) -> list[Record]:
        """Return the loaded records in store order."""
        return self.store.records if self.store else []

    @property
    def selected(self) -> Record | None:
        """Return the record open in the detail screen."""
        if isinstance(self.screen, Viewing):
            return self.screen.record
        return None

    async def start(self) -> ActionResult:
        """Run the initial load."""
        if self.setup_required:
            return ActionResult(
                ok=False,
                message=SETUP_REQUIRED_MESSAGE,
                error=SetupRequiredError(SETUP_REQUIRED_MESSAGE),
            )
        error = await self._refresh()
        if error:
            return ActionResult(ok=False, message=LOAD_FAILED_MESSAGE, error=error)
        return ActionResult(ok=True, message="Loaded.")

    def select_record(self, record_id: int) -> bool:
        """Open the detail screen for a loaded record."""
        record = self.store.get(record_id) if self.store else None
        if record is None:
            return False
        self.screen = Viewing(record)
        return True

    def back(self) -> None:
        """Return to the record list."""
        self.screen = Listing()

    def toggle_sort(self, order: SortOrder) -> None:
        """Switch between newest-first and oldest-first ordering."""
        self.sort_order = order

    def sorted_records(self) -> list[Record]:
        """Return the loaded records in the current presentation order."""
        if self.store is None:
            return []
        return self.store.sorted_records(self.sort_order)

    def stats(self) -> BoardStats:
        """Return totals recomputed from the live store."""
        if self.store is None:
            return BoardStats(record_count=0, total_hours=0, total_comments=0)
        return self.store.stats()

    def open_create(self) -> None:
        """Open the create dialog with a fresh draft."""
        self.modal = CreateDialog()

    def open_edit(self, record: Record) -> None:
        """Open the edit dialog pre-filled from a record."""
        self.modal = EditDialog(target=record, draft=RecordDraft.from_record(record))

    def open_admin_delete(self, record_id: int) -> None:
        """Open the admin delete confirmation."""
        self.modal = AdminDeleteDialog(record_id=record_id)

    def open_comment_delete(self, comment: Comment) -> None:
        """Open the comment delete confirmation."""
        self.modal = CommentDeleteDialog(comment=comment)

    def close_modal(self) -> None:
        """Close the open dialog, discarding its draft and credential."""
        self.modal = None

    def set_credential(self, value: str) -> None:
        """Update the password typed into the open confirmation dialog."""
        if isinstance(self.modal, EditDialog | AdminDeleteDialog | CommentDeleteDialog):
            self.modal.password = value

    def update_draft(self, **values: str) -> None:
        """Update text fields of the open create or edit draft."""
        draft = self._draft()
        if draft is None:
            return
        unknown = set(values) - _DRAFT_TEXT_FIELDS
        if unknown:
            raise ValueError(f"Unknown draft fields: {sorted(unknown)}")
        for name, value in values.items():
            setattr(draft, name, value)

    async def stage_photos(self, files: Sequence[bytes]) -> ActionResult:
        """Stage image files on the open draft, up to the photo limit."""
        draft = self._draft()
        if draft is None:
            return ActionResult(ok=False, message=NO_DIALOG_MESSAGE)
        result = await photos.stage_photos(draft.photos, files)
        return ActionResult(
            ok=True,
            message=result.message or f"{result.accepted} photo(s) were added.",
        )

    def remove_photo(self, index: int) -> bool:
        """Remove a staged photo from the open draft by position."""
        draft = self._draft()
        if draft is None:
            return False
        return photos.remove_photo(draft.photos, index)

    async def submit_create(self) -> ActionResult:
        """Validate and insert the create draft."""
        dialog = self.modal
        if not isinstance(dialog, CreateDialog):
            return ActionResult(ok=False, message=NO_DIALOG_MESSAGE)

        async def _create() -> None:
            await self._service().create_record(dialog.draft)
            self.close_modal()

        return await self._run(
            _create,
            success="The volunteer record was added!",
            failure="Failed to add the record.",
        )

    async def submit_edit(self) -> ActionResult:
        """Check the author password and save the edit draft."""
        dialog = self.modal
        if not isinstance(dialog, EditDialog):
            return ActionResult(ok=False, message=NO_DIALOG_MESSAGE)

        async def _update() -> None:
            await self._service().update_record(
                dialog.target, dialog.draft, dialog.password
            )
            self.close_modal()
            self.back()

        return await self._run(
            _update,
            success="The record was updated!",
            failure="Failed to update the record.",
        )

    async def submit_admin_delete(self) -> ActionResult:
        """Check the admin password and delete the record with its comments."""
        dialog = self.modal
        if not isinstance(dialog, AdminDeleteDialog):
            return ActionResult(ok=False, message=NO_DIALOG_MESSAGE)

        async def _delete() -> None:
            await self._service().delete_record(dialog.record_id, dialog.password)
            self.close_modal()
            self.back()

        return await self._run(
            _delete,
            success="The record was deleted.",
            failure="Failed to delete the record.",
        )

    async def add_comment(
        self, record_id: int, nickname: str, password: str, content: str
    ) -> ActionResult:
        """Add a comment and show it on the open detail screen right away."""

        async def _add() -> None:
            service = self._service()
            if self.store is None or self.store.get(record_id) is None:
                raise ValidationError(MISSING_RECORD_MESSAGE)
            comment = await service.add_comment(
                record_id, nickname, password, content
            )
            selected = self.selected
            if selected is not None and selected.id == record_id:
                self.screen = Viewing(
                    selected.with_comments((*selected.comments, _as_pending(comment)))
                )

        return await self._run(
            _add,
            success="The comment was added!",
            failure="Failed to add the comment.",
        )

    async def submit_comment_delete(self) -> ActionResult:
        """Check the comment password and delete it."""
        dialog = self.modal
        if not isinstance(dialog, CommentDeleteDialog):
            return ActionResult(ok=False, message=NO_DIALOG_MESSAGE)

        async def _delete() -> None:
            target = dialog.comment
            await self._service().delete_comment(target, dialog.password)
            selected = self.selected
            if selected is not None:
                self.screen = Viewing(
                    selected.with_comments(
                        tuple(c for c in selected.comments if c.id != target.id)
                    )
                )
            self.close_modal()

        return await self._run(
            _delete,
            success="The comment was deleted.",
            failure="Failed to delete the comment.",
        )

    async def _run(
        self,
        mutation: Callable[[], Awaitable[None]],
        success: str,
        failure: str,
    ) -> ActionResult:
        """Run one user action: mutate, then reload and reconcile."""
        try:
            await mutation()
        except (ValidationError, AuthorizationError, SetupRequiredError) as exc:
            return ActionResult(ok=False, message=str(exc), error=exc)
        except GatewayError as exc:
            logger.exception(failure)
            return ActionResult(ok=False, message=failure, error=exc)
        error = await self._refresh()
        if error:
            return ActionResult(ok=False, message=LOAD_FAILED_MESSAGE, error=error)
        return ActionResult(ok=True, message=success)

    async def _refresh(self) -> GatewayError | None:
        """Reload the store and reconcile the selection; keep old state on error."""
        if self.store is None:
            return None
        try:
            await self.store.reload()
        except GatewayError as exc:
            logger.exception("Failed to load records")
            return exc
        self._reconcile_selection()
        return None

    def _reconcile_selection(self) -> None:
        selected = self.selected
        if selected is None or self.store is None:
            return
        fresh = self.store.get(selected.id)
        self.screen = Viewing(fresh) if fresh else Listing()

    def _draft(self) -> RecordDraft | None:
        if isinstance(self.modal, CreateDialog | EditDialog):
            return self.modal.draft
        return None

    def _service(self) -> BoardService:
        if self.board_service is None:
            raise SetupRequiredError(SETUP_REQUIRED_MESSAGE)
        return self.board_service


def _as_pending(comment: Comment) -> Comment:
    """Give an optimistic comment a client-side id until the next reload."""
    if comment.is_pending:
        return comment
    return replace(comment, id=PendingCommentId())
