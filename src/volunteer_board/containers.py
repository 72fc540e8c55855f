"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from volunteer_board.adapters.rest_gateway import HttpxRestGateway
from volunteer_board.adapters.rest_record_repository import RestRecordRepository
from volunteer_board.config import Settings
from volunteer_board.services.board import BoardService
from volunteer_board.services.records import RecordRepository, RecordStore
from volunteer_board.services.view_state import BoardController

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies.

    Repository and service are None while setup is required.
    """

    settings: Settings
    record_repository: RecordRepository | None
    board_service: BoardService | None
    close_resources: Callable[[], Awaitable[None]]

    @property
    def setup_required(self) -> bool:
        """Return True when the store cannot be reached with this configuration."""
        return self.record_repository is None or self.board_service is None

    def new_store(self) -> RecordStore | None:
        """Create an empty record store bound to the repository."""
        if self.record_repository is None:
            return None
        return RecordStore(self.record_repository)

    def new_controller(self) -> BoardController:
        """Create a view-state controller for one board session."""
        return BoardController(store=self.new_store(), board_service=self.board_service)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    if resolved_settings.setup_required:
        logger.warning("Supabase URL, anon key or admin password is not configured")

        async def close_nothing() -> None:
            return None

        return AppContainer(
            settings=resolved_settings,
            record_repository=None,
            board_service=None,
            close_resources=close_nothing,
        )

    gateway = HttpxRestGateway.create(
        resolved_settings.supabase_url,
        resolved_settings.supabase_anon_key,
        timeout=resolved_settings.request_timeout,
    )
    record_repository = RestRecordRepository(gateway)
    board_service = BoardService(
        repository=record_repository,
        admin_password=resolved_settings.admin_password,
    )

    async def close_resources() -> None:
        await gateway.close()

    return AppContainer(
        settings=resolved_settings,
        record_repository=record_repository,
        board_service=board_service,
        close_resources=close_resources,
    )
