"""ASGI entrypoint for the volunteer board API."""

from volunteer_board.api.app import create_app
from volunteer_board.containers import build_container

app = create_app(build_container())
