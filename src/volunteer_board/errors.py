"""Error taxonomy for board actions."""


class BoardError(Exception):
    """Base class for failures surfaced to the user."""


class GatewayError(BoardError):
    """Failure talking to the hosted REST store."""


class RemoteError(GatewayError):
    """The store answered outside the 2xx range."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"HTTP error! status: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class DecodeError(GatewayError):
    """A successful response body was not valid JSON."""

    def __init__(self, body: str) -> None:
        super().__init__("Invalid JSON response from server")
        self.body = body


class NetworkError(GatewayError):
    """The request never got a response (connection failure or timeout)."""


class ValidationError(BoardError):
    """A required field is missing or malformed."""


class AuthorizationError(BoardError):
    """An entered password did not match."""


class SetupRequiredError(BoardError):
    """Store endpoint, API key or admin password is not configured."""
