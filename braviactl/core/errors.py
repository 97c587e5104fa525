"""Domain-specific errors for braviactl."""


class BraviaError(Exception):
    """Base error for braviactl."""


class ConfigError(BraviaError):
    """Raised when the stored configuration cannot describe a usable endpoint."""


class StateStoreError(BraviaError):
    """Raised when the state file cannot be read, parsed or validated."""


class CommandRejectedError(BraviaError):
    """Raised when a command argument or device precondition rules out a request."""


class TransportError(BraviaError):
    """Base transport error."""


class UnreachableError(TransportError):
    """Raised when the television cannot be reached (no route, refused, timeout)."""


class HttpStatusError(TransportError):
    """Raised when the television answers with a non-200 HTTP status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class BadRequestError(HttpStatusError):
    """HTTP 400: the request body was malformed."""


class AuthRejectedError(HttpStatusError):
    """HTTP 403: the pre-shared key was rejected."""


class NotFoundError(HttpStatusError):
    """HTTP 404: the service path is unknown to the television."""


class DeviceBusyError(HttpStatusError):
    """HTTP 500: the television cannot service the request right now."""


class ProtocolError(BraviaError):
    """Base error for responses that arrived but could not be used."""


class MalformedResponseError(ProtocolError):
    """Raised when a response body does not decode into the expected shape."""


class ApplicationError(ProtocolError):
    """Raised when the television embeds an error payload in an HTTP 200 response."""

    def __init__(self, method: str, code: int | None, message: str) -> None:
        super().__init__(f"{method} returned error {code}: {message}")
        self.method = method
        self.code = code
        self.device_message = message
