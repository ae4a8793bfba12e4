"""Domain errors raised by the core services."""


class DreamCarError(Exception):
    """Base class for errors raised by dreamcar services."""


class NetworkError(DreamCarError):
    """The vehicle lookup service could not be reached or returned a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(DreamCarError):
    """The lookup service answered but reported an application-level problem."""

    def __init__(self, message: str = "Invalid VIN or API error") -> None:
        super().__init__(message)
