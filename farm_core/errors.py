"""Custom exceptions for farm core services."""


class FarmNotFoundError(RuntimeError):
    """Raised when a farm, pool or directory entry that must exist is missing."""

    def __init__(self, message: str, address: str | None = None) -> None:
        super().__init__(message if address is None else f"{message}: {address}")
        self.address = address


class AccountDecodeError(ValueError):
    """Raised when raw account bytes do not match the expected layout."""

    pass


class FarmApiError(RuntimeError):
    """Raised when the farm directory API returns a non-success status."""

    def __init__(self, status_code: int, message: str, body: str | None = None) -> None:
        super().__init__(f"[HTTP {status_code}] {message}")
        self.status_code = status_code
        self.body = body
