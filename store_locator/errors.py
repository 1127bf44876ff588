"""Exceptions raised by the store locator."""

ERROR_DB_CONNECTION = 1
ERROR_QUERY = 2


class LocatorError(Exception):
    """Base class for recoverable locator failures. `code` tells the kinds apart."""

    code = 0


class DatabaseConnectionError(LocatorError):
    """Connecting to the locations database failed."""

    code = ERROR_DB_CONNECTION


class QueryError(LocatorError):
    """The locator statement failed after a connection was acquired."""

    code = ERROR_QUERY


class PositionNotSetError(AssertionError):
    """find_nearby() was called before any position was supplied."""

    def __init__(self, message: str = "A position must be set with set_position() before locating"):
        super().__init__(message)
