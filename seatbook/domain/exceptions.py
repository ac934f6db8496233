

class SeatBookingError(Exception):
    """
    Base exception for all errors raised
    by the seat booking core.
    """


class DataAccessError(SeatBookingError):
    """
    Raised when the data store fails in a way the caller cannot recover
    from. The unit of work has already been rolled back when this is raised.
    """

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause

        message = f"Unrecoverable data store error during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class MixedBookingIdentityError(SeatBookingError, TypeError):
    """
    Raised when bookings identified by ID are compared
    with bookings identified by their content.
    """

    def __init__(self, left: object, right: object):
        self.left = left
        self.right = right

        message = (
            f"Cannot mix booking ID policies: "
            f"{left!r} vs {right!r}"
        )
        super().__init__(message)
