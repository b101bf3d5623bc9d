"""Reservation error kinds, independent of the HTTP transport."""


class ReservationError(Exception):
    """Base class; carries the HTTP status the transport maps it to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(ReservationError):
    status_code = 400


class NotFoundError(ReservationError):
    status_code = 404


class ConflictError(ReservationError):
    status_code = 409


class StorageError(ReservationError):
    """Underlying database failure; the SQLAlchemy error is chained."""


class SnapshotError(ReservationError):
    """A reservation could not be converted to its outward snapshot."""
