"""Conversion of a Reservation into its outward snapshot."""
from datetime import datetime, timezone

from pydantic import TypeAdapter

from bulky_waste.errors import SnapshotError
from bulky_waste.models.reservation import Reservation
from bulky_waste.models.state_change import StateChange
from bulky_waste.schemas.reservation import ReservationOut

# same rendering as createdAt/updatedAt in the JSON body
_TIMESTAMP = TypeAdapter(datetime)


def format_change(change: StateChange) -> str:
    stamp = _TIMESTAMP.dump_python(change.timestamp.astimezone(timezone.utc), mode="json")
    return f"{stamp} - {change.status.value}"


def to_snapshot(reservation: Reservation) -> ReservationOut:
    """Total over well-formed reservations; a broken one raises ``SnapshotError``."""
    try:
        municipality = reservation.municipality
        return ReservationOut(
            id=reservation.id,
            token=reservation.token,
            municipality_name=municipality.name if municipality is not None else None,
            description=reservation.description,
            requested_date=reservation.requested_date,
            time_slot=reservation.time_slot,
            status=reservation.status,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
            history=[format_change(c) for c in reservation.history],
        )
    except (AttributeError, TypeError, ValueError) as exc:
        token = getattr(reservation, "token", None)
        raise SnapshotError(f"Failed to convert reservation {token} to a snapshot: {exc}") from exc
