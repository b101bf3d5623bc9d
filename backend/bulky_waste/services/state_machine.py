"""Reservation state machine.

Citizens may cancel only while the pickup has not started (RECEIVED or
ASSIGNED). Staff may set any status from any status, including the current
one; every transition appends exactly one StateChange.
"""
import logging
from datetime import datetime

from bulky_waste.errors import ConflictError
from bulky_waste.models.reservation import Reservation, ReservationStatus
from bulky_waste.models.state_change import StateChange

logger = logging.getLogger(__name__)

CITIZEN_CANCELLABLE = frozenset({ReservationStatus.RECEIVED, ReservationStatus.ASSIGNED})


def start(reservation: Reservation, created_at: datetime) -> StateChange:
    """Record the synthetic initial RECEIVED entry at creation time."""
    reservation.created_at = created_at
    return _apply(reservation, ReservationStatus.RECEIVED, created_at)


def can_cancel(status: ReservationStatus) -> bool:
    return status in CITIZEN_CANCELLABLE


def cancel_by_citizen(reservation: Reservation, now: datetime) -> StateChange:
    if not can_cancel(reservation.status):
        raise ConflictError("The booking cannot be cancelled in the current state")
    return _apply(reservation, ReservationStatus.CANCELLED, now)


def set_by_staff(reservation: Reservation, target: ReservationStatus, now: datetime) -> StateChange:
    return _apply(reservation, ReservationStatus(target), now)


def _apply(reservation: Reservation, target: ReservationStatus, at: datetime) -> StateChange:
    change = StateChange(status=target, timestamp=at)
    reservation.record(change)
    return change
