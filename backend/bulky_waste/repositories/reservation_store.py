"""Reservation Store: persistence of reservations and their history.

Every call runs against the request's session and commits before returning,
so later calls in the same process observe its effects. Any SQLAlchemy failure
is rolled back and surfaced as a ``StorageError``.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bulky_waste.errors import StorageError
from bulky_waste.models.municipality import Municipality
from bulky_waste.models.reservation import Reservation, TimeSlot
from bulky_waste.models.state_change import StateChange  # noqa: F401

logger = logging.getLogger(__name__)


class ReservationStore:
    def __init__(self, db: Session):
        self.db = db

    def save(self, reservation: Reservation) -> Reservation:
        """Insert or update, cascading the history list."""
        try:
            self.db.add(reservation)
            self.db.commit()
            self.db.refresh(reservation)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to save reservation %s", reservation.token, exc_info=True)
            raise StorageError("Failed to save reservation") from exc
        return reservation

    def delete(self, reservation: Reservation) -> None:
        try:
            self.db.delete(reservation)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Failed to delete reservation") from exc

    def find_by_token(self, token: str) -> Optional[Reservation]:
        try:
            return self.db.query(Reservation).filter(Reservation.token == token).first()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to look up reservation") from exc

    def find_by_municipality(self, municipality: Municipality) -> list[Reservation]:
        try:
            return (
                self.db.query(Reservation)
                .filter(Reservation.municipality_id == municipality.id)
                .order_by(Reservation.created_at)
                .all()
            )
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list reservations") from exc

    def find_by_municipality_name(self, name: str) -> list[Reservation]:
        try:
            return (
                self.db.query(Reservation)
                .join(Municipality)
                .filter(Municipality.name == name)
                .order_by(Reservation.created_at)
                .all()
            )
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list reservations") from exc

    def find_all(self) -> list[Reservation]:
        try:
            return self.db.query(Reservation).order_by(Reservation.created_at).all()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list reservations") from exc

    def count_by_municipality(self, municipality: Municipality) -> int:
        try:
            return (
                self.db.query(func.count(Reservation.id))
                .filter(Reservation.municipality_id == municipality.id)
                .scalar()
            ) or 0
        except SQLAlchemyError as exc:
            raise StorageError("Failed to count reservations") from exc

    def count_by_municipality_and_slot(
        self, municipality: Municipality, requested_date: date, time_slot: TimeSlot
    ) -> int:
        """Reservations for one municipality on one date and time-slot."""
        try:
            return (
                self.db.query(func.count(Reservation.id))
                .filter(
                    Reservation.municipality_id == municipality.id,
                    Reservation.requested_date == requested_date,
                    Reservation.time_slot == time_slot,
                )
                .scalar()
            ) or 0
        except SQLAlchemyError as exc:
            raise StorageError("Failed to count reservations") from exc
