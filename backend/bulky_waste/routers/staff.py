"""Staff booking routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bulky_waste.clock import Clock, get_clock
from bulky_waste.database import get_db
from bulky_waste.models.reservation import ReservationStatus
from bulky_waste.schemas.reservation import ReservationOut
from bulky_waste.services import reservation_service

router = APIRouter()


@router.get("", response_model=list[ReservationOut])
def list_bookings(
    municipality: Optional[str] = Query(None, description="Municipality name, or 'all'"),
    db: Session = Depends(get_db),
):
    """List bookings, optionally filtered by municipality."""
    return reservation_service.list_for_staff(db, municipality)


@router.patch("/{token}/status", response_model=ReservationOut)
def update_status(
    token: str,
    status: ReservationStatus = Query(...),
    note: Optional[str] = Query(None, description="Accepted but not stored"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Set a booking's status (any target, from any status)."""
    return reservation_service.transition(db, token, status, clock=clock)
