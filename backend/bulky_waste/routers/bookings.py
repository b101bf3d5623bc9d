"""Citizen booking routes: delegates to reservation_service."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from bulky_waste.clock import Clock, get_clock
from bulky_waste.config import settings
from bulky_waste.database import get_db
from bulky_waste.schemas.reservation import ReservationCreate, ReservationOut
from bulky_waste.services import reservation_service

router = APIRouter()


@router.post("", response_model=ReservationOut)
def create_booking(
    payload: ReservationCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Create a pickup booking; the response carries the citizen's token."""
    return reservation_service.create_reservation(
        db, payload, clock=clock, capacity=settings.MAX_BOOKINGS_PER_MUNICIPALITY
    )


@router.get("/municipalities", response_model=list[str])
def list_municipalities(db: Session = Depends(get_db)):
    return reservation_service.list_municipality_names(db)


@router.get("/{token}", response_model=ReservationOut)
def get_booking(token: str, db: Session = Depends(get_db)):
    return reservation_service.get_by_token(db, token)


@router.put("/{token}/cancel", status_code=status.HTTP_204_NO_CONTENT)
def cancel_booking(token: str, db: Session = Depends(get_db), clock: Clock = Depends(get_clock)):
    """Cancel a booking that has not started yet."""
    reservation_service.cancel_reservation(db, token, clock=clock)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
