"""Pydantic schemas for reservations (camelCase on the wire)."""
from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from bulky_waste.models.reservation import ReservationStatus, TimeSlot

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class ReservationCreate(BaseModel):
    municipality_name: Optional[str] = None
    description: str
    requested_date: date
    time_slot: TimeSlot

    model_config = _CAMEL


class ReservationOut(BaseModel):
    """Outward snapshot of a reservation with a flattened history."""

    id: str
    token: str
    municipality_name: Optional[str] = None
    description: str
    requested_date: date
    time_slot: TimeSlot
    status: ReservationStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    history: list[str] = []

    model_config = _CAMEL


class ApiError(BaseModel):
    """Body of every error response."""

    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
