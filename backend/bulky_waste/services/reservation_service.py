"""Reservation service: citizen and staff operations over the store.

Composes the municipality catalog, the admission policy, the state machine
and the reservation store. Holds no state between calls; every error kind
propagates to the transport layer untouched.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from bulky_waste.clock import Clock, get_clock
from bulky_waste.errors import ConflictError, InvalidInputError, NotFoundError
from bulky_waste.models.reservation import Reservation, ReservationStatus
from bulky_waste.repositories.municipality_catalog import MunicipalityCatalog
from bulky_waste.repositories.reservation_store import ReservationStore
from bulky_waste.schemas.reservation import ReservationCreate, ReservationOut
from bulky_waste.services import admission_policy, state_machine
from bulky_waste.services.snapshot import to_snapshot

logger = logging.getLogger(__name__)

ALL_MUNICIPALITIES = "all"


def new_token() -> str:
    """Opaque, unguessable 128-bit token in UUID text form."""
    return str(uuid.uuid4())


def _load(store: ReservationStore, token: Optional[str]) -> Reservation:
    reservation = store.find_by_token(token.strip()) if token else None
    if reservation is None:
        logger.warning("Booking not found for token %s", token)
        raise NotFoundError("Booking not found for the given token")
    return reservation


# ── Citizen operations ────────────────────────────────────────────

def create_reservation(
    db: Session,
    request: ReservationCreate,
    clock: Optional[Clock] = None,
    capacity: int = admission_policy.DEFAULT_CAPACITY,
) -> ReservationOut:
    """Admit and store a new reservation; returns its snapshot."""
    clock = clock or get_clock()
    catalog = MunicipalityCatalog(db)
    store = ReservationStore(db)
    logger.info("Creating booking for municipality '%s'", request.municipality_name)

    municipality = admission_policy.require_municipality(
        request.municipality_name, catalog.lookup(request.municipality_name)
    )
    try:
        admission_policy.validate_date(request.requested_date, clock.today())
        admission_policy.check_capacity(
            municipality, store.count_by_municipality(municipality), capacity
        )
    except (InvalidInputError, ConflictError) as exc:
        logger.warning("Booking rejected for '%s': %s", municipality.name, exc.message)
        raise

    reservation = Reservation(
        token=new_token(),
        municipality=municipality,
        description=request.description,
        requested_date=request.requested_date,
        time_slot=request.time_slot,
    )
    state_machine.start(reservation, clock.now())
    store.save(reservation)

    logger.info("Booking created for '%s' on %s", municipality.name, request.requested_date)
    logger.debug("Booking token %s, history size %d", reservation.token, len(reservation.history))
    return to_snapshot(reservation)


def get_by_token(db: Session, token: Optional[str]) -> ReservationOut:
    if token is None or not token.strip():
        raise InvalidInputError("Invalid or empty token")
    return to_snapshot(_load(ReservationStore(db), token))


def cancel_reservation(db: Session, token: str, clock: Optional[Clock] = None) -> None:
    """Citizen cancel: legal only from RECEIVED or ASSIGNED."""
    clock = clock or get_clock()
    store = ReservationStore(db)
    reservation = _load(store, token)
    previous = reservation.status
    try:
        state_machine.cancel_by_citizen(reservation, clock.now())
    except ConflictError:
        logger.warning("Cannot cancel booking %s in state %s", token, previous.value)
        raise
    store.save(reservation)
    logger.info("Booking %s cancelled", token)


def list_municipality_names(db: Session) -> list[str]:
    names = MunicipalityCatalog(db).list_all()
    if not names:
        logger.warning("No municipalities available; was the catalog imported?")
    return names


# ── Staff operations ──────────────────────────────────────────────

def list_for_staff(db: Session, municipality_name: Optional[str] = None) -> list[ReservationOut]:
    """All reservations, or those of one municipality.

    ``None``, ``""`` and ``"all"`` (any case) select everything.
    """
    store = ReservationStore(db)
    if not municipality_name or municipality_name.lower() == ALL_MUNICIPALITIES:
        reservations = store.find_all()
    else:
        municipality = MunicipalityCatalog(db).lookup(municipality_name)
        if municipality is None:
            logger.warning("Staff filter municipality '%s' not found", municipality_name)
            raise NotFoundError(f"Municipality not found: {municipality_name}")
        reservations = store.find_by_municipality(municipality)
    return [to_snapshot(r) for r in reservations]


def transition(
    db: Session,
    token: str,
    new_status: ReservationStatus,
    clock: Optional[Clock] = None,
) -> ReservationOut:
    """Staff status-set: any target from any status, self-transitions included."""
    clock = clock or get_clock()
    store = ReservationStore(db)
    reservation = _load(store, token)
    previous = reservation.status
    state_machine.set_by_staff(reservation, new_status, clock.now())
    store.save(reservation)
    logger.info("Booking %s status changed %s -> %s", token, previous.value, reservation.status.value)
    return to_snapshot(reservation)
