"""StateChange ORM model: one immutable entry of a reservation's history."""
from sqlalchemy import Column, Integer, String, ForeignKey, Enum as SAEnum
from bulky_waste.database import Base, UTCDateTime
from bulky_waste.models.reservation import ReservationStatus


class StateChange(Base):
    __tablename__ = "booking_state_changes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reservation_id = Column(
        String(36), ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(SAEnum(ReservationStatus), nullable=False)
    timestamp = Column(UTCDateTime, nullable=False)
