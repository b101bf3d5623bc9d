"""Reservation ORM model and its status / time-slot enumerations."""
import uuid
import enum
from sqlalchemy import Column, String, Date, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from bulky_waste.database import Base, UTCDateTime


class ReservationStatus(str, enum.Enum):
    RECEIVED = "RECEIVED"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TimeSlot(str, enum.Enum):
    EARLY_MORNING = "EARLY_MORNING"  # 06:00 - 08:00
    MORNING = "MORNING"              # 08:00 - 12:00
    AFTERNOON = "AFTERNOON"          # 12:00 - 16:00
    EVENING = "EVENING"              # 16:00 - 20:00
    NIGHT = "NIGHT"                  # 20:00 - 22:00
    LATE_NIGHT = "LATE_NIGHT"        # 22:00 - 06:00
    ANYTIME = "ANYTIME"


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    token = Column(String(36), nullable=False, unique=True)
    municipality_id = Column(Integer, ForeignKey("municipalities.id"), nullable=False, index=True)
    description = Column(String(1000), nullable=False)
    requested_date = Column(Date, nullable=False)
    time_slot = Column(SAEnum(TimeSlot), nullable=False)
    status = Column(SAEnum(ReservationStatus), nullable=False, default=ReservationStatus.RECEIVED)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=True)

    municipality = relationship("Municipality", lazy="joined")
    history = relationship(
        "StateChange",
        order_by="StateChange.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def record(self, change) -> None:
        """Append a state change and make it the current status."""
        self.history.append(change)
        self.status = change.status
        self.updated_at = change.timestamp
