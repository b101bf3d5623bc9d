"""Municipality ORM model."""
from sqlalchemy import Column, Integer, String
from bulky_waste.database import Base


class Municipality(Base):
    __tablename__ = "municipalities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Municipality {self.name!r}>"
