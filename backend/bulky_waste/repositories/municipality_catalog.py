"""Municipality Catalog: authoritative set of municipality names."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bulky_waste.errors import StorageError
from bulky_waste.models.municipality import Municipality

logger = logging.getLogger(__name__)


class MunicipalityCatalog:
    """Lookup and idempotent insert of municipalities over a session."""

    def __init__(self, db: Session):
        self.db = db

    def lookup(self, name: Optional[str]) -> Optional[Municipality]:
        """Exact, case-sensitive match."""
        if name is None:
            return None
        try:
            return self.db.query(Municipality).filter(Municipality.name == name).first()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to look up municipality") from exc

    def list_all(self) -> list[str]:
        try:
            rows = self.db.query(Municipality.name).order_by(Municipality.id).all()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list municipalities") from exc
        return [name for (name,) in rows]

    def ensure(self, name: str) -> bool:
        """Insert ``name`` unless it already exists. Returns True if created."""
        if self.lookup(name) is not None:
            return False
        try:
            self.db.add(Municipality(name=name))
            self.db.commit()
        except IntegrityError:
            # Inserted concurrently by another writer.
            self.db.rollback()
            return False
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Failed to store municipality '{name}'") from exc
        logger.debug("Added municipality '%s'", name)
        return True
