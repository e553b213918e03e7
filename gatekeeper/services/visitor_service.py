# gatekeeper/services/visitor_service.py
"""
Visitor registry: lookup, existence check, insert, overwrite and delete by plate.
Used by the visitors router and by the console menu.

Every operation opens its own session through the Gateway and releases it
before returning. All statements are built from ORM expressions, so plate and
name values are always bound as parameters.
"""

from typing import List, Optional

from fastapi import Depends
from sqlalchemy import exc

from gatekeeper.database import Gateway, get_gateway
from gatekeeper.exceptions import PlateConflictError, VisitorValidationError
from gatekeeper.models.visitor import Visitor
from gatekeeper.schemas.visitor import VisitorIn, VisitorOut
from gatekeeper.utils.logger import get_logger

logger = get_logger(__name__)


def validate_visitor(visitor: VisitorIn):
    """Both name and plate must be non-empty."""
    if not visitor.name or not visitor.plate:
        raise VisitorValidationError()


def _rows_for_plate(db, plate: str) -> List[Visitor]:
    """
    Rows whose plate equals the input exactly.
    The SQL filter narrows the candidates; tables created before the plate
    column got a binary collation may still match case-insensitively.
    """
    rows = db.query(Visitor).filter(Visitor.plate == plate).order_by(Visitor.id).all()
    return [row for row in rows if row.plate == plate]


class VisitorRegistry:
    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    def list_visitors(self, plate: Optional[str] = None) -> List[VisitorOut]:
        """All visitors, or only those whose plate matches exactly. May be empty."""
        with self.gateway.session() as db:
            if plate:
                rows = _rows_for_plate(db, plate)
            else:
                rows = db.query(Visitor).order_by(Visitor.id).all()
            return [VisitorOut.model_validate(v) for v in rows]

    def exists_by_plate(self, plate: str) -> bool:
        logger.debug(f"Entered plate: {plate}")
        with self.gateway.session() as db:
            rows = _rows_for_plate(db, plate)
            for row in rows:
                logger.debug(f"Returned data from query: {row.name} {row.plate}")
            return bool(rows)

    def get_linked_name(self, plate: str) -> Optional[str]:
        """Name registered for the plate, or None."""
        with self.gateway.session() as db:
            rows = _rows_for_plate(db, plate)
            return rows[0].name if rows else None

    def insert(self, visitor: VisitorIn) -> VisitorOut:
        """
        Insert a new row. Does not pre-check existence; the unique index on
        plate turns a duplicate into PlateConflictError.
        """
        validate_visitor(visitor)
        with self.gateway.session() as db:
            db.add(Visitor(name=visitor.name, plate=visitor.plate))
            try:
                db.commit()
            except exc.IntegrityError as e:
                db.rollback()
                logger.info(f"Plate {visitor.plate} already in the database, insert refused")
                raise PlateConflictError() from e
        logger.info(f"Visitor {visitor.name} with plate {visitor.plate} added to the database")
        return VisitorOut(name=visitor.name, plate=visitor.plate)

    def register(self, visitor: VisitorIn) -> VisitorOut:
        """Create semantics for the API: validate, refuse known plates, insert."""
        validate_visitor(visitor)
        if self.exists_by_plate(visitor.plate):
            raise PlateConflictError()
        return self.insert(visitor)

    def upsert_on_conflict(self, visitor: VisitorIn) -> bool:
        """
        Replace the name linked to an existing plate, or insert when the plate
        is new. The caller confirms the overwrite first.
        Returns True when an existing record was overwritten.
        """
        validate_visitor(visitor)
        with self.gateway.session() as db:
            updated = self._update_name(db, visitor)
            if not updated:
                db.add(Visitor(name=visitor.name, plate=visitor.plate))
                try:
                    db.commit()
                except exc.IntegrityError:
                    # Someone inserted the plate between our update and insert
                    db.rollback()
                    updated = self._update_name(db, visitor)

        if updated:
            logger.info(f"Plate {visitor.plate} is now registered to {visitor.name}")
        else:
            logger.info(f"Plate {visitor.plate} added under the name {visitor.name}")
        return bool(updated)

    @staticmethod
    def _update_name(db, visitor: VisitorIn) -> int:
        ids = [row.id for row in _rows_for_plate(db, visitor.plate)]
        count = 0
        if ids:
            count = (
                db.query(Visitor)
                .filter(Visitor.id.in_(ids))
                .update({Visitor.name: visitor.name}, synchronize_session=False)
            )
        db.commit()
        return count

    def delete_by_plate(self, plate: str) -> int:
        """Delete exact-match rows. Zero matches is a no-op, not an error."""
        with self.gateway.session() as db:
            ids = [row.id for row in _rows_for_plate(db, plate)]
            count = 0
            if ids:
                count = db.query(Visitor).filter(Visitor.id.in_(ids)).delete(synchronize_session=False)
            db.commit()
        if count:
            logger.info(f"Plate {plate} removed from the database")
        return count


def get_registry(gateway: Gateway = Depends(get_gateway)) -> VisitorRegistry:
    """FastAPI dependency — one registry per request over the app's gateway."""
    return VisitorRegistry(gateway)
