# services/bill_repository.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.models import Bill
from services.errors import InternalError, InvalidId

logger = logging.getLogger("services.bill_repository")


def compute_total(items: Iterable[Dict[str, Any]]) -> float:
    return sum(item["quantity"] * item["price"] for item in items)


def parse_bill_id(raw: str) -> str:
    """Return the canonical form of a bill id, or raise InvalidId."""
    try:
        return str(uuid.UUID(str(raw)))
    except (ValueError, AttributeError, TypeError):
        raise InvalidId()


class BillRepository:
    """
    Bill persistence. Every method is scoped to an owner; there is
    deliberately no way to read or delete a bill by id alone.
    """

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _owned(self, owner_id: str):
        return self.db.query(Bill).filter(Bill.owner_id == owner_id)

    def create(
        self,
        owner_id: str,
        customer_name: str,
        customer_phone: str,
        customer_email: str,
        items: List[Dict[str, Any]],
    ) -> Bill:
        bill = Bill(
            owner_id=owner_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            customer_email=customer_email,
            items=[dict(item) for item in items],
            total_amount=compute_total(items),
            created_at=self.clock(),
        )
        self.db.add(bill)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to save bill for owner %s", owner_id)
            raise InternalError()
        self.db.refresh(bill)
        return bill

    def list_by_owner(self, owner_id: str) -> List[Bill]:
        try:
            return self._owned(owner_id).order_by(Bill.created_at.desc(), Bill.seq.desc()).all()
        except SQLAlchemyError:
            logger.exception("Failed to list bills for owner %s", owner_id)
            raise InternalError()

    def find_by_id_for_owner(self, owner_id: str, bill_id: str) -> Optional[Bill]:
        bill_id = parse_bill_id(bill_id)
        try:
            return self._owned(owner_id).filter(Bill.id == bill_id).first()
        except SQLAlchemyError:
            logger.exception("Failed to load bill %s", bill_id)
            raise InternalError()

    def delete_by_id_for_owner(self, owner_id: str, bill_id: str) -> bool:
        bill_id = parse_bill_id(bill_id)
        try:
            deleted = self._owned(owner_id).filter(Bill.id == bill_id).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete bill %s", bill_id)
            raise InternalError()
        return deleted > 0
