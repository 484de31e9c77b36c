import logging
from datetime import datetime, timezone
from typing import Any, List

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from api.auth import get_auth_context
from database.db_session import get_db
from database.models import Bill
from services.bill_repository import BillRepository
from services.bill_service import BillService
from services.errors import ValidationError
from services.guard import AuthContext

# Logging
logger = logging.getLogger("api.bills")
router = APIRouter(prefix="/bills", tags=["bills"])


class LineItemOut(BaseModel):
    name: str
    quantity: int
    price: float


class BillOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    owner_id: str
    customer_name: str
    customer_phone: str
    customer_email: str
    items: List[LineItemOut]
    total_amount: float
    date: datetime

    @classmethod
    def from_bill(cls, bill: Bill) -> "BillOut":
        created = bill.created_at
        if created.tzinfo is None:
            # SQLite hands datetimes back without tzinfo; they are stored as UTC
            created = created.replace(tzinfo=timezone.utc)
        return cls(
            id=bill.id,
            owner_id=bill.owner_id,
            customer_name=bill.customer_name,
            customer_phone=bill.customer_phone,
            customer_email=bill.customer_email,
            items=bill.items,
            total_amount=bill.total_amount,
            date=created,
        )


def get_bill_service(db: Session = Depends(get_db)) -> BillService:
    return BillService(BillRepository(db))


async def read_json_body(request: Request) -> Any:
    """Request body as parsed JSON."""
    # routes list this after get_auth_context so anonymous callers get 401 first
    try:
        return await request.json()
    except ValueError:
        logger.info("Rejected bill body that is not valid JSON")
        raise ValidationError([{"field": None, "message": "Request body must be valid JSON"}])


@router.post("", response_model=BillOut, status_code=201)
def create_bill(
    user: AuthContext = Depends(get_auth_context),
    payload: Any = Depends(read_json_body),
    bills: BillService = Depends(get_bill_service),
):
    bill = bills.create_bill(user.user_id, payload)
    return BillOut.from_bill(bill)


@router.get("", response_model=List[BillOut])
def list_bills(user: AuthContext = Depends(get_auth_context), bills: BillService = Depends(get_bill_service)):
    return [BillOut.from_bill(b) for b in bills.list_bills(user.user_id)]


@router.get("/{bill_id}", response_model=BillOut)
def get_bill(bill_id: str, user: AuthContext = Depends(get_auth_context), bills: BillService = Depends(get_bill_service)):
    return BillOut.from_bill(bills.get_bill(user.user_id, bill_id))


@router.delete("/{bill_id}")
def delete_bill(bill_id: str, user: AuthContext = Depends(get_auth_context), bills: BillService = Depends(get_bill_service)):
    bills.delete_bill(user.user_id, bill_id)
    return {"msg": "Bill deleted successfully"}
