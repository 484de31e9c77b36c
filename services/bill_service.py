# services/bill_service.py
import logging
import math
from typing import Any, Dict, List

import jsonschema

from database.models import Bill
from services.bill_repository import BillRepository
from services.errors import NotFound, ValidationError

logger = logging.getLogger("services.bill_service")

NON_BLANK = {"type": "string", "pattern": r"\S"}

# keeps quantity * price well inside float range
MAX_QUANTITY = 1_000_000
MAX_PRICE = 1_000_000_000

BILL_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["customerName", "customerPhone", "customerEmail", "items"],
    "properties": {
        "customerName": NON_BLANK,
        "customerPhone": NON_BLANK,
        "customerEmail": {"type": "string", "format": "email", "pattern": r"\S"},
        "items": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["name", "quantity", "price"],
                "properties": {
                    "name": NON_BLANK,
                    "quantity": {"type": "integer", "exclusiveMinimum": 0, "maximum": MAX_QUANTITY},
                    "price": {"type": "number", "minimum": 0, "maximum": MAX_PRICE},
                },
            },
        },
    },
}


class BillService:
    """
    Bill use cases for an authenticated owner: validate the payload, then
    hand off to the repository.
    """

    def __init__(self, repository: BillRepository):
        self.repository = repository
        self.validator = jsonschema.Draft7Validator(BILL_SCHEMA, format_checker=jsonschema.FormatChecker())

    def validate_payload(self, payload: Any) -> List[Dict[str, Any]]:
        errors: List[Dict[str, Any]] = []
        for error in sorted(self.validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
            errors.append(
                {
                    "field": ".".join(str(p) for p in error.path) or None,
                    "message": error.message,
                }
            )
        if errors:
            return errors

        # NaN compares false against both bounds, so the schema lets it through
        for i, item in enumerate(payload["items"]):
            if not math.isfinite(item["price"]):
                errors.append({"field": f"items.{i}.price", "message": f"{item['price']!r} is not a finite number"})
        return errors

    def create_bill(self, owner_id: str, payload: Dict[str, Any]) -> Bill:
        errors = self.validate_payload(payload)
        if errors:
            raise ValidationError(errors)

        items = [
            {
                "name": item["name"].strip(),
                "quantity": int(item["quantity"]),
                "price": item["price"],
            }
            for item in payload["items"]
        ]
        bill = self.repository.create(
            owner_id,
            customer_name=payload["customerName"].strip(),
            customer_phone=payload["customerPhone"].strip(),
            customer_email=payload["customerEmail"].strip(),
            items=items,
        )
        logger.info("Created bill %s for owner %s", bill.id, owner_id)
        return bill

    def list_bills(self, owner_id: str) -> List[Bill]:
        return self.repository.list_by_owner(owner_id)

    def get_bill(self, owner_id: str, bill_id: str) -> Bill:
        bill = self.repository.find_by_id_for_owner(owner_id, bill_id)
        if bill is None:
            raise NotFound()
        return bill

    def delete_bill(self, owner_id: str, bill_id: str) -> None:
        if not self.repository.delete_by_id_for_owner(owner_id, bill_id):
            raise NotFound()
        logger.info("Deleted bill %s for owner %s", bill_id, owner_id)
