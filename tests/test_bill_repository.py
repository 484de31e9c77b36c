import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from services.bill_repository import BillRepository, compute_total, parse_bill_id
from services.errors import InternalError, InvalidId

ITEMS = [
    {"name": "Widget", "quantity": 3, "price": 2.5},
    {"name": "Gadget", "quantity": 1, "price": 5},
]


def _create(repo, owner_id, customer="Jane", items=ITEMS):
    return repo.create(owner_id, customer, "555-0100", "jane@example.com", items)


class StepClock:
    """Returns t0, t0 + 1s, t0 + 2s, ... on successive calls."""

    def __init__(self, start):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


def test_compute_total():
    assert compute_total(ITEMS) == 12.5
    assert compute_total([]) == 0


@pytest.mark.parametrize("raw", ["", "123", "not-a-uuid", "507f1f77bcf86cd799439011", None])
def test_parse_bill_id_rejects_malformed(raw):
    with pytest.raises(InvalidId):
        parse_bill_id(raw)


def test_parse_bill_id_canonicalizes():
    value = uuid.uuid4()
    assert parse_bill_id(value.hex) == str(value)
    assert parse_bill_id(str(value).upper()) == str(value)


class TestBillRepository:
    def test_create_computes_total_and_assigns_identity(self, db, alice):
        bill = _create(BillRepository(db), alice.id)

        assert bill.total_amount == 12.5
        assert bill.owner_id == alice.id
        assert uuid.UUID(bill.id)
        assert bill.created_at is not None
        assert bill.items == ITEMS

    def test_list_by_owner_most_recent_first(self, db, alice):
        repo = BillRepository(db, clock=StepClock(datetime(2030, 1, 1, tzinfo=timezone.utc)))
        first = _create(repo, alice.id, "first")
        second = _create(repo, alice.id, "second")
        third = _create(repo, alice.id, "third")

        listed = repo.list_by_owner(alice.id)
        assert [b.id for b in listed] == [third.id, second.id, first.id]

    def test_list_ties_broken_by_insertion(self, db, alice):
        moment = datetime(2030, 1, 1, tzinfo=timezone.utc)
        repo = BillRepository(db, clock=lambda: moment)
        first = _create(repo, alice.id, "first")
        second = _create(repo, alice.id, "second")

        assert [b.id for b in repo.list_by_owner(alice.id)] == [second.id, first.id]

    def test_list_only_returns_own_bills(self, db, alice, bob):
        repo = BillRepository(db)
        mine = _create(repo, alice.id)
        _create(repo, bob.id)

        assert [b.id for b in repo.list_by_owner(alice.id)] == [mine.id]

    def test_find_hides_other_owners_bills(self, db, alice, bob):
        repo = BillRepository(db)
        bill = _create(repo, alice.id)

        assert repo.find_by_id_for_owner(alice.id, bill.id).id == bill.id
        assert repo.find_by_id_for_owner(bob.id, bill.id) is None
        assert repo.find_by_id_for_owner(alice.id, str(uuid.uuid4())) is None

    def test_find_malformed_id(self, db, alice):
        with pytest.raises(InvalidId):
            BillRepository(db).find_by_id_for_owner(alice.id, "nope")

    def test_delete(self, db, alice):
        repo = BillRepository(db)
        bill = _create(repo, alice.id)

        assert repo.delete_by_id_for_owner(alice.id, bill.id) is True
        assert repo.delete_by_id_for_owner(alice.id, bill.id) is False
        assert repo.list_by_owner(alice.id) == []

    def test_delete_other_owners_bill_is_noop(self, db, alice, bob):
        repo = BillRepository(db)
        bill = _create(repo, alice.id)

        assert repo.delete_by_id_for_owner(bob.id, bill.id) is False
        assert repo.find_by_id_for_owner(alice.id, bill.id) is not None


class TestStorageFailures:
    def _broken_session(self):
        session = MagicMock()
        session.commit.side_effect = OperationalError("COMMIT", {}, Exception("database is locked"))
        return session

    def test_create_surfaces_internal_error(self):
        session = self._broken_session()
        with pytest.raises(InternalError):
            _create(BillRepository(session), "owner")
        session.rollback.assert_called_once()

    def test_delete_surfaces_internal_error(self):
        session = self._broken_session()
        with pytest.raises(InternalError):
            BillRepository(session).delete_by_id_for_owner("owner", str(uuid.uuid4()))
        session.rollback.assert_called_once()
