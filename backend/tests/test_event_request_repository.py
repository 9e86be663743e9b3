"""Tests for the event-request read model and repository queries."""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from portal.errors import StorageError
from portal.models.client import Client
from portal.models.event_request import EventRequest, EventRequestStatus, EventType
from portal.models.staff import Role
from portal.repositories.event_request_repository import (
    EventRequestRepository,
    RECORD_COLUMNS,
    to_record,
    unwrap_relation,
)


class TestUnwrapRelation:

    @pytest.mark.parametrize("value", [None, [], ()])
    def test_empty_is_none(self, value):
        assert unwrap_relation(value) is None

    def test_single_object(self):
        obj = object()
        assert unwrap_relation(obj) is obj

    def test_first_of_many(self):
        first, second = {"id": 1}, {"id": 2}
        assert unwrap_relation([first, second]) is first


def _fake_row(**overrides):
    now = datetime(2026, 10, 1, tzinfo=timezone.utc)
    data = {column: None for column in RECORD_COLUMNS}
    data.update(
        id=5,
        client_id=9,
        submitter_id="staff-1",
        event_type="CONCERT",
        status="PENDING",
        review_step="ADMINISTRATION_MANAGER",
        start_time=now,
        finish_time=now + timedelta(hours=4),
        created_at=now,
        client=None,
        submitter=None,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


class TestToRecord:

    def test_duplicate_relation_rows_take_first(self):
        row = _fake_row(
            client=[
                {"id": 9, "name": "First", "email": None, "phone_number": None},
                {"id": 9, "name": "Second", "email": None, "phone_number": None},
            ],
            submitter={"id": "staff-1", "username": "sam", "email": "sam@example.com"},
        )
        record = to_record(row)
        assert record.client.name == "First"
        assert record.submitter.username == "sam"

    def test_missing_relations_are_null(self):
        record = to_record(_fake_row())
        assert record.client is None
        assert record.submitter is None
        assert record.status == EventRequestStatus.PENDING


class TestRepository:

    def _create(self, repo, client_id, submitter_id, start):
        return repo.create(
            client_id=client_id,
            submitter_id=submitter_id,
            event_type=EventType.WORKSHOP,
            start_time=start,
            finish_time=start + timedelta(hours=2),
            preferences=[],
        )

    def test_list_newest_first(self, db, staff):
        client = Client(name="Northwind")
        db.add(client)
        db.commit()
        repo = EventRequestRepository(db)
        start = datetime(2026, 11, 1, 9, tzinfo=timezone.utc)
        first = self._create(repo, client.id, staff[Role.CUSTOMER_SERVICE], start)
        second = self._create(repo, client.id, staff[Role.CUSTOMER_SERVICE], start)

        rows = repo.list_all()
        assert [r.id for r in rows] == [second.id, first.id]
        assert rows[0].client.name == "Northwind"
        assert rows[0].status == EventRequestStatus.DRAFT
        assert rows[0].review_step is None

    def test_fetch_state(self, db, staff):
        client = Client(name="Northwind")
        db.add(client)
        db.commit()
        repo = EventRequestRepository(db)
        row = self._create(repo, client.id, staff[Role.CUSTOMER_SERVICE], datetime(2026, 11, 1, tzinfo=timezone.utc))

        state = repo.fetch_state(row.id)
        assert state.status == EventRequestStatus.DRAFT
        assert state.review_step is None
        assert repo.fetch_state(row.id + 100) is None

    def test_storage_failure_is_wrapped(self, db, monkeypatch):
        repo = EventRequestRepository(db)

        def _boom(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "query", _boom)
        with pytest.raises(StorageError, match="database is locked"):
            repo.list_all()

    def test_pending_without_step_violates_check_constraint(self, db, staff):
        client = Client(name="Northwind")
        db.add(client)
        db.commit()
        repo = EventRequestRepository(db)
        row = self._create(repo, client.id, staff[Role.CUSTOMER_SERVICE], datetime(2026, 11, 1, tzinfo=timezone.utc))

        with pytest.raises(StorageError, match="ck_event_request_pending_has_step"):
            repo.conditional_update(
                row.id, EventRequestStatus.DRAFT, None, {"status": EventRequestStatus.PENDING, "review_step": None}
            )

        state = repo.fetch_state(row.id)
        assert state.status == EventRequestStatus.DRAFT
        assert state.review_step is None


def test_created_at_index_declared_on_model():
    names = {index.name for index in EventRequest.__table__.indexes}
    assert "ix_event_request_created_at" in names
