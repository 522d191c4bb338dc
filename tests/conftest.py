"""Shared fixtures: room factory, scripted fake connection and pool."""

from __future__ import annotations

import dataclasses
from contextlib import contextmanager
from datetime import datetime

import pytest

from court_facilities.config import Settings
from court_facilities.db.models import RoomRecord


class FakeCursor:
    def __init__(self, one=None, many=None, rowcount=1):
        self._one = one
        self._many = many or []
        self.rowcount = rowcount

    def fetchone(self):
        return self._one

    def fetchall(self):
        return list(self._many)


class FakeConnection:
    """Records executed statements and replays scripted cursors in order.

    When the script runs out, INSERT ... RETURNING id style calls get a fresh
    ``{"id": "id-<n>"}`` row and ``rowcount`` 1.
    """

    def __init__(self, script=None):
        self.script = list(script or [])
        self.executed = []
        self.commits = 0
        self.transactions = 0

    def execute(self, statement, params=None):
        self.executed.append((statement, params))
        if self.script:
            result = self.script.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return FakeCursor(one={"id": f"id-{len(self.executed)}"})

    @contextmanager
    def transaction(self):
        self.transactions += 1
        yield self

    def commit(self):
        self.commits += 1

    def statements(self) -> list[str]:
        return [statement if isinstance(statement, str) else repr(statement) for statement, _ in self.executed]


class FakePool:
    def __init__(self, conn=None):
        self.conn = conn or FakeConnection()
        self.closed = False

    @contextmanager
    def connection(self):
        yield self.conn

    def open(self, wait=False):
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url="postgresql://test/court_facilities",
        upload_dir=tmp_path / "uploads",
        ocr_enabled=False,
        import_demo_fallback=False,
    )


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def fake_pool(fake_conn) -> FakePool:
    return FakePool(fake_conn)


@pytest.fixture
def make_room():
    def _make_room(**overrides) -> RoomRecord:
        values = dict(
            id="3f1c2a9e-5d4b-4c3a-9e8f-0a1b2c3d4e5f",
            floor_id="floor-10",
            room_number="1000",
            name=None,
            room_type="courtroom",
            status="available",
            description=None,
            capacity=None,
            current_occupancy=0,
            phone_number=None,
            is_storage=False,
            storage_type=None,
            storage_capacity=None,
            storage_notes=None,
            courtroom_photos=None,
            created_at=datetime(2025, 1, 6, 9, 0),
            building_id="building-100",
            building_name="100 Centre Street",
            floor_name="Floor 10",
            floor_number=10,
        )
        values.update(overrides)
        return RoomRecord(**values)

    return _make_room


@pytest.fixture
def room_row():
    """Turn a RoomRecord into the dict a dict_row cursor would return."""

    def _room_row(room: RoomRecord) -> dict:
        return dataclasses.asdict(room)

    return _room_row
