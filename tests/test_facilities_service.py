"""Tests for the room inventory service against a scripted connection."""

import io

import pytest
from openpyxl import Workbook

from conftest import FakeCursor
from court_facilities.db.models import RoomStatus
from court_facilities.errors import InvalidStatusTransition, NotFoundError
from court_facilities.facilities import FacilitiesService
from court_facilities.schemas import RoomCreate, RoomFilters, RoomUpdate

ROOM_ID = "3f1c2a9e-5d4b-4c3a-9e8f-0a1b2c3d4e5f"
OTHER_ID = "9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d"


def rooms_workbook(*rows):
    wb = Workbook()
    ws = wb.active
    ws.title = "Rooms"
    ws.append(["Room ID", "Name", "Status", "Capacity"])
    for row in rows:
        ws.append(list(row))
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def service(fake_pool, settings):
    return FacilitiesService(fake_pool, settings)


class TestRoomReads:
    def test_get_room(self, service, fake_conn, make_room, room_row):
        fake_conn.script = [FakeCursor(one=room_row(make_room(room_number="1180")))]
        assert service.get_room(ROOM_ID).room_number == "1180"

    def test_missing_room(self, service, fake_conn):
        fake_conn.script = [FakeCursor(one=None)]
        with pytest.raises(NotFoundError):
            service.get_room(ROOM_ID)

    def test_list_rooms_passes_enum_values(self, service, fake_conn, make_room, room_row):
        fake_conn.script = [FakeCursor(many=[room_row(make_room())])]
        rooms = service.list_rooms(RoomFilters(status=RoomStatus.AVAILABLE, search=" 118 "))
        assert len(rooms) == 1
        _, params = fake_conn.executed[0]
        assert "available" in params
        assert "%118%" in params


class TestRoomWrites:
    def test_create_room_skips_unset_values(self, service, fake_conn):
        room_id = service.create_room(RoomCreate(floor_id="floor-10", room_number="1180", capacity=120))
        assert room_id == "id-1"
        _, params = fake_conn.executed[0]
        assert params == ["floor-10", "1180", "office", "available", 120, 0, False]

    def test_update_missing_room(self, service, fake_conn):
        fake_conn.script = [FakeCursor(rowcount=0)]
        with pytest.raises(NotFoundError):
            service.update_room(ROOM_ID, RoomUpdate(name="Part 37"))

    def test_update_skips_soft_deleted_rooms(self, service, fake_conn):
        fake_conn.script = [FakeCursor(rowcount=0)]
        with pytest.raises(NotFoundError):
            service.update_room(ROOM_ID, RoomUpdate(name="Part 37"))
        (statement,) = fake_conn.statements()
        assert statement.startswith("Composed(")
        assert "deleted_at IS NULL" in statement

    def test_delete_missing_room(self, service, fake_conn):
        fake_conn.script = [FakeCursor(rowcount=0)]
        with pytest.raises(NotFoundError):
            service.delete_room(ROOM_ID)


class TestStatusChange:
    def test_allowed_transition(self, service, fake_conn, make_room, room_row):
        fake_conn.script = [
            FakeCursor(one=room_row(make_room(status="available"))),
            FakeCursor(rowcount=1),
            FakeCursor(one=room_row(make_room(status="maintenance"))),
        ]
        room = service.change_room_status(ROOM_ID, RoomStatus.MAINTENANCE)
        assert room.status == "maintenance"
        _, params = fake_conn.executed[1]
        assert params[0] == "maintenance"

    def test_same_status_is_allowed(self, service, fake_conn, make_room, room_row):
        row = room_row(make_room(status="closed"))
        fake_conn.script = [FakeCursor(one=row), FakeCursor(rowcount=1), FakeCursor(one=row)]
        assert service.change_room_status(ROOM_ID, RoomStatus.CLOSED).status == "closed"

    def test_rejected_transition(self, service, fake_conn, make_room, room_row):
        """Maintenance rooms cannot be reserved directly."""
        fake_conn.script = [FakeCursor(one=room_row(make_room(status="maintenance")))]
        with pytest.raises(InvalidStatusTransition, match="from maintenance to reserved"):
            service.change_room_status(ROOM_ID, RoomStatus.RESERVED)
        assert len(fake_conn.executed) == 1


class TestCourtroomPhotos:
    def test_saves_file_and_records_path(self, service, fake_conn, make_room, room_row, settings):
        fake_conn.script = [
            FakeCursor(one=room_row(make_room(courtroom_photos={"audience_view": "old.jpg"}))),
            FakeCursor(rowcount=1),
        ]
        photos = service.save_courtroom_photo(ROOM_ID, "judge_view", "bench shot.jpg", b"jpeg")
        target = settings.upload_dir / "courtroom-photos" / ROOM_ID / "judge_view-bench_shot.jpg"
        assert target.read_bytes() == b"jpeg"
        assert photos == {"audience_view": "old.jpg", "judge_view": str(target)}

    def test_unknown_view(self, service):
        with pytest.raises(ValueError, match="Unknown photo view"):
            service.save_courtroom_photo(ROOM_ID, "ceiling", "x.jpg", b"")


class TestWorkbookImport:
    def test_dry_run_never_writes(self, service, fake_conn):
        content = rooms_workbook([ROOM_ID, "Part 37", "occupied", 120], [OTHER_ID, None, None, None])
        summary = service.import_rooms_workbook(content, dry_run=True)
        assert fake_conn.executed == []
        assert summary["dry_run"] is True
        assert summary["successful"] == 1
        assert [result["status"] for result in summary["results"]] == ["preview", "unchanged"]
        assert summary["results"][0]["changes"] == ["name: Part 37", "status: occupied", "capacity: 120"]

    def test_updates_rows_and_reports_failures(self, service, fake_conn):
        content = rooms_workbook(
            [ROOM_ID, "Part 37", "occupied", None],
            [OTHER_ID, "Part 38", None, None],
            ["not-a-uuid", "Part 39", None, None],
        )
        fake_conn.script = [FakeCursor(rowcount=1), FakeCursor(rowcount=0)]
        summary = service.import_rooms_workbook(content)

        assert summary["total_rows"] == 3
        assert summary["processed"] == 2
        assert summary["successful"] == 1
        assert [result["status"] for result in summary["results"]] == ["updated", "error"]
        assert summary["error_messages"] == [
            'Skipping row: Invalid Room ID format "not-a-uuid"',
            f"Room {OTHER_ID}: Room not found",
        ]
        assert summary["errors"] == 2
        assert fake_conn.transactions == 2

    def test_soft_deleted_rooms_not_updated(self, service, fake_conn):
        """Rows for deleted rooms match nothing and are reported as not found."""
        fake_conn.script = [FakeCursor(rowcount=0)]
        summary = service.import_rooms_workbook(rooms_workbook([ROOM_ID, "Part 37", None, None]))
        assert [result["status"] for result in summary["results"]] == ["error"]
        assert summary["error_messages"] == [f"Room {ROOM_ID}: Room not found"]
        assert all("deleted_at IS NULL" in statement for statement in fake_conn.statements())

    def test_database_error_only_fails_that_row(self, service, fake_conn):
        content = rooms_workbook([ROOM_ID, "Part 37", None, None], [OTHER_ID, "Part 38", None, None])
        fake_conn.script = [RuntimeError("value too long"), FakeCursor(rowcount=1)]
        summary = service.import_rooms_workbook(content)
        assert [result["status"] for result in summary["results"]] == ["error", "updated"]
        assert summary["error_messages"] == [f"Room {ROOM_ID}: value too long"]
