"""Tests für die Kernlogik: Uhrzeiten, Überschneidung, Status, Konflikte, Suche, Buchung."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from models.intent import BookingIntent, SearchIntent
from models.reservation import Reservation
from models.room import AdminStatus, Room
from models.status import RoomStatus
from models.weekday import Weekday
from scheduling.booking import draft_from_booking, find_room_by_name
from scheduling.conflict import check_conflict
from scheduling.errors import ConflictError, NotFoundError, ParseError
from scheduling.overlap import contains, overlaps
from scheduling.search import apply_intent, merge_intent, search_rooms
from scheduling.status import build_room_views, resolve_status
from scheduling.timecodec import decode, encode, hour_label, normalize
from store.schedule_store import ScheduleStore

# 1. Januar 2024 ist ein Montag
MONDAY_0930 = datetime(2024, 1, 1, 9, 30)
MONDAY_1230 = datetime(2024, 1, 1, 12, 30)
TUESDAY_0930 = datetime(2024, 1, 2, 9, 30)


def _res(room_id: int, start: str, end: str, day: Weekday = Weekday.MONDAY,
         subject: str = "Math 101", res_id=None) -> Reservation:
    return Reservation(id=res_id, room_id=room_id, day=day, subject=subject,
                       professor="Dr. Smith", start_time=start, end_time=end)


@pytest.fixture
def campus() -> ScheduleStore:
    """Kleiner Campus: Hörsaal mit Doppelblock, Rechnerraum, Labor (Wartung), Konferenzraum (reserviert)."""
    store = ScheduleStore()
    hall = store.insert_room(Room(name="101-A", room_type="Lecture Hall", capacity=120,
                                  equipment="Projector,WiFi"))
    cl5 = store.insert_room(Room(name="CL5", room_type="Computer Lab", capacity=40,
                                 equipment=["Computer", "Projector", "AC"]))
    lab = store.insert_room(Room(name="LAB-2", room_type="Laboratory", capacity=24,
                                 status=AdminStatus.MAINTENANCE))
    store.insert_room(Room(name="CONF-3", room_type="Conference Room", capacity=16,
                           status=AdminStatus.RESERVED, equipment="Smart TV"))

    store.insert_reservation(_res(hall, "9:00 AM", "10:30 AM", subject="Math 101"))
    store.insert_reservation(_res(hall, "10:30 AM", "12:00 PM", subject="Physics 201"))
    store.insert_reservation(_res(cl5, "1:00 PM", "3:00 PM", subject="Programming 1"))
    store.insert_reservation(_res(lab, "9:00 AM", "10:00 AM", subject="Chemistry 110"))
    return store


# ─── UHRZEIT-KODIERUNG ────────────────────────────────────────────────────────

class TestTimeCodec:
    @pytest.mark.parametrize("clock,expected", [
        ("9:00 AM", 9.0),
        ("1:30 PM", 13.5),
        ("12:00 AM", 0.0),
        ("12:30 PM", 12.5),
        ("11:45 pm", 23.75),
        ("13:15", 13.25),
        (" 7:05 AM ", 7 + 5 / 60),
    ])
    def test_encode(self, clock, expected):
        assert encode(clock) == pytest.approx(expected)

    def test_encode_is_monotonic(self):
        """Spätere Uhrzeiten ergeben größere Werte, über Mittag und Mitternacht hinweg."""
        clocks = ["12:00 AM", "12:30 AM", "1:00 AM", "9:00 AM", "11:59 AM",
                  "12:00 PM", "12:01 PM", "1:00 PM", "11:59 PM"]
        values = [encode(c) for c in clocks]
        assert values == sorted(values)
        assert len(set(values)) == len(values)
        assert values[-1] == pytest.approx(23 + 59 / 60)

    def test_empty_string_is_midnight(self):
        """Leerer String ergibt 0.0 statt eines Fehlers."""
        assert encode("") == 0.0
        assert encode("   ") == 0.0

    @pytest.mark.parametrize("clock", ["abc", "25:00", "9:60 AM", "13:00 PM", "0:30 AM", "9 AM"])
    def test_encode_rejects_garbage(self, clock):
        with pytest.raises(ParseError) as exc:
            encode(clock)
        assert exc.value.value == clock
        assert isinstance(exc.value, ValueError)

    def test_decode(self):
        assert decode(13.5) == "1:30 PM"
        assert decode(0.0) == "12:00 AM"
        assert decode(12.0) == "12:00 PM"
        assert decode(9.25) == "9:15 AM"

    def test_normalize(self):
        assert normalize("09:00 am") == "9:00 AM"
        assert normalize("14:00") == "2:00 PM"

    def test_hour_label(self):
        assert hour_label(7) == "7 AM"
        assert hour_label(12) == "12 PM"
        assert hour_label(13) == "1 PM"

    def test_weekday(self):
        assert Weekday.of(MONDAY_0930) == Weekday.MONDAY
        assert Weekday.of(TUESDAY_0930) == Weekday.TUESDAY
        assert Weekday.parse(" mon ") == Weekday.MONDAY
        assert Weekday.parse("friday") == Weekday.FRIDAY
        assert Weekday.parse("someday") is None


# ─── ÜBERSCHNEIDUNG ───────────────────────────────────────────────────────────

class TestOverlap:
    def test_back_to_back_does_not_overlap(self):
        """10:00 Ende und 10:00 Beginn berühren sich nur."""
        assert not overlaps(9.0, 10.0, 10.0, 11.0)
        assert not overlaps(10.0, 11.0, 9.0, 10.0)

    def test_partial_and_contained(self):
        assert overlaps(9.0, 10.5, 10.0, 11.0)
        assert overlaps(9.0, 12.0, 10.0, 11.0)
        assert overlaps(10.0, 11.0, 10.0, 11.0)

    def test_disjoint(self):
        assert not overlaps(8.0, 9.0, 13.0, 14.0)

    def test_contains_half_open(self):
        assert contains(9.0, 10.5, 9.0)
        assert contains(9.0, 10.5, 10.0)
        assert not contains(9.0, 10.5, 10.5)


# ─── STATUS ───────────────────────────────────────────────────────────────────

class TestStatus:
    def test_running_class_means_occupied(self, campus: ScheduleStore):
        room = find_room_by_name(campus.list_rooms(), "101-A")
        info = resolve_status(room, campus.list_reservations(room.id, Weekday.MONDAY),
                              MONDAY_0930)
        assert info.status == RoomStatus.OCCUPIED
        assert info.color == "red"

    def test_class_end_is_available(self, campus: ScheduleStore):
        """Zum Endzeitpunkt der letzten Veranstaltung ist der Raum frei."""
        room = find_room_by_name(campus.list_rooms(), "101-A")
        info = resolve_status(room, campus.list_reservations(room.id, Weekday.MONDAY),
                              datetime(2024, 1, 1, 12, 0))
        assert info.status == RoomStatus.AVAILABLE
        assert info.color == "green"

    def test_maintenance_beats_schedule(self, campus: ScheduleStore):
        """Wartung gewinnt, auch wenn gerade eine Veranstaltung läuft."""
        room = find_room_by_name(campus.list_rooms(), "LAB-2")
        info = resolve_status(room, campus.list_reservations(room.id, Weekday.MONDAY),
                              MONDAY_0930)
        assert info.status == RoomStatus.MAINTENANCE
        assert info.color == "orange"

    def test_reserved_is_blue(self, campus: ScheduleStore):
        room = find_room_by_name(campus.list_rooms(), "CONF-3")
        info = resolve_status(room, [], MONDAY_0930)
        assert info.status == RoomStatus.RESERVED
        assert info.color == "blue"

    def test_views_use_today_for_status_and_day_for_schedule(self, campus: ScheduleStore):
        """Status nach dem Wochentag von `now`, Stundenplan nach dem angezeigten Tag."""
        views = build_room_views(campus, Weekday.TUESDAY, MONDAY_0930)
        hall = next(v for v in views if v.name == "101-A")
        assert hall.status == RoomStatus.OCCUPIED
        assert hall.day == Weekday.TUESDAY
        assert hall.daily_schedule == []

    def test_views_schedule_sorted(self, campus: ScheduleStore):
        views = build_room_views(campus, Weekday.MONDAY, TUESDAY_0930)
        hall = next(v for v in views if v.name == "101-A")
        assert hall.status == RoomStatus.AVAILABLE
        assert [r.subject for r in hall.daily_schedule] == ["Math 101", "Physics 201"]


# ─── KONFLIKTPRÜFUNG ──────────────────────────────────────────────────────────

class TestConflict:
    def test_overlap_is_reported(self, campus: ScheduleStore):
        result = check_conflict(1, Weekday.MONDAY, "10:00 AM", "11:00 AM",
                                campus.all_reservations())
        assert result.conflict
        assert not result.ok
        assert result.conflict_with.subject == "Math 101"

    def test_back_to_back_is_fine(self, campus: ScheduleStore):
        result = check_conflict(1, Weekday.MONDAY, "12:00 PM", "1:00 PM",
                                campus.all_reservations())
        assert result.ok
        assert result.conflict_with is None

    def test_other_day_or_room_ignored(self, campus: ScheduleStore):
        existing = campus.all_reservations()
        assert check_conflict(1, Weekday.TUESDAY, "9:00 AM", "10:00 AM", existing).ok
        assert check_conflict(4, Weekday.MONDAY, "9:00 AM", "10:00 AM", existing).ok

    def test_single_reservation_overlap_and_adjacent(self):
        """Eine Reservierung 9:00–10:30: 10:00–11:00 kollidiert, 10:30–11:00 nicht."""
        store = ScheduleStore()
        room_a = store.insert_room(Room(name="Room A", room_type="Seminar Room", capacity=30))
        existing_id = store.insert_reservation(_res(room_a, "9:00 AM", "10:30 AM"))

        result = check_conflict(room_a, Weekday.MONDAY, "10:00 AM", "11:00 AM",
                                store.all_reservations())
        assert result.conflict
        assert result.conflict_with.id == existing_id

        with pytest.raises(ConflictError) as exc:
            store.insert_reservation(_res(room_a, "10:00 AM", "11:00 AM", subject="Biology"))
        assert exc.value.reservation.id == existing_id

        assert check_conflict(room_a, Weekday.MONDAY, "10:30 AM", "11:00 AM",
                              store.all_reservations()).ok
        store.insert_reservation(_res(room_a, "10:30 AM", "11:00 AM", subject="Biology"))
        assert len(store.list_reservations(room_a, Weekday.MONDAY)) == 2

    def test_exclude_self(self, campus: ScheduleStore):
        math = next(r for r in campus.all_reservations() if r.subject == "Math 101")
        result = check_conflict(1, Weekday.MONDAY, "9:00 AM", "10:00 AM",
                                campus.all_reservations(), exclude_id=math.id)
        assert result.ok

    def test_invalid_time_raises(self, campus: ScheduleStore):
        with pytest.raises(ParseError):
            check_conflict(1, Weekday.MONDAY, "nine", "10:00 AM", campus.all_reservations())


# ─── SUCHE ────────────────────────────────────────────────────────────────────

class TestSearch:
    def test_empty_intent_is_identity(self, campus: ScheduleStore):
        views = build_room_views(campus, Weekday.MONDAY, MONDAY_0930)
        assert apply_intent(views, SearchIntent()) == views

    def test_wildcard_type(self, campus: ScheduleStore):
        views = build_room_views(campus, Weekday.MONDAY, MONDAY_0930)
        assert len(apply_intent(views, SearchIntent(filter_type="All"))) == 4

    def test_type_filter_case_insensitive(self, campus: ScheduleStore):
        views = build_room_views(campus, Weekday.MONDAY, MONDAY_0930)
        result = apply_intent(views, SearchIntent(filter_type="computer lab"))
        assert [v.name for v in result] == ["CL5"]

    def test_keyword_matches_name_or_type(self, campus: ScheduleStore):
        views = build_room_views(campus, Weekday.MONDAY, MONDAY_0930)
        assert [v.name for v in apply_intent(views, SearchIntent(search_keyword="cl5"))] == ["CL5"]
        assert [v.name for v in apply_intent(views, SearchIntent(search_keyword="hall"))] == ["101-A"]

    def test_time_window_excludes_busy_rooms(self, campus: ScheduleStore):
        views = build_room_views(campus, Weekday.MONDAY, MONDAY_0930)
        result = apply_intent(views, SearchIntent(time_start=13.5))
        assert "CL5" not in [v.name for v in result]
        assert "101-A" in [v.name for v in result]

    def test_time_window_default_length_one_hour(self, campus: ScheduleStore):
        """Ohne Ende gilt [start, start+1): 12:00 ist direkt nach Physics 201 frei."""
        views = build_room_views(campus, Weekday.MONDAY, MONDAY_0930)
        names = [v.name for v in apply_intent(views, SearchIntent(time_start=12.0))]
        assert "101-A" in names
        assert "CL5" not in [v.name for v in apply_intent(views, SearchIntent(time_start=12.5))]

    def test_status_filter(self, campus: ScheduleStore):
        views = build_room_views(campus, Weekday.MONDAY, MONDAY_0930)
        result = apply_intent(views, SearchIntent(target_status="available"))
        assert [v.name for v in result] == ["CL5"]

    def test_capacity_and_equipment(self, campus: ScheduleStore):
        views = build_room_views(campus, Weekday.MONDAY, MONDAY_0930)
        assert [v.name for v in apply_intent(views, SearchIntent(min_capacity=100))] == ["101-A"]
        result = apply_intent(views, SearchIntent(equipment=["projector", "AC"]))
        assert [v.name for v in result] == ["CL5"]

    def test_inverted_window_drops_end(self):
        intent = SearchIntent(time_start=14, time_end=13)
        assert intent.time_start == 14
        assert intent.time_end is None

    def test_busy_window_excludes_room_free_window_includes_it(self):
        """Hörsaal mit Montag 9:00–10:30 fällt bei 9–10 heraus und ist bei 11–12 dabei."""
        store = ScheduleStore()
        hall = store.insert_room(Room(name="101-A", room_type="Lecture Hall", capacity=120))
        assert hall == 1
        store.insert_reservation(_res(hall, "9:00 AM", "10:30 AM"))

        busy = search_rooms(store, SearchIntent(day="Monday", time_start=9, time_end=10),
                            Weekday.MONDAY, MONDAY_0930)
        assert busy == []
        free = search_rooms(store, SearchIntent(time_start=11, time_end=12),
                            Weekday.MONDAY, MONDAY_0930)
        assert [v.id for v in free] == [1]

    def test_end_to_end_free_lecture_hall(self, campus: ScheduleStore):
        """Montag 13:30, freie Räume: nur der Hörsaal bleibt übrig."""
        intent = SearchIntent(day="Monday", time_start=13.5, target_status="Available")
        result = search_rooms(campus, intent, Weekday.TUESDAY, MONDAY_1230)
        assert [v.name for v in result] == ["101-A"]


class TestMergeIntent:
    def test_none_keeps_manual(self):
        manual = SearchIntent(day="Monday", filter_type="Laboratory", search_keyword="lab")
        assert merge_intent(manual, None) == manual

    def test_known_type_replaces_manual(self):
        manual = SearchIntent(filter_type="Laboratory")
        merged = merge_intent(manual, SearchIntent(filter_type="Computer Lab"))
        assert merged.filter_type == "Computer Lab"

    def test_unknown_type_keeps_manual(self):
        manual = SearchIntent(filter_type="Laboratory")
        merged = merge_intent(manual, SearchIntent(filter_type="Gym"))
        assert merged.filter_type == "Laboratory"

    def test_ai_fields_win(self):
        manual = SearchIntent(day="Monday", search_keyword="free text", min_capacity=30)
        ai = SearchIntent(day="Wednesday", time_start=13, time_end=14, target_status="Available")
        merged = merge_intent(manual, ai)
        assert merged.day == Weekday.WEDNESDAY
        assert merged.search_keyword is None
        assert (merged.time_start, merged.time_end) == (13, 14)
        assert merged.target_status == "Available"
        assert merged.min_capacity == 30

    def test_ai_without_day_keeps_manual_day(self):
        merged = merge_intent(SearchIntent(day="Friday"), SearchIntent(search_keyword="CL5"))
        assert merged.day == Weekday.FRIDAY
        assert merged.search_keyword == "CL5"

    def test_ai_capacity_and_equipment_carry_over(self):
        ai = SearchIntent.model_validate({"minCapacity": 100, "equipment": ["Projector"]})
        merged = merge_intent(SearchIntent(filter_type="All"), ai)
        assert merged.min_capacity == 100
        assert merged.equipment == ["Projector"]

        store = ScheduleStore()
        store.insert_room(Room(name="101-A", room_type="Lecture Hall", capacity=120,
                               equipment=["Projector"]))
        store.insert_room(Room(name="SH-1", room_type="Study Hall", capacity=10))
        result = search_rooms(store, merged, Weekday.MONDAY, MONDAY_0930)
        assert [v.name for v in result] == ["101-A"]

    def test_manual_capacity_and_equipment_kept_without_ai_values(self):
        manual = SearchIntent(min_capacity=30, equipment=["AC"])
        merged = merge_intent(manual, SearchIntent(search_keyword="CL5"))
        assert merged.min_capacity == 30
        assert merged.equipment == ["AC"]


# ─── BUCHUNG ──────────────────────────────────────────────────────────────────

class TestBooking:
    def test_find_room_exact_then_partial(self, campus: ScheduleStore):
        rooms = campus.list_rooms()
        assert find_room_by_name(rooms, "cl5").name == "CL5"
        assert find_room_by_name(rooms, "CONF").name == "CONF-3"

    def test_find_room_ambiguous_or_unknown(self, campus: ScheduleStore):
        rooms = campus.list_rooms()
        with pytest.raises(NotFoundError):
            find_room_by_name(rooms, "-")
        with pytest.raises(NotFoundError):
            find_room_by_name(rooms, "Gym")
        with pytest.raises(NotFoundError):
            find_room_by_name(rooms, None)

    def test_draft_from_booking(self, campus: ScheduleStore):
        intent = BookingIntent(subject="Databases", room_name="CL5", day="tue",
                               start_time="10:00 am", end_time="11:30 AM",
                               professor="Dr. Rossi")
        draft = draft_from_booking(intent, campus.list_rooms())
        assert draft.id is None
        assert draft.room_id == find_room_by_name(campus.list_rooms(), "CL5").id
        assert draft.day == Weekday.TUESDAY
        assert (draft.start_time, draft.end_time) == ("10:00 AM", "11:30 AM")

    def test_draft_uses_default_day(self, campus: ScheduleStore):
        intent = BookingIntent(subject="Databases", room_name="CL5",
                               start_time="10:00 AM", end_time="11:00 AM",
                               professor="Dr. Rossi")
        draft = draft_from_booking(intent, campus.list_rooms(), default_day=Weekday.FRIDAY)
        assert draft.day == Weekday.FRIDAY

    def test_draft_with_missing_fields_is_invalid(self, campus: ScheduleStore):
        intent = BookingIntent(subject="Databases", room_name="CL5", day="Monday")
        with pytest.raises(ValidationError):
            draft_from_booking(intent, campus.list_rooms())


# ─── MODELLE ──────────────────────────────────────────────────────────────────

class TestModels:
    def test_reservation_normalizes_times(self):
        res = _res(1, "09:00 am", "13:30")
        assert res.start_time == "9:00 AM"
        assert res.end_time == "1:30 PM"
        assert res.start_hours == 9.0

    def test_reservation_rejects_inverted_or_blank(self):
        with pytest.raises(ValidationError):
            _res(1, "10:00 AM", "9:00 AM")
        with pytest.raises(ValidationError):
            _res(1, "10:00 AM", "10:00 AM")
        with pytest.raises(ValidationError):
            _res(1, "", "9:00 AM")

    def test_reservation_rejects_unknown_day(self):
        with pytest.raises(ValidationError):
            Reservation(room_id=1, day="Someday", subject="X", professor="Y",
                        start_time="9:00 AM", end_time="10:00 AM")

    def test_room_equipment_roundtrip(self):
        room = Room(name="CL5", type="computer lab", capacity=40,
                    equipment="Projector, WiFi,Projector")
        assert room.room_type == "Computer Lab"
        assert room.equipment == ["Projector", "WiFi"]
        assert room.model_dump(by_alias=True)["equipment"] == "Projector,WiFi"
        assert room.has_equipment("wifi")

    def test_room_status_defaults(self):
        room = Room(name="X", room_type="Study Hall", capacity=10, status="")
        assert room.status == AdminStatus.AVAILABLE
        assert not room.is_blocked
        assert Room(name="X", room_type="Study Hall", capacity=10,
                    status="maintenance").is_blocked

    def test_room_rejects_unknown_type_and_capacity(self):
        with pytest.raises(ValidationError):
            Room(name="X", room_type="Gym", capacity=10)
        with pytest.raises(ValidationError):
            Room(name="X", room_type="Study Hall", capacity=0)
