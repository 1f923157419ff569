import pytest

from services.workshop_service import slots
from shared.errors import CapacityExceeded, NotFound, ValidationFailed

FLAT = [
    {"date": "2024-01-02", "time": "2:00 PM", "max_spots": 8, "booked": 8},
    {"date": "2024-01-01", "time": "10:00", "max_spots": 10, "booked": 7},
    {"date": "2024-01-01", "time": "4:00 PM", "max_spots": 6, "booked": 0},
]


def test_flat_records_are_grouped_by_date_in_order():
    groups = slots.parse_time_slots(FLAT)

    assert [g.date for g in groups] == ["2024-01-01", "2024-01-02"]
    assert [s.time for s in groups[0].slots] == ["10:00", "4:00 PM"]


def test_grouped_records_pass_through():
    raw = [{"date": "2024-03-01", "slots": [{"time": "11:00", "max_spots": 4, "booked": 1}]}]

    groups = slots.parse_time_slots(raw)

    assert len(groups) == 1
    assert groups[0].slots[0].available == 3


def test_legacy_records_use_fallback_date():
    raw = [{"time": "10:00", "max_spots": 5, "booked": 2}]

    assert slots.parse_time_slots(raw) == []
    groups = slots.parse_time_slots(raw, fallback_date="2024-05-05")
    assert groups[0].date == "2024-05-05"


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "not a list",
        [],
        ["string"],
        [{"foo": "bar"}],
        [{"date": "2024-01-01", "time": "10:00", "max_spots": "10", "booked": 0}],
        [{"date": "2024-01-01", "time": "10:00", "max_spots": True, "booked": 0}],
    ],
)
def test_malformed_slot_data_yields_empty_list(raw):
    assert slots.parse_time_slots(raw) == []


def test_summary_totals_match_flat_records():
    summary = slots.summarize(slots.parse_time_slots(FLAT))

    assert summary.total_booked == 15
    assert summary.total_max_spots == 24
    assert summary.total_available == 9


def test_flatten_inverts_grouping():
    groups = slots.group_slots_by_date(FLAT)

    flat = slots.flatten_date_slots(groups)

    assert sorted(flat, key=lambda r: (r["date"], r["time"])) == sorted(FLAT, key=lambda r: (r["date"], r["time"]))


def test_available_spots_never_negative():
    assert slots.available_spots(slots.TimeSlot("10:00", max_spots=3, booked=5)) == 0


def test_full_slot_is_flagged():
    groups = slots.parse_time_slots(FLAT)
    slot = slots.find_slot(groups, "2024-01-02", "2:00 PM")

    assert slot.is_full
    assert slots.find_slot(groups, "2024-01-02", "9:00 PM") is None


@pytest.mark.parametrize("available, expected", [(10, 6), (6, 6), (3, 3), (0, 0), (-2, 0)])
def test_guest_ceiling(available, expected):
    assert slots.max_guests_per_booking(available) == expected


def test_capacity_check_against_remaining_spots():
    slot = slots.TimeSlot("10:00", max_spots=10, booked=7)

    with pytest.raises(CapacityExceeded, match="Only 3 spots available"):
        slots.check_capacity(slot, 5)
    slots.check_capacity(slot, 3)


def test_capacity_check_enforces_per_booking_cap():
    slot = slots.TimeSlot("10:00", max_spots=20, booked=0)

    with pytest.raises(ValidationFailed):
        slots.check_capacity(slot, 7)
    with pytest.raises(ValidationFailed):
        slots.check_capacity(slot, 0)


def test_increment_returns_updated_copy():
    updated = slots.increment_booked(FLAT, "2024-01-01", "10:00", 3)

    assert updated[1]["booked"] == 10
    assert FLAT[1]["booked"] == 7


def test_increment_refuses_to_overbook():
    with pytest.raises(CapacityExceeded):
        slots.increment_booked(FLAT, "2024-01-01", "10:00", 4)


def test_increment_unknown_slot():
    with pytest.raises(NotFound, match="Time slot not found"):
        slots.increment_booked(FLAT, "2024-01-01", "11:00", 1)


def test_slot_row_validation_collects_every_error():
    rows = [
        {"date": "", "time": " ", "max_spots": 0, "booked": 0},
        {"date": "2024-01-01", "time": "10:00", "max_spots": 2, "booked": 3},
    ]

    with pytest.raises(ValidationFailed) as exc:
        slots.validate_slot_rows(rows)

    message = exc.value.message
    assert "slot 0: date is required" in message
    assert "slot 0: time is required" in message
    assert "slot 0: max_spots must be at least 1" in message
    assert "slot 1: booked cannot exceed max_spots" in message
