"""
Workshop slot capacity model.

Slots are stored flat on the workshop row as a JSON array of
{"date", "time", "max_spots", "booked"} records. Calendar views need them
grouped per date with the remaining capacity of every slot, and booking
flows need a capacity check plus a way to bump "booked" without ever
exceeding "max_spots".

Parsing is deliberately forgiving: anything that does not look like slot
data becomes an empty list instead of an exception, so a broken row shows
up as "no bookable dates" rather than a failed page.
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from shared.errors import CapacityExceeded, NotFound, ValidationFailed

MAX_GUESTS_PER_BOOKING = 6


@dataclass
class TimeSlot:
    time: str
    max_spots: int
    booked: int

    @property
    def available(self) -> int:
        return available_spots(self)

    @property
    def is_full(self) -> bool:
        return self.available == 0


@dataclass
class DateSlots:
    date: str
    slots: list[TimeSlot] = field(default_factory=list)


@dataclass
class SlotSummary:
    dates: list[DateSlots]
    total_booked: int
    total_max_spots: int

    @property
    def total_available(self) -> int:
        return sum(slot.available for group in self.dates for slot in group.slots)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _time_slot(record: dict) -> Optional[TimeSlot]:
    time, max_spots, booked = record.get("time"), record.get("max_spots"), record.get("booked")
    if not isinstance(time, str) or not _is_count(max_spots) or not _is_count(booked):
        return None
    return TimeSlot(time=time, max_spots=max_spots, booked=booked)


def available_spots(slot: TimeSlot) -> int:
    return max(0, slot.max_spots - slot.booked)


def group_slots_by_date(flat: Iterable[dict]) -> list[DateSlots]:
    """Group flat slot records by date; dates ascending, slot order kept."""
    groups: dict[str, DateSlots] = {}
    for record in flat:
        slot = _time_slot(record)
        date = record.get("date")
        if slot is None or not isinstance(date, str):
            return []
        groups.setdefault(date, DateSlots(date=date)).slots.append(slot)
    return sorted(groups.values(), key=lambda group: group.date)


def _grouped(records: list) -> list[DateSlots]:
    result = []
    for record in records:
        date, raw_slots = record.get("date"), record.get("slots")
        if not isinstance(date, str) or not isinstance(raw_slots, list):
            return []
        slots = [_time_slot(s) if isinstance(s, dict) else None for s in raw_slots]
        if any(s is None for s in slots):
            return []
        result.append(DateSlots(date=date, slots=slots))
    return result


def parse_time_slots(raw: Any, fallback_date: Optional[str] = None) -> list[DateSlots]:
    """
    Turn whatever is stored in a workshop's time_slots column into the
    grouped view. The shape is sniffed from the first element:

    - flat records (date + time) are grouped by date
    - grouped records (date + slots) pass through
    - legacy records (time only) land on fallback_date, if there is one
    """
    if not isinstance(raw, list) or not raw:
        return []
    if not all(isinstance(record, dict) for record in raw):
        return []

    first = raw[0]
    if "date" in first and "time" in first:
        return group_slots_by_date(raw)
    if "date" in first and "slots" in first:
        return _grouped(raw)
    if "time" in first and fallback_date:
        slots = [_time_slot(record) for record in raw]
        if any(s is None for s in slots):
            return []
        return [DateSlots(date=fallback_date, slots=slots)]
    return []


def flatten_date_slots(groups: Iterable[DateSlots]) -> list[dict]:
    return [
        {"date": group.date, "time": slot.time, "max_spots": slot.max_spots, "booked": slot.booked}
        for group in groups
        for slot in group.slots
    ]


def summarize(groups: list[DateSlots]) -> SlotSummary:
    return SlotSummary(
        dates=groups,
        total_booked=sum(slot.booked for group in groups for slot in group.slots),
        total_max_spots=sum(slot.max_spots for group in groups for slot in group.slots),
    )


def find_slot(groups: Iterable[DateSlots], date: str, time: str) -> Optional[TimeSlot]:
    for group in groups:
        if group.date != date:
            continue
        for slot in group.slots:
            if slot.time == time:
                return slot
    return None


def max_guests_per_booking(available: int) -> int:
    return max(0, min(available, MAX_GUESTS_PER_BOOKING))


def check_capacity(slot: TimeSlot, guests: int) -> None:
    if guests < 1:
        raise ValidationFailed("At least one guest is required")
    available = slot.available
    if guests > available:
        raise CapacityExceeded(f"Only {available} spots available")
    if guests > MAX_GUESTS_PER_BOOKING:
        raise ValidationFailed(f"At most {MAX_GUESTS_PER_BOOKING} guests per booking")


def increment_booked(flat: list[dict], date: str, time: str, guests: int) -> list[dict]:
    """
    Return a copy of the stored slots with the matching slot's booked count
    raised by guests. Refuses to push booked past max_spots.
    """
    updated = []
    matched = False
    for record in flat:
        record = dict(record)
        if record.get("date") == date and record.get("time") == time:
            matched = True
            booked = (record.get("booked") or 0) + guests
            if booked > record.get("max_spots", 0):
                available = max(0, record.get("max_spots", 0) - (record.get("booked") or 0))
                raise CapacityExceeded(f"Only {available} spots available")
            record["booked"] = booked
        updated.append(record)
    if not matched:
        raise NotFound("Time slot not found")
    return updated


def validate_slot_rows(flat: Iterable[dict]) -> None:
    """Admin-form checks on slots before they are stored."""
    errors = []
    for index, record in enumerate(flat):
        if not record.get("date"):
            errors.append(f"slot {index}: date is required")
        if not str(record.get("time") or "").strip():
            errors.append(f"slot {index}: time is required")
        max_spots, booked = record.get("max_spots"), record.get("booked", 0)
        if not _is_count(max_spots) or max_spots < 1:
            errors.append(f"slot {index}: max_spots must be at least 1")
        if not _is_count(booked) or booked < 0:
            errors.append(f"slot {index}: booked cannot be negative")
        elif _is_count(max_spots) and booked > max_spots:
            errors.append(f"slot {index}: booked cannot exceed max_spots")
    if errors:
        raise ValidationFailed("; ".join(errors))
