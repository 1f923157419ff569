import calendar
from datetime import date

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFound, ValidationFailed
from shared.realtime import change_feed, workshop_topic

from . import slots as slot_model
from .models import Workshop
from .repository import WorkshopRepository
from .schemas import (
    CalendarDay,
    CalendarWorkshop,
    DateSlotsView,
    TimeSlotView,
    WorkshopCreate,
    WorkshopDetail,
    WorkshopResponse,
)

logger = structlog.get_logger(__name__)


def _fallback_date(workshop: Workshop) -> str | None:
    return workshop.workshop_date.isoformat() if workshop.workshop_date else None


def slot_groups(workshop: Workshop) -> list[slot_model.DateSlots]:
    return slot_model.parse_time_slots(workshop.time_slots, _fallback_date(workshop))


def _detail(workshop: Workshop) -> WorkshopDetail:
    summary = slot_model.summarize(slot_groups(workshop))
    views = [
        DateSlotsView(
            date=group.date,
            slots=[
                TimeSlotView(
                    time=slot.time,
                    max_spots=slot.max_spots,
                    booked=slot.booked,
                    available=slot.available,
                    is_full=slot.is_full,
                    max_guests=slot_model.max_guests_per_booking(slot.available),
                )
                for slot in group.slots
            ],
        )
        for group in summary.dates
    ]
    base = WorkshopResponse.model_validate(workshop).model_dump()
    return WorkshopDetail(
        **base,
        date_slots=views,
        total_booked=summary.total_booked,
        total_max_spots=summary.total_max_spots,
    )


def _apply_form(workshop: Workshop, data: WorkshopCreate) -> None:
    flat = [
        {"date": group.date.isoformat(), "time": slot.time.strip(), "max_spots": slot.max_spots, "booked": slot.booked}
        for group in data.date_slots
        for slot in group.slots
    ]
    slot_model.validate_slot_rows(flat)

    workshop.title = data.title.strip()
    workshop.price = data.price
    workshop.tagline = data.tagline or None
    workshop.description = data.description or None
    workshop.duration = data.duration or None
    workshop.duration_days = data.duration_days
    workshop.location = data.location or None
    workshop.maps_link = data.maps_link or None
    workshop.details = [d for d in data.details if d.strip()]
    workshop.workshop_type = data.workshop_type
    workshop.image_url = data.image_url or None
    workshop.is_active = data.is_active
    workshop.time_slots = flat
    workshop.workshop_date = data.date_slots[0].date if data.date_slots else None
    workshop.max_participants = sum(s["max_spots"] for s in flat)
    workshop.current_participants = sum(s["booked"] for s in flat)


def _publish_slots(workshop: Workshop) -> None:
    change_feed.publish(
        workshop_topic(workshop.id),
        {"id": workshop.id, "time_slots": workshop.time_slots},
    )


class WorkshopService:

    @staticmethod
    async def list_workshops(db: AsyncSession, active_only: bool = True) -> list[Workshop]:
        return await WorkshopRepository.list_all(db, active_only=active_only)

    @staticmethod
    async def get_workshop(db: AsyncSession, workshop_id: int) -> Workshop:
        workshop = await WorkshopRepository.get(db, workshop_id)
        if not workshop:
            raise NotFound("Workshop not found")
        return workshop

    @staticmethod
    async def get_detail(db: AsyncSession, workshop_id: int) -> WorkshopDetail:
        return _detail(await WorkshopService.get_workshop(db, workshop_id))

    @staticmethod
    def describe(workshop: Workshop) -> WorkshopDetail:
        return _detail(workshop)

    @staticmethod
    def publish_slots(workshop: Workshop) -> None:
        _publish_slots(workshop)

    @staticmethod
    async def create_workshop(db: AsyncSession, data: WorkshopCreate) -> WorkshopDetail:
        workshop = Workshop()
        _apply_form(workshop, data)
        workshop = await WorkshopRepository.create(db, workshop)
        logger.info("workshop_created", workshop_id=workshop.id, slots=len(workshop.time_slots))
        return _detail(workshop)

    @staticmethod
    async def update_workshop(db: AsyncSession, workshop_id: int, data: WorkshopCreate) -> WorkshopDetail:
        workshop = await WorkshopService.get_workshop(db, workshop_id)
        _apply_form(workshop, data)
        workshop = await WorkshopRepository.save(db, workshop)
        _publish_slots(workshop)
        logger.info("workshop_updated", workshop_id=workshop.id)
        return _detail(workshop)

    @staticmethod
    async def delete_workshop(db: AsyncSession, workshop_id: int) -> None:
        workshop = await WorkshopService.get_workshop(db, workshop_id)
        await WorkshopRepository.delete(db, workshop)
        change_feed.publish(workshop_topic(workshop_id), {"id": workshop_id, "deleted": True})
        logger.info("workshop_deleted", workshop_id=workshop_id)

    @staticmethod
    async def reserve_spots(db: AsyncSession, workshop_id: int, booking_date: str, time_slot: str, guests: int) -> Workshop:
        """
        Add guests to a slot's booked count under a row lock, so two
        confirmations for the same workshop cannot both read the old count.
        Raises CapacityExceeded if the slot would go over max_spots.

        Only flushes: the caller commits together with its own row changes
        and then calls publish_slots().
        """
        workshop = await WorkshopRepository.get_for_update(db, workshop_id)
        if not workshop:
            raise NotFound("Workshop not found")
        flat = slot_model.flatten_date_slots(slot_groups(workshop))
        workshop.time_slots = slot_model.increment_booked(flat, booking_date, time_slot, guests)
        workshop.current_participants = sum(s["booked"] for s in workshop.time_slots)
        await db.flush()
        logger.info(
            "workshop_spots_reserved",
            workshop_id=workshop_id,
            date=booking_date,
            time=time_slot,
            guests=guests,
        )
        return workshop

    @staticmethod
    async def month_calendar(db: AsyncSession, year: int, month: int) -> list[CalendarDay]:
        if not 1 <= month <= 12:
            raise ValidationFailed("month must be between 1 and 12")
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])
        days: dict[str, list[CalendarWorkshop]] = {}

        for workshop in await WorkshopRepository.list_all(db):
            for group in slot_groups(workshop):
                try:
                    day = date.fromisoformat(group.date)
                except ValueError:
                    continue
                if not first <= day <= last:
                    continue
                days.setdefault(group.date, []).append(
                    CalendarWorkshop(
                        id=workshop.id,
                        title=workshop.title,
                        location=workshop.location,
                        is_active=workshop.is_active,
                        price=workshop.price,
                        booked=sum(s.booked for s in group.slots),
                        max_spots=sum(s.max_spots for s in group.slots),
                    )
                )

        return [
            CalendarDay(
                date=date.fromisoformat(day),
                workshops=entries,
                total_bookings=sum(e.booked for e in entries),
            )
            for day, entries in sorted(days.items())
        ]
