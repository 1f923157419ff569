from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from services.notification_service.service import NotificationService
from services.payment_service.gateway import PaymentGateway
from services.payment_service.service import PaymentService
from services.workshop_service import slots as slot_model
from services.workshop_service.service import WorkshopService, slot_groups
from shared.errors import CapacityExceeded, NotFound, ValidationFailed
from shared.lifecycle import BOOKING_STATUS
from shared.observability import studio_bookings_total, studio_capacity_rejections_total
from shared.security import CurrentUser

from .experiences import (
    EXPERIENCE_TIME_SLOTS,
    EXPERIENCES,
    MAX_EXPERIENCE_GUESTS,
    MIN_EXPERIENCE_GUESTS,
    get_experience,
)
from .models import ExperienceBooking, WorkshopBooking
from .repository import BookingRepository
from .schemas import (
    BookingVerify,
    ExperienceBookingCreate,
    ExperienceBookingResponse,
    ExperienceCheckout,
    MyBookings,
    WorkshopBookingCreate,
    WorkshopBookingResponse,
    WorkshopCheckout,
)

logger = structlog.get_logger(__name__)

EXPERIENCE_FILTERS = ("all", "upcoming", "completed", "paid", "pending")


def _guest_label(guests: int) -> str:
    return f"{guests} guest{'s' if guests > 1 else ''}"


async def _notify_admins(db: AsyncSession, type: str, title: str, message: str) -> None:
    # The booking is already committed; a failed notification must not undo it
    try:
        await NotificationService.notify(db, type=type, title=title, message=message)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("admin_notification_failed", type=type, error=str(e))


def _owned_booking(booking, user: CurrentUser, order_id: str):
    if booking is None or booking.user_id != user.id or booking.razorpay_order_id != order_id:
        raise NotFound("Booking not found")
    return booking


class BookingService:
    # --- Workshop bookings ---

    @staticmethod
    async def create_workshop_order(
        db: AsyncSession, gateway: PaymentGateway, user: CurrentUser, data: WorkshopBookingCreate
    ) -> WorkshopCheckout:
        workshop = await WorkshopService.get_workshop(db, data.workshop_id)
        if not workshop.is_active:
            raise NotFound("Workshop not found")

        booking_date = data.booking_date.isoformat()
        slot = slot_model.find_slot(slot_groups(workshop), booking_date, data.time_slot)
        if slot is None:
            raise ValidationFailed("Time slot not found")
        try:
            slot_model.check_capacity(slot, data.guests)
        except CapacityExceeded:
            studio_capacity_rejections_total.labels(stage="create").inc()
            raise

        total_amount = workshop.price * data.guests
        payment = await PaymentService.open_order(
            db,
            gateway,
            purpose="workshop_booking",
            amount=total_amount,
            notes={
                "workshop_id": workshop.id,
                "workshop_title": workshop.title,
                "booking_date": booking_date,
                "time_slot": data.time_slot,
                "guests": data.guests,
                "customer_name": data.customer_name,
                "customer_email": data.customer_email,
            },
        )
        booking = await BookingRepository.add(
            db,
            WorkshopBooking(
                user_id=user.id,
                workshop_id=workshop.id,
                booking_date=data.booking_date,
                time_slot=data.time_slot,
                guests=data.guests,
                total_amount=total_amount,
                customer_name=data.customer_name,
                customer_email=data.customer_email,
                customer_phone=data.customer_phone,
                payment_status="pending",
                booking_status="pending",
                razorpay_order_id=payment.gateway_order_id,
            ),
        )
        payment.reference_id = booking.id
        await db.commit()

        studio_bookings_total.labels(kind="workshop", status="pending").inc()
        logger.info(
            "workshop_booking_created",
            booking_id=booking.id,
            workshop_id=workshop.id,
            guests=data.guests,
            gateway_order_id=payment.gateway_order_id,
        )
        return WorkshopCheckout(
            order_id=payment.gateway_order_id,
            booking_id=booking.id,
            amount=total_amount,
            currency=payment.currency,
            key_id=gateway.key_id,
            workshop_title=workshop.title,
        )

    @staticmethod
    async def verify_workshop_payment(
        db: AsyncSession, gateway: PaymentGateway, user: CurrentUser, data: BookingVerify
    ) -> WorkshopBooking:
        """
        Confirm a paid workshop booking and take its guests out of the slot.
        A booking that is already settled is returned unchanged, so the slot
        count moves exactly once per booking.
        """
        booking = _owned_booking(
            await BookingRepository.get_workshop_booking_for_update(db, data.booking_id), user, data.razorpay_order_id
        )
        await PaymentService.confirm(db, gateway, "workshop_booking", data)
        if booking.payment_status in ("paid", "refund_due"):
            logger.info("workshop_booking_already_settled", booking_id=booking.id)
            return booking

        try:
            workshop = await WorkshopService.reserve_spots(
                db, booking.workshop_id, booking.booking_date.isoformat(), booking.time_slot, booking.guests
            )
        except (CapacityExceeded, NotFound) as e:
            # Paid, but the slot filled (or vanished) since checkout opened.
            # reserve_spots raises before touching the workshop row.
            booking.payment_status = "refund_due"
            booking.booking_status = "cancelled"
            booking.razorpay_payment_id = data.razorpay_payment_id
            await BookingRepository.save(db, booking)
            studio_capacity_rejections_total.labels(stage="confirm").inc()
            studio_bookings_total.labels(kind="workshop", status="cancelled").inc()
            logger.warning("workshop_booking_over_capacity", booking_id=booking.id, error=e.message)
            await _notify_admins(
                db,
                "refund",
                "Workshop Refund Needed",
                f"{booking.customer_name} paid for {_guest_label(booking.guests)} on "
                f"{booking.booking_date} {booking.time_slot} but the slot is no longer available "
                f"- ₹{booking.total_amount:g} to refund (payment {data.razorpay_payment_id})",
            )
            raise

        booking.payment_status = "paid"
        booking.booking_status = "confirmed"
        booking.razorpay_payment_id = data.razorpay_payment_id
        booking = await BookingRepository.save(db, booking)
        WorkshopService.publish_slots(workshop)

        studio_bookings_total.labels(kind="workshop", status="confirmed").inc()
        logger.info("workshop_booking_confirmed", booking_id=booking.id, workshop_id=workshop.id)
        await _notify_admins(
            db,
            "workshop",
            "New Workshop Registration",
            f'{booking.customer_name} registered for "{workshop.title}" on {booking.booking_date} '
            f"({_guest_label(booking.guests)}) - ₹{booking.total_amount:g}",
        )
        return booking

    @staticmethod
    async def list_workshop_bookings(db: AsyncSession, workshop_id: int) -> list[WorkshopBooking]:
        await WorkshopService.get_workshop(db, workshop_id)
        return await BookingRepository.list_for_workshop(db, workshop_id)

    # --- Experience bookings ---

    @staticmethod
    def catalog() -> dict:
        return {
            "experiences": [exp._asdict() for exp in EXPERIENCES.values()],
            "time_slots": list(EXPERIENCE_TIME_SLOTS),
            "min_guests": MIN_EXPERIENCE_GUESTS,
            "max_guests": MAX_EXPERIENCE_GUESTS,
        }

    @staticmethod
    async def create_experience_order(
        db: AsyncSession, gateway: PaymentGateway, user: CurrentUser, data: ExperienceBookingCreate
    ) -> ExperienceCheckout:
        experience = get_experience(data.experience_type)
        if experience is None:
            raise ValidationFailed("Unknown experience type")
        if data.time_slot not in EXPERIENCE_TIME_SLOTS:
            raise ValidationFailed("Time slot not found")

        total_amount = experience.quote(data.guests)
        payment = await PaymentService.open_order(
            db,
            gateway,
            purpose="experience_booking",
            amount=total_amount,
            notes={
                "experience_type": experience.id,
                "booking_date": data.booking_date.isoformat(),
                "time_slot": data.time_slot,
                "guests": data.guests,
                "customer_name": data.customer_name,
                "customer_email": data.customer_email,
            },
        )
        booking = await BookingRepository.add(
            db,
            ExperienceBooking(
                user_id=user.id,
                experience_type=experience.id,
                booking_date=data.booking_date,
                time_slot=data.time_slot,
                guests=data.guests,
                total_amount=total_amount,
                customer_name=data.customer_name,
                customer_email=data.customer_email,
                customer_phone=data.customer_phone,
                notes=data.notes or None,
                payment_status="pending",
                booking_status="pending",
                razorpay_order_id=payment.gateway_order_id,
            ),
        )
        payment.reference_id = booking.id
        await db.commit()

        studio_bookings_total.labels(kind="experience", status="pending").inc()
        logger.info("experience_booking_created", booking_id=booking.id, experience=experience.id)
        return ExperienceCheckout(
            order_id=payment.gateway_order_id,
            booking_id=booking.id,
            amount=total_amount,
            currency=payment.currency,
            key_id=gateway.key_id,
            experience_title=experience.title,
        )

    @staticmethod
    async def verify_experience_payment(
        db: AsyncSession, gateway: PaymentGateway, user: CurrentUser, data: BookingVerify
    ) -> ExperienceBooking:
        booking = _owned_booking(
            await BookingRepository.get_experience_booking(db, data.booking_id), user, data.razorpay_order_id
        )
        await PaymentService.confirm(db, gateway, "experience_booking", data)
        if booking.payment_status == "paid":
            return booking

        booking.payment_status = "paid"
        booking.booking_status = "confirmed"
        booking.razorpay_payment_id = data.razorpay_payment_id
        booking = await BookingRepository.save(db, booking)

        studio_bookings_total.labels(kind="experience", status="confirmed").inc()
        logger.info("experience_booking_confirmed", booking_id=booking.id)
        experience = get_experience(booking.experience_type)
        await _notify_admins(
            db,
            "experience",
            "New Experience Booking",
            f'{booking.customer_name} booked "{experience.title if experience else booking.experience_type}" '
            f"on {booking.booking_date} at {booking.time_slot} ({_guest_label(booking.guests)}) "
            f"- ₹{booking.total_amount:g}",
        )
        return booking

    @staticmethod
    async def expire_experience_bookings(db: AsyncSession, today: Optional[date] = None) -> int:
        """Confirmed experience bookings dated before today become completed."""
        completed = await BookingRepository.complete_past_experiences(db, today or date.today())
        if completed:
            logger.info("experience_bookings_completed", count=completed)
        return completed

    @staticmethod
    async def list_experience_bookings(
        db: AsyncSession, filter: str = "all", search: Optional[str] = None
    ) -> list[ExperienceBooking]:
        if filter not in EXPERIENCE_FILTERS:
            raise ValidationFailed(f"filter must be one of: {', '.join(EXPERIENCE_FILTERS)}")
        today = date.today()
        await BookingService.expire_experience_bookings(db, today)

        search = (search or "").strip() or None
        matching_types = ()
        if search:
            needle = search.lower()
            matching_types = tuple(
                exp.id for exp in EXPERIENCES.values() if needle in exp.title.lower() or needle in exp.id
            )
        return await BookingRepository.list_experiences(db, filter, today, search, matching_types)

    # --- Shared admin operations ---

    @staticmethod
    async def _get(db: AsyncSession, kind: str, booking_id: int):
        if kind == "workshop":
            booking = await BookingRepository.get_workshop_booking(db, booking_id)
        else:
            booking = await BookingRepository.get_experience_booking(db, booking_id)
        if not booking:
            raise NotFound("Booking not found")
        return booking

    @staticmethod
    async def update_status(db: AsyncSession, kind: str, booking_id: int, target: str):
        booking = await BookingService._get(db, kind, booking_id)
        BOOKING_STATUS.validate(booking.booking_status, target)
        booking.booking_status = target
        booking = await BookingRepository.save(db, booking)
        studio_bookings_total.labels(kind=kind, status=target).inc()
        logger.info("booking_status_updated", kind=kind, booking_id=booking_id, status=target)
        return booking

    @staticmethod
    async def delete_booking(db: AsyncSession, kind: str, booking_id: int) -> None:
        booking = await BookingService._get(db, kind, booking_id)
        await BookingRepository.delete(db, booking)
        logger.info("booking_deleted", kind=kind, booking_id=booking_id)

    @staticmethod
    async def my_bookings(db: AsyncSession, user: CurrentUser) -> MyBookings:
        workshops, experiences = await BookingRepository.list_for_user(db, user.id)
        return MyBookings(
            workshops=[WorkshopBookingResponse.model_validate(b) for b in workshops],
            experiences=[ExperienceBookingResponse.model_validate(b) for b in experiences],
        )
