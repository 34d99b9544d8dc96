"""
Booking lifecycle transitions after creation.

    pending --mark_paid--> confirmed --refund/confirm_refund--> refunded
       |
       +--release--> cancelled

cancelled and refunded are terminal. Callbacks from the payment provider
(mark_paid, mark_payment_failed, confirm_refund) may be delivered more than
once, so repeating one that already took effect returns the booking unchanged.
Each transition locks the booking row for the rest of the transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AlreadyFinalized, Forbidden, NotRefundable
from app.core.logging import get_logger
from app.core.metrics import record_transition
from app.core.permissions import Actor, can_request_refund
from app.models.booking import Booking, BookingStatus, PaymentStatus, RefundStatus
from app.services.booking_service import get_booking

logger = get_logger(__name__)

TERMINAL_STATUSES = (BookingStatus.CANCELLED.value, BookingStatus.REFUNDED.value)


async def _save(db: AsyncSession, booking: Booking, transition: str) -> Booking:
    await db.flush()
    await db.refresh(booking)
    record_transition(transition)
    logger.info(
        "booking_transition",
        booking_id=booking.id,
        transition=transition,
        status=booking.status,
        payment_status=booking.payment_status,
        refund_status=booking.refund_status,
    )
    return booking


async def release(db: AsyncSession, booking_id: int, actor: Actor) -> Booking:
    """Cancel an unpaid booking on behalf of the guest who made it."""
    booking = await get_booking(db, booking_id, for_update=True)

    if booking.user_id != actor.user_id:
        logger.warning("booking_release_forbidden", booking_id=booking_id, user_id=actor.user_id)
        raise Forbidden("You can only release your own bookings")

    if booking.status in TERMINAL_STATUSES:
        raise AlreadyFinalized(f"Booking is already {booking.status}")
    if booking.payment_status == PaymentStatus.PAID.value:
        raise AlreadyFinalized("Paid bookings cannot be released, request a refund instead")

    booking.status = BookingStatus.CANCELLED.value
    return await _save(db, booking, "released")


async def refund(db: AsyncSession, booking_id: int, actor: Actor) -> Booking:
    """Ask the payment provider to refund a paid booking."""
    booking = await get_booking(db, booking_id, for_update=True)

    if not can_request_refund(actor, booking.user_id):
        raise Forbidden("You can only refund your own bookings")

    if booking.payment_status != PaymentStatus.PAID.value or booking.status in TERMINAL_STATUSES:
        raise NotRefundable()

    if booking.refund_status == RefundStatus.REQUESTED.value:
        return booking

    booking.refund_status = RefundStatus.REQUESTED.value
    return await _save(db, booking, "refund_requested")


async def confirm_refund(db: AsyncSession, booking_id: int) -> Booking:
    """Payment provider settled the refund."""
    booking = await get_booking(db, booking_id, for_update=True)

    if booking.status == BookingStatus.REFUNDED.value:
        return booking
    if booking.refund_status != RefundStatus.REQUESTED.value:
        raise NotRefundable("No refund was requested for this booking")

    booking.status = BookingStatus.REFUNDED.value
    booking.refund_status = RefundStatus.REFUNDED.value
    return await _save(db, booking, "refunded")


async def mark_paid(db: AsyncSession, booking_id: int) -> Booking:
    """Payment provider captured the payment."""
    booking = await get_booking(db, booking_id, for_update=True)

    if booking.status in TERMINAL_STATUSES:
        logger.warning("payment_for_finalized_booking", booking_id=booking_id, status=booking.status)
        raise AlreadyFinalized(f"Booking is already {booking.status}")

    if (
        booking.payment_status == PaymentStatus.PAID.value
        and booking.status == BookingStatus.CONFIRMED.value
    ):
        return booking

    booking.payment_status = PaymentStatus.PAID.value
    booking.status = BookingStatus.CONFIRMED.value
    return await _save(db, booking, "paid")


async def mark_payment_failed(db: AsyncSession, booking_id: int) -> Booking:
    booking = await get_booking(db, booking_id, for_update=True)

    # A late failure notice never undoes a captured payment
    if booking.payment_status == PaymentStatus.PAID.value:
        return booking
    if booking.status in TERMINAL_STATUSES:
        raise AlreadyFinalized(f"Booking is already {booking.status}")
    if booking.payment_status == PaymentStatus.FAILED.value:
        return booking

    booking.payment_status = PaymentStatus.FAILED.value
    return await _save(db, booking, "payment_failed")
