"""
Payment provider callbacks.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.security import verify_webhook_secret
from app.db.session import get_db
from app.schemas.booking import BookingResponse
from app.schemas.payment import PaymentWebhookEvent
from app.services import lifecycle_service

logger = get_logger(__name__)
settings = get_settings()
router = APIRouter(prefix="/payments", tags=["Payments"])

_HANDLERS = {
    "payment_succeeded": lifecycle_service.mark_paid,
    "payment_failed": lifecycle_service.mark_payment_failed,
    "refund_succeeded": lifecycle_service.confirm_refund,
}


@router.post(
    "/webhook",
    response_model=BookingResponse,
    dependencies=[Depends(verify_webhook_secret(settings.PAYMENT_WEBHOOK_SECRET))],
)
async def payment_webhook(event: PaymentWebhookEvent, db: AsyncSession = Depends(get_db)):
    logger.info("payment_webhook_received", booking_id=event.booking_id, payment_event=event.event)
    return await _HANDLERS[event.event](db, event.booking_id)
