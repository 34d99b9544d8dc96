from typing import Literal
from pydantic import BaseModel


class PaymentWebhookEvent(BaseModel):
    """Callback from the payment provider once it settles a charge or refund."""
    booking_id: int
    event: Literal["payment_succeeded", "payment_failed", "refund_succeeded"]
