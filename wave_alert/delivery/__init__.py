"""Report delivery via email."""

from wave_alert.delivery.sendgrid_sender import (
    DeliveryError,
    EmailResult,
    SendGridSender,
)

__all__ = [
    "DeliveryError",
    "EmailResult",
    "SendGridSender",
]
