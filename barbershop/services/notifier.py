"""
Outbound booking notification.

Best effort: one POST to the configured webhook, no retries. A failed
delivery is logged and lost; it never affects the reservation.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import httpx
from fastapi import Depends

from barbershop.config import Settings, get_settings
from barbershop.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BookingNotification:
    reservation_id: int
    barber_name: str
    customer_name: str
    customer_phone: str
    date: str
    time: str
    services: List[str] = field(default_factory=list)
    total_price: int = 0
    customer_email: Optional[str] = None
    notes: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "reservationId": self.reservation_id,
            "barberName": self.barber_name,
            "services": self.services,
            "totalPrice": self.total_price,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "customerEmail": self.customer_email,
            "date": self.date,
            "time": self.time,
            "notes": self.notes,
        }


class WebhookNotifier:
    def __init__(self, url: Optional[str], timeout: float = 5.0):
        self.url = url
        self.timeout = timeout

    def send(self, notification: BookingNotification) -> bool:
        if not self.url:
            logger.debug(f"No webhook configured, skipping notification for {notification.reservation_id}")
            return False
        try:
            response = httpx.post(self.url, json=notification.to_payload(), timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(
                f"Booking notification for reservation {notification.reservation_id} failed: {str(e)}"
            )
            return False
        logger.info(f"Booking notification sent for reservation {notification.reservation_id}")
        return True


def get_notifier(settings: Settings = Depends(get_settings)) -> WebhookNotifier:
    return WebhookNotifier(settings.notify_webhook_url, settings.notify_timeout_seconds)
