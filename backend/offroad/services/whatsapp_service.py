"""WhatsApp notification service.

Sends plain text messages to the company's WhatsApp number through the
WhatsApp Cloud API. Sending is best-effort: every failure is logged and
reported in the returned NotificationResult, nothing is raised.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from offroad.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    """Outcome of one send attempt."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    data: Optional[dict] = None


def _format_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else "TBD"


def format_registration_message(registration, event) -> str:
    """Build the message body announcing a new registration."""
    details = registration.participant_details
    vehicle = details.get("vehicle_details", {})
    emergency = details.get("emergency_contact", {})

    lines = [
        "NEW EVENT REGISTRATION",
        "",
        f"Event: {event.title}",
        f"Date: {_format_date(event.date)}",
        "",
        "Participant Details:",
        f"Name: {details.get('name')}",
        f"Email: {details.get('email')}",
        f"Phone: {details.get('phone')}",
        f"Experience: {details.get('experience')}",
        "",
        "Vehicle Details:",
        f"{vehicle.get('make')} {vehicle.get('model')} {vehicle.get('year')}",
        f"Modifications: {vehicle.get('modifications', 'None')}",
        "",
        "Emergency Contact:",
        f"Name: {emergency.get('name')}",
        f"Phone: {emergency.get('phone')}",
        f"Relationship: {emergency.get('relationship')}",
        "",
        f"Medical Conditions: {details.get('medical_conditions', 'None')}",
        "",
        f"Amount: ${registration.payment_amount:.2f}",
        f"Status: {registration.registration_status}",
    ]
    if details.get("additional_notes"):
        lines.extend(["", f"Notes: {details['additional_notes']}"])
    lines.extend(["", f"Registration ID: {registration.id}"])
    return "\n".join(lines)


def format_contact_message(contact) -> str:
    """Build the message body announcing a contact form submission."""
    lines = [
        "NEW CONTACT FORM SUBMISSION",
        "",
        "Contact Details:",
        f"Name: {contact.name}",
        f"Email: {contact.email}",
    ]
    if contact.phone:
        lines.append(f"Phone: {contact.phone}")
    lines.extend([
        "",
        f"Subject: {contact.subject}",
        "",
        "Message:",
        contact.message,
        "",
        f"Priority: {contact.priority.upper()}",
    ])
    if contact.created_at:
        lines.append(f"Submitted: {contact.created_at.strftime('%Y-%m-%d %H:%M')}")
    lines.extend(["", f"Contact ID: {contact.id}"])
    return "\n".join(lines)


class WhatsAppService:
    """Client for the WhatsApp Cloud API messages endpoint."""

    def __init__(self):
        self.settings = get_settings()
        self.api_url = self.settings.WHATSAPP_API_URL.rstrip("/")
        self.api_token = self.settings.WHATSAPP_API_TOKEN
        self.phone_number = self.settings.WHATSAPP_PHONE_NUMBER
        self.timeout = self.settings.WHATSAPP_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_token and self.phone_number)

    async def send_message(self, body: str) -> NotificationResult:
        """
        Send a text message to the configured number.

        Args:
            body: Message text

        Returns:
            NotificationResult describing the outcome
        """
        if not self.is_configured:
            logger.info("WhatsApp not configured, message not sent:\n%s", body)
            return NotificationResult(success=False, message="WhatsApp not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_url}/{self.phone_number}/messages",
                    headers={
                        "Authorization": f"Bearer {self.api_token}",
                        "Content-Type": "application/json"
                    },
                    json={
                        "messaging_product": "whatsapp",
                        "to": self.phone_number,
                        "type": "text",
                        "text": {"body": body}
                    }
                )

                if response.status_code in (200, 201):
                    logger.info("WhatsApp message sent")
                    return NotificationResult(success=True, data=response.json())

                logger.error(
                    f"WhatsApp send failed: {response.status_code} {response.text}"
                )
                return NotificationResult(
                    success=False,
                    error=f"HTTP {response.status_code}"
                )

        except (httpx.ConnectError, httpx.TimeoutException) as e:
            logger.warning(f"WhatsApp API unavailable: {e}")
            return NotificationResult(success=False, error=str(e))
        except Exception as e:
            logger.error(f"Error sending WhatsApp message: {e}")
            return NotificationResult(success=False, error=str(e))

    async def notify_registration(self, registration, event) -> NotificationResult:
        """Announce a new registration."""
        return await self.send_message(format_registration_message(registration, event))

    async def notify_contact(self, contact) -> NotificationResult:
        """Announce a contact form submission."""
        return await self.send_message(format_contact_message(contact))
