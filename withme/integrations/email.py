"""
Transactional email through the Plunk HTTP API.

Every send_* method returns True when Plunk accepted the message and False
otherwise; email is never allowed to fail the request that triggered it.
"""

import html
import logging
import httpx
from typing import Optional
from withme.config import settings

logger = logging.getLogger(__name__)

PLUNK_SEND_URL = "https://api.useplunk.com/v1/send"

BUTTON_STYLE = (
    "display: inline-block; background-color: #4F46E5; color: white; "
    "font-weight: bold; padding: 10px 20px; text-decoration: none; border-radius: 5px;"
)

UPDATE_TITLES = {
    "new_item": "New Item Added to Your Trip",
    "itinerary_change": "Your Trip Itinerary Has Changed",
    "member_joined": "Someone Joined Your Trip",
}


def _button(url: str, label: str) -> str:
    return f'<p><a href="{html.escape(url, quote=True)}" style="{BUTTON_STYLE}">{label}</a></p>'


def _greeting(name: Optional[str]) -> str:
    return f"<p>Hello {html.escape(name or 'there')},</p>"


class EmailService:
    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key if api_key is not None else settings.plunk_api_key
        self.timeout = timeout or settings.http_timeout_seconds

    def send(self, to: str, subject: str, body: str) -> bool:
        """Send one HTML email"""
        if not self.api_key:
            logger.warning(f"Plunk API key not configured; skipping email '{subject}'")
            return False
        try:
            response = httpx.post(
                PLUNK_SEND_URL,
                json={
                    "to": to,
                    "subject": subject,
                    "body": body,
                    "from": settings.email_from_address,
                },
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send email '{subject}': {e}")
            return False

    def send_welcome(self, to: str, name: Optional[str] = None) -> bool:
        body = (
            "<h1>Welcome to WithMe Travel!</h1>"
            f"{_greeting(name)}"
            "<p>Thank you for joining WithMe Travel. We're excited to help you plan your next adventure!</p>"
            "<p>Start exploring destinations and creating trips with friends.</p>"
            "<p>Happy travels!</p>"
            "<p>The WithMe Travel Team</p>"
        )
        return self.send(to, "Welcome to WithMe Travel", body)

    def send_trip_invitation(
        self,
        to: str,
        inviter_name: str,
        trip_name: str,
        invitation_url: str,
        name: Optional[str] = None,
    ) -> bool:
        body = (
            "<h1>You're Invited to a Trip!</h1>"
            f"{_greeting(name)}"
            f"<p>{html.escape(inviter_name)} has invited you to join \"{html.escape(trip_name)}\" on WithMe Travel.</p>"
            f"{_button(invitation_url, 'View Invitation')}"
            "<p>We can't wait to help you plan this trip together!</p>"
            "<p>The WithMe Travel Team</p>"
        )
        subject = f'{inviter_name} invited you to "{trip_name}" on WithMe Travel'
        return self.send(to, subject, body)

    def send_trip_update(
        self,
        to: str,
        trip_name: str,
        update_type: str,
        message: str,
        trip_url: str,
        name: Optional[str] = None,
    ) -> bool:
        title = UPDATE_TITLES.get(update_type, "Your Trip Was Updated")
        body = (
            f"<h1>{title}</h1>"
            f"{_greeting(name)}"
            f"<p>There's been an update to your trip \"{html.escape(trip_name)}\":</p>"
            f"<p>{html.escape(message)}</p>"
            f"{_button(trip_url, 'View Trip')}"
            "<p>The WithMe Travel Team</p>"
        )
        return self.send(to, f"{title}: {trip_name}", body)

    def send_comment_notification(
        self,
        to: str,
        commenter_name: str,
        trip_name: str,
        comment_text: str,
        trip_url: str,
        name: Optional[str] = None,
    ) -> bool:
        body = (
            "<h1>New Comment on Your Trip</h1>"
            f"{_greeting(name)}"
            f"<p>{html.escape(commenter_name)} commented on \"{html.escape(trip_name)}\":</p>"
            f"<blockquote>{html.escape(comment_text)}</blockquote>"
            f"{_button(trip_url, 'View Comment')}"
            "<p>The WithMe Travel Team</p>"
        )
        return self.send(to, f"{commenter_name} commented on {trip_name}", body)


def get_email_service() -> EmailService:
    return EmailService()
