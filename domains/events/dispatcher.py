"""Render and send reminder emails for an event threshold."""

import asyncio
from datetime import datetime, tzinfo
from typing import Optional

from logger import logger
from . import config
from .mailer import MailTransport, SmtpTransport
from .models import Event, Threshold


def format_start_time(start_time: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format like "Friday, October 17, 2026 at 2:30 PM"."""
    local = start_time.astimezone(tz or config.EVENTS_TZ)
    hour = local.hour % 12 or 12
    return (
        f"{local.strftime('%A, %B')} {local.day}, {local.year} "
        f"at {hour}:{local.minute:02d} {local.strftime('%p')}"
    )


def render_reminder(event: Event, threshold: Threshold, tz: Optional[tzinfo] = None) -> tuple[str, str]:
    """Build the (subject, body) of a reminder email."""
    subject = f"Reminder ({threshold.label}): {event.name}"

    lines = [
        "This is a reminder for your event:",
        "",
        f"Event: {event.name}",
        f"When: {format_start_time(event.start_time, tz)}",
        "",
    ]
    if event.notes:
        lines += ["Notes:", event.notes, ""]
    lines.append(config.SIGNATURE)

    return subject, "\n".join(lines)


class ReminderDispatcher:
    """Send reminders through a mail transport with a bounded timeout."""

    def __init__(
        self,
        transport: Optional[MailTransport] = None,
        timeout: float = config.DISPATCH_TIMEOUT_SECONDS,
        tz: Optional[tzinfo] = None,
    ):
        self.transport = transport or SmtpTransport()
        self.timeout = timeout
        self.tz = tz

    async def send(self, event: Event, threshold: Threshold) -> bool:
        """Deliver one reminder.

        Never raises: transport errors and timeouts are logged and reported
        as failure so the caller can retry on a later tick.

        Returns:
            True if the transport accepted the message
        """
        subject, body = render_reminder(event, threshold, self.tz)

        try:
            delivered = await asyncio.wait_for(
                asyncio.to_thread(self.transport.deliver, event.user_email, subject, body),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Timed out after {self.timeout}s sending {threshold.label} reminder for event {event.id}"
            )
            return False
        except Exception as e:
            logger.error(f"Error sending {threshold.label} reminder for event {event.id}: {e}")
            return False

        if not delivered:
            logger.warning(f"Mail transport rejected {threshold.label} reminder for event {event.id}")
            return False

        logger.info(f"Sent {threshold.label} reminder for event {event.id} to {event.user_email}")
        return True
