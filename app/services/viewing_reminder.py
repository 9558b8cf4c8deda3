"""
Viewing Reminder Job
Sends reminder emails to visitors about 24 hours before their scheduled viewing.
Runs hourly, so the window is 23-25 hours ahead to tolerate drift between runs.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..config import Settings
from ..domain.viewings.repository import ViewingRepository
from ..domain.viewings.service import DEFAULT_PROPERTY_LABEL, format_property_address
from ..email_service import EmailDispatcher, ViewingConfirmation
from ..models_viewing import Viewing

logger = logging.getLogger(__name__)

WINDOW_START_HOURS = 23
WINDOW_END_HOURS = 25


@dataclass
class ReminderError:
    viewing_id: int
    error: str


@dataclass
class ReminderJobResult:
    success: bool
    reminders_sent: int
    errors: list[ReminderError] = field(default_factory=list)
    timestamp: Optional[datetime] = None


def get_reminder_window(now: datetime) -> tuple[datetime, datetime]:
    return now + timedelta(hours=WINDOW_START_HOURS), now + timedelta(hours=WINDOW_END_HOURS)


def _build_reminder(viewing: Viewing, settings: Settings) -> ViewingConfirmation:
    prop = viewing.property
    return ViewingConfirmation(
        visitor_name=viewing.visitor_name,
        visitor_email=viewing.visitor_email,
        property_title=prop.title if prop else DEFAULT_PROPERTY_LABEL,
        property_address=format_property_address(prop) if prop else "",
        viewing_date=viewing.viewing_date,
        viewing_time=viewing.viewing_time,
        duration=viewing.duration,
        agent_name=settings.agent_name,
        agent_phone=settings.agent_phone,
        agent_email=settings.agent_email,
        notes=viewing.notes,
    )


async def execute_viewing_reminder_job(
    db: Session, dispatcher: EmailDispatcher, settings: Settings, now: datetime
) -> ReminderJobResult:
    """
    Send a reminder for every scheduled viewing in the window that has not had one.
    A failure for one viewing is recorded and the loop moves on.
    """
    result = ReminderJobResult(success=True, reminders_sent=0, timestamp=now)
    window_start, window_end = get_reminder_window(now)

    try:
        logger.info("⏰ Starting viewing reminder job")
        viewings = ViewingRepository.list_due_for_reminder(db, window_start, window_end)
        logger.info(f"⏰ Found {len(viewings)} viewings needing reminders")

        for viewing in viewings:
            try:
                delivered = await dispatcher.send_reminder(_build_reminder(viewing, settings))
                if delivered is False:
                    raise RuntimeError("Reminder was not delivered")

                viewing.reminder_sent = True
                db.commit()
                result.reminders_sent += 1
                logger.info(f"✅ Reminder sent for viewing {viewing.id} to {viewing.visitor_email}")
            except Exception as e:
                db.rollback()
                result.errors.append(ReminderError(viewing_id=viewing.id, error=str(e)))
                logger.error(f"❌ Failed to send reminder for viewing {viewing.id}: {e}")

        logger.info(
            f"✅ Reminder job completed. Sent {result.reminders_sent} reminders "
            f"with {len(result.errors)} errors"
        )
    except Exception as e:
        result.success = False
        logger.error(f"❌ Fatal error in reminder job: {e}")

    return result


def get_reminder_job_stats(db: Session, now: datetime) -> dict:
    """Counts for the current reminder window, for monitoring"""
    window_start, window_end = get_reminder_window(now)
    in_window = (
        db.query(Viewing)
        .filter(
            Viewing.status == "scheduled",
            Viewing.viewing_date >= window_start,
            Viewing.viewing_date <= window_end,
        )
        .all()
    )
    sent = sum(1 for v in in_window if v.reminder_sent)
    return {
        "windowStart": window_start,
        "windowEnd": window_end,
        "totalViewingsInWindow": len(in_window),
        "remindersSent": sent,
        "remindersNeeded": len(in_window) - sent,
    }
