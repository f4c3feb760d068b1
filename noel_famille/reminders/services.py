"""Reminder emails for tasks due and events starting within the next day."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta

from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.utils import timezone

from noel_famille.events.models import Event
from noel_famille.tasks.models import Task

logger = logging.getLogger(__name__)

REMINDER_WINDOW = timedelta(hours=24)
SMTP_BACKEND = "django.core.mail.backends.smtp.EmailBackend"


@dataclass
class ReminderEmail:
    subject: str
    text: str
    html: str


def email_configured() -> bool:
    if not settings.DEFAULT_FROM_EMAIL:
        return False
    return settings.EMAIL_BACKEND != SMTP_BACKEND or bool(settings.EMAIL_HOST)


def send_email(to: str, email: ReminderEmail) -> bool:
    """Send one email; False when email is not configured or sending failed."""
    if not email_configured():
        logger.warning("Email not configured, skipping message to %s", to)
        return False
    try:
        send_mail(
            subject=email.subject,
            message=email.text,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[to],
            html_message=email.html,
            fail_silently=False,
        )
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send reminder to %s", to)
        return False
    return True


def _render(template: str, subject_title: str, context: dict) -> ReminderEmail:
    context = {**context, "app_url": settings.APP_URL}
    return ReminderEmail(
        subject=f"🎄 Rappel : {subject_title}",
        text=render_to_string(f"emails/{template}.txt", context).strip(),
        html=render_to_string(f"emails/{template}.html", context).strip(),
    )


def task_reminder_email(task: Task) -> ReminderEmail:
    return _render(
        "task_reminder",
        task.title,
        {"task": task, "event": task.event, "user": task.assignee},
    )


def event_reminder_email(event: Event, user) -> ReminderEmail:
    return _render("event_reminder", event.name, {"event": event, "user": user})


def upcoming_tasks(now: datetime, until: datetime):
    return (
        Task.objects.filter(due_date__gte=now, due_date__lte=until)
        .exclude(status=Task.Status.DONE)
        .select_related("event", "assignee")
    )


def upcoming_events(now: datetime, until: datetime):
    return Event.objects.filter(
        date__gte=now,
        date__lte=until,
        status=Event.Status.OPEN,
    ).prefetch_related("memberships__user")


def send_due_reminders(now: datetime | None = None) -> list[dict]:
    """Send every reminder due at ``now`` and describe the ones that went out."""
    now = now or timezone.now()
    until = now + REMINDER_WINDOW
    results: list[dict] = []

    for task in upcoming_tasks(now, until):
        if task.assignee is None or not task.assignee.email:
            continue
        if send_email(task.assignee.email, task_reminder_email(task)):
            results.append(
                {"type": "task", "taskId": task.pk, "recipient": task.assignee.email},
            )

    for event in upcoming_events(now, until):
        for membership in event.memberships.all():
            user = membership.user
            if not user.email:
                continue
            if send_email(user.email, event_reminder_email(event, user)):
                results.append(
                    {"type": "event", "eventId": event.pk, "recipient": user.email},
                )

    logger.info("Sent %s reminder(s)", len(results))
    return results
