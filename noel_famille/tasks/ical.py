"""iCalendar (RFC 5545) export of a single task as a VTODO."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone as dt_timezone

from django.utils import timezone

from noel_famille.tasks.models import Task

PRODID = "-//Noel Family App//Task Export//FR"
CONTACT = "MAILTO:noreply@noel-family-app"
CRLF = "\r\n"

STATUS_MAP = {
    Task.Status.TODO: "NEEDS-ACTION",
    Task.Status.IN_PROGRESS: "IN-PROCESS",
    Task.Status.DONE: "COMPLETED",
}
PERCENT_COMPLETE = {
    Task.Status.DONE: 100,
    Task.Status.IN_PROGRESS: 50,
}


def format_ical_datetime(value: datetime) -> str:
    return value.astimezone(dt_timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def escape_ical_text(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def build_task_calendar(task: Task, now: datetime | None = None) -> str:
    now = now or timezone.now()
    event = task.event
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VTODO",
        f"UID:task-{task.pk}@noel-family-app",
        f"DTSTAMP:{format_ical_datetime(now)}",
        f"CREATED:{format_ical_datetime(task.created_at)}",
        f"LAST-MODIFIED:{format_ical_datetime(task.updated_at)}",
        f"SUMMARY:{escape_ical_text(task.title)}",
    ]
    if task.description:
        lines.append(f"DESCRIPTION:{escape_ical_text(task.description)}")
    if task.due_date:
        lines.append(f"DUE:{format_ical_datetime(task.due_date)}")
    lines.append(f"STATUS:{STATUS_MAP.get(task.status, 'NEEDS-ACTION')}")
    lines.append("PRIORITY:5")
    if task.created_by is not None:
        lines.append(f"ORGANIZER;CN={escape_ical_text(task.created_by.name)}:{CONTACT}")
    if task.assignee is not None:
        lines.append(f"ATTENDEE;CN={escape_ical_text(task.assignee.name)}:{CONTACT}")
    if event.location:
        lines.append(f"LOCATION:{escape_ical_text(event.location)}")
    lines.append(f"RELATED-TO;RELTYPE=PARENT:event-{event.pk}")
    lines.append(f"COMMENT:Événement: {escape_ical_text(event.name)}")
    if task.status == Task.Status.DONE:
        lines.append(f"COMPLETED:{format_ical_datetime(task.updated_at)}")
    lines.append(f"PERCENT-COMPLETE:{PERCENT_COMPLETE.get(task.status, 0)}")
    lines.extend(["END:VTODO", "END:VCALENDAR"])
    return CRLF.join(lines)


def calendar_filename(task: Task) -> str:
    return f"tache_{task.pk}.ics"
