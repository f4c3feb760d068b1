from celery import shared_task

from noel_famille.reminders.services import send_due_reminders as send_reminders


@shared_task(name="reminders.send_due_reminders")
def send_due_reminders() -> int:
    """Email upcoming task and event reminders.

    Returns:
        Number of emails sent.
    """
    return len(send_reminders())
