from celery import shared_task

from noel_famille.polls.services import auto_close_due_polls as close_due_polls


@shared_task(name="polls.auto_close_due_polls")
def auto_close_due_polls() -> int:
    """Close polls whose auto-close moment has passed.

    Returns:
        Number of polls closed.
    """
    return len(close_due_polls())
