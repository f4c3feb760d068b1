import os

from celery import Celery
from celery.signals import setup_logging

# If DJANGO_SETTINGS_MODULE is unset, select a sensible default based on BUILD_ENV.
# pytest sets it explicitly (config.settings.test via --ds).
if "DJANGO_SETTINGS_MODULE" not in os.environ:
    build_env = os.environ.get("BUILD_ENV", "production").lower()
    os.environ.setdefault(
        "DJANGO_SETTINGS_MODULE",
        "config.settings.local" if build_env == "local" else "config.settings.production",
    )

app = Celery("noel_famille")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")


@setup_logging.connect
def config_loggers(*args, **kwargs):
    from logging.config import dictConfig  # noqa: PLC0415

    from django.conf import settings  # noqa: PLC0415

    dictConfig(settings.LOGGING)


# Load task modules from all registered Django app configs.
app.autodiscover_tasks()
