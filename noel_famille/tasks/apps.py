import contextlib

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class TasksConfig(AppConfig):
    name = "noel_famille.tasks"
    verbose_name = _("Tasks")

    def ready(self):
        with contextlib.suppress(ImportError):
            import noel_famille.tasks.signals  # noqa: F401, PLC0415
