import contextlib

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class PollsConfig(AppConfig):
    name = "noel_famille.polls"
    verbose_name = _("Polls")

    def ready(self):
        with contextlib.suppress(ImportError):
            import noel_famille.polls.signals  # noqa: F401, PLC0415
