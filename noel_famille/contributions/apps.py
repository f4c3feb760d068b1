import contextlib

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ContributionsConfig(AppConfig):
    name = "noel_famille.contributions"
    verbose_name = _("Contributions")

    def ready(self):
        with contextlib.suppress(ImportError):
            import noel_famille.contributions.signals  # noqa: F401, PLC0415
