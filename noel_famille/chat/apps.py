import contextlib

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ChatConfig(AppConfig):
    name = "noel_famille.chat"
    verbose_name = _("Chat")

    def ready(self):
        with contextlib.suppress(ImportError):
            import noel_famille.chat.signals  # noqa: F401, PLC0415
