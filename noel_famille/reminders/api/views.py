from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from noel_famille.core.cron import CronEndpointMixin
from noel_famille.reminders.services import send_due_reminders


class SendRemindersView(CronEndpointMixin, APIView):
    """Scheduler hook emailing the reminders of the next 24 hours."""

    @extend_schema(tags=["Reminders"], request=None, responses=dict)
    def get(self, request, *args, **kwargs):
        results = send_due_reminders()
        return Response({"success": True, "sent": len(results), "results": results})
