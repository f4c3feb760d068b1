import django_filters

from noel_famille.contributions.models import Contribution


class ContributionFilter(django_filters.FilterSet):
    eventId = django_filters.NumberFilter(field_name="event_id")  # noqa: N815
    status = django_filters.ChoiceFilter(choices=Contribution.Status.choices)
    assigneeId = django_filters.NumberFilter(field_name="assignee_id")  # noqa: N815

    class Meta:
        model = Contribution
        fields = ["eventId", "status", "assigneeId"]
