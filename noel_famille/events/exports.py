"""CSV export of an event's contributions, ready for a spreadsheet."""

from __future__ import annotations

from noel_famille.contributions.models import Contribution

CSV_HEADERS = [
    "Catégorie",
    "Titre",
    "Description",
    "Quantité",
    "Budget (€)",
    "Apporté par",
    "Statut",
]
STATUS_LABELS = {
    Contribution.Status.PLANNED: "Prévu",
    Contribution.Status.CONFIRMED: "Confirmé",
    Contribution.Status.BROUGHT: "Apporté",
}
DEFAULT_CATEGORY = "Autre"
UNASSIGNED = "Non assigné"


def quote_cell(value: str) -> str:
    return '"{}"'.format(value.replace('"', '""'))


def contribution_row(contribution: Contribution) -> list[str]:
    budget = contribution.budget
    return [
        contribution.category or DEFAULT_CATEGORY,
        contribution.title,
        contribution.description or "",
        str(contribution.quantity),
        f"{budget:.2f}" if budget else "",
        contribution.assignee.name if contribution.assignee else UNASSIGNED,
        STATUS_LABELS.get(contribution.status, STATUS_LABELS[Contribution.Status.BROUGHT]),
    ]


def contributions_csv(event_id) -> str:
    contributions = (
        Contribution.objects.filter(event_id=event_id)
        .select_related("assignee")
        .order_by("category", "title")
    )
    lines = [",".join(CSV_HEADERS)]
    lines.extend(
        ",".join(quote_cell(cell) for cell in contribution_row(contribution))
        for contribution in contributions
    )
    return "\n".join(lines)


def export_filename(event_id) -> str:
    return f"contributions_{event_id}.csv"
