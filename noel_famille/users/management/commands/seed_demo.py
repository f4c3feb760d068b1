from datetime import datetime

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from noel_famille.chat.models import ChatMessage
from noel_famille.contributions.models import Contribution
from noel_famille.events.models import Event
from noel_famille.events.models import EventCode
from noel_famille.events.models import EventUser
from noel_famille.menu.models import MenuRecipe
from noel_famille.polls.models import Poll
from noel_famille.polls.models import PollOption
from noel_famille.tasks.models import Task
from noel_famille.users.models import RefreshToken
from noel_famille.users.models import User

ADDRESS = "12 Rue des Sapins, 75001 Paris"
MAP_URL = "https://maps.google.com/?q=12+Rue+des+Sapins+Paris"

FAMILY = [
    ("Mamie Françoise", "mamie@famille.fr", "👵"),
    ("Papy Jean", "papy@famille.fr", "👴"),
    ("Marie", None, "👩"),
    ("Pierre", None, "👨"),
    ("Lucas", None, "👦"),
    ("Emma", None, "👧"),
]

# (title, description, category, quantity, status, assignee name)
REVEILLON_CONTRIBUTIONS = [
    (
        "Foie gras maison",
        "Foie gras mi-cuit avec confiture de figues",
        "plat",
        1,
        "CONFIRMED",
        "Mamie Françoise",
    ),
    ("Champagne", "3 bouteilles de Champagne Brut", "boisson", 3, "CONFIRMED", "Pierre"),
    ("Bûche de Noël", "Bûche chocolat-marrons", "plat", 1, "PLANNED", "Marie"),
    ("Huîtres", "4 douzaines de fines de claire", "plat", 4, "PLANNED", "Papy Jean"),
    ("Vin rouge", "Bordeaux Saint-Émilion 2018", "boisson", 2, "CONFIRMED", "Admin Famille"),
    ("Décoration table", "Centre de table, bougies, serviettes", "décor", 1, "CONFIRMED", "Emma"),
]
DEJEUNER_CONTRIBUTIONS = [
    (
        "Dinde aux marrons",
        "Dinde fermière farcie aux marrons",
        "plat",
        1,
        "PLANNED",
        "Mamie Françoise",
    ),
    ("Gratin dauphinois", "Accompagnement pour la dinde", "plat", 1, "CONFIRMED", "Marie"),
    ("Salade de fruits frais", "Salade avec fruits de saison", "plat", 1, "PLANNED", "Lucas"),
    ("Jus de fruits", "Jus de pomme et jus d'orange", "boisson", 4, "CONFIRMED", "Emma"),
]


def paris(*args) -> datetime:
    return timezone.make_aware(datetime(*args), timezone.get_current_timezone())


class Command(BaseCommand):
    help = _("Replace the database content with the demo Christmas family")

    @transaction.atomic
    def handle(self, *args, **options):
        self._wipe()
        users = self._create_users()
        reveillon, dejeuner = self._create_events(users)
        self._create_contributions(reveillon, REVEILLON_CONTRIBUTIONS, users)
        self._create_contributions(dejeuner, DEJEUNER_CONTRIBUTIONS, users)
        self._create_polls(reveillon, dejeuner)
        self._create_tasks(reveillon, dejeuner, users)
        self._create_menu(dejeuner)
        self._create_messages(reveillon, users)

        self.stdout.write(self.style.SUCCESS("Demo data created"))
        self.stdout.write('Admin: "Admin Famille" + code "NOEL-FAMILLE-2025"')
        self.stdout.write('User:  "Mamie Françoise" + code "NOEL-2025-SOIR"')
        self.stdout.write('User:  any name + code "NOEL-2025-MIDI"')

    def _wipe(self):
        for model in (
            ChatMessage,
            Poll,
            Task,
            MenuRecipe,
            Contribution,
            EventUser,
            EventCode,
            RefreshToken,
            Event,
            User,
        ):
            model.objects.all().delete()

    def _create_users(self) -> dict[str, User]:
        admin = User(
            name="Admin Famille",
            email="admin@famille.fr",
            role=User.Role.ADMIN,
            avatar="🎅",
        )
        members = [admin] + [
            User(name=name, email=email, avatar=avatar) for name, email, avatar in FAMILY
        ]
        for user in members:
            user.set_unusable_password()
            user.save()
        return {user.name: user for user in members}

    def _create_events(self, users):
        reveillon = Event.objects.create(
            name="Réveillon de Noël 2025",
            description=(
                "Soirée du réveillon chez Mamie et Papy. Apéro dès 19h, repas à "
                "20h30. Échange de cadeaux vers minuit ! 🎁"
            ),
            date=paris(2025, 12, 24, 19),
            end_date=paris(2025, 12, 25, 2),
            location=ADDRESS,
            map_url=MAP_URL,
        )
        dejeuner = Event.objects.create(
            name="Déjeuner de Noël 2025",
            description=(
                "Déjeuner de Noël en famille. Ouverture des cadeaux du Père Noël "
                "pour les enfants à 11h, repas à 12h30. 🎄"
            ),
            date=paris(2025, 12, 25, 11),
            end_date=paris(2025, 12, 25, 17),
            location=ADDRESS,
            map_url=MAP_URL,
        )
        EventCode.objects.create(code="NOEL-2025-SOIR").events.add(reveillon)
        EventCode.objects.create(code="NOEL-2025-MIDI").events.add(dejeuner)
        EventCode.objects.create(code="NOEL-FAMILLE-2025", is_master=True).events.add(
            reveillon,
            dejeuner,
        )
        EventUser.objects.bulk_create(
            [
                EventUser(user=user, event=event)
                for user in users.values()
                for event in (reveillon, dejeuner)
            ],
        )
        return reveillon, dejeuner

    def _create_contributions(self, event, rows, users):
        for title, description, category, quantity, status, assignee in rows:
            Contribution.objects.create(
                event=event,
                title=title,
                description=description,
                category=category,
                quantity=quantity,
                status=status,
                assignee=users[assignee],
            )

    def _create_polls(self, reveillon, dejeuner):
        polls = [
            (
                reveillon,
                "Quel dessert préférez-vous pour le réveillon ?",
                "Votez pour votre dessert préféré ! Les 2 plus votés seront préparés.",
                [
                    "Bûche glacée vanille-framboise",
                    "Bûche pâtissière chocolat",
                    "Paris-Brest géant",
                    "Tarte Tatin",
                ],
            ),
            (
                dejeuner,
                "Activité après le déjeuner ?",
                "Que voulez-vous faire après manger ?",
                [
                    "Jeux de société",
                    "Promenade digestive",
                    "Film de Noël",
                    "Karaoké de Noël",
                ],
            ),
        ]
        for event, title, description, labels in polls:
            poll = Poll.objects.create(event=event, title=title, description=description)
            PollOption.objects.bulk_create(
                [PollOption(poll=poll, label=label) for label in labels],
            )

    def _create_tasks(self, reveillon, dejeuner, users):
        admin = users["Admin Famille"]
        tasks = [
            (
                reveillon,
                "Préparer la table du réveillon",
                "Mettre la nappe, les couverts, les verres",
                "TODO",
                "Emma",
                paris(2025, 12, 24, 18),
            ),
            (
                reveillon,
                "Acheter le pain frais",
                "Baguettes et pain de campagne",
                "TODO",
                "Lucas",
                paris(2025, 12, 24, 17),
            ),
            (
                reveillon,
                "Installer le sapin",
                "Monter et décorer le sapin de Noël",
                "DONE",
                "Pierre",
                paris(2025, 12, 20, 12),
            ),
            (
                dejeuner,
                "Préparer les cadeaux enfants",
                "Emballer et cacher les cadeaux",
                "IN_PROGRESS",
                "Marie",
                paris(2025, 12, 24, 22),
            ),
            (
                dejeuner,
                "Préparer le chocolat chaud",
                "Pour le petit-déjeuner du 25",
                "TODO",
                "Mamie Françoise",
                paris(2025, 12, 25, 9),
            ),
        ]
        for event, title, description, status, assignee, due_date in tasks:
            Task.objects.create(
                event=event,
                title=title,
                description=description,
                status=status,
                assignee=users[assignee],
                created_by=admin,
                due_date=due_date,
            )

    def _create_menu(self, dejeuner):
        recipe = MenuRecipe.objects.create(
            event=dejeuner,
            title="Bûche pâtissière",
            description="Dessert du déjeuner",
        )
        recipe.ingredients.create(name="Chocolat noir", details="200 g")
        recipe.ingredients.create(name="Crème liquide", details="50 cl")
        recipe.ingredients.create(name="Marrons glacés")

    def _create_messages(self, reveillon, users):
        messages = [
            ("Mamie Françoise", "Bonjour à tous ! Hâte de vous voir pour le réveillon ! 🎄"),
            ("Papy Jean", "J'ai réservé les huîtres, elles seront prêtes le 24 !"),
            ("Marie", "Super Papy ! On va se régaler 🦪"),
            ("Admin Famille", "N'oubliez pas de voter pour le dessert !"),
        ]
        for author, content in messages:
            ChatMessage.objects.create(event=reveillon, user=users[author], content=content)
