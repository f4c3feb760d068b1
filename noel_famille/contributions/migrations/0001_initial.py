import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("events", "0001_initial"),
        ("polls", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Contribution",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, null=True)),
                ("category", models.CharField(blank=True, choices=[("plat", "Plat"), ("boisson", "Boisson"), ("décor", "Décor"), ("autre", "Autre"), ("ingredient", "Ingrédient")], max_length=20, null=True)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("budget", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("status", models.CharField(choices=[("PLANNED", "Prévu"), ("CONFIRMED", "Confirmé"), ("BROUGHT", "Apporté")], default="PLANNED", max_length=10)),
                ("image_url", models.CharField(blank=True, max_length=500, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("assignee", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="contributions", to=settings.AUTH_USER_MODEL)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="contributions", to="events.event")),
                ("from_poll", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="generated_contributions", to="polls.poll")),
            ],
            options={"ordering": ["-created_at"]},
        ),
    ]
