import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, null=True)),
                ("date", models.DateTimeField()),
                ("end_date", models.DateTimeField(blank=True, null=True)),
                ("location", models.CharField(blank=True, max_length=200, null=True)),
                ("map_url", models.URLField(blank=True, max_length=500, null=True)),
                ("banner_image", models.CharField(blank=True, max_length=255, null=True)),
                ("status", models.CharField(choices=[("DRAFT", "Brouillon"), ("OPEN", "Ouvert"), ("CLOSED", "Fermé")], default="OPEN", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["date"]},
        ),
        migrations.CreateModel(
            name="EventCode",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=30, unique=True)),
                ("is_master", models.BooleanField(default=False, help_text="Grants access to every event that is not closed")),
                ("is_active", models.BooleanField(default=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="EventCodeEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="code_links", to="events.event")),
                ("event_code", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="event_links", to="events.eventcode")),
            ],
        ),
        migrations.CreateModel(
            name="EventUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("joined_at", models.DateTimeField(auto_now_add=True)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to="events.event")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="event_memberships", to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["joined_at"]},
        ),
        migrations.AddField(
            model_name="eventcode",
            name="events",
            field=models.ManyToManyField(related_name="event_codes", through="events.EventCodeEvent", to="events.event"),
        ),
        migrations.AddField(
            model_name="event",
            name="participants",
            field=models.ManyToManyField(related_name="events", through="events.EventUser", to=settings.AUTH_USER_MODEL),
        ),
        migrations.AddConstraint(
            model_name="eventcodeevent",
            constraint=models.UniqueConstraint(fields=("event_code", "event"), name="unique_event_code_event"),
        ),
        migrations.AddConstraint(
            model_name="eventuser",
            constraint=models.UniqueConstraint(fields=("user", "event"), name="unique_event_user"),
        ),
    ]
