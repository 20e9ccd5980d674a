from django.conf import settings
from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("contenttypes", "0002_remove_content_type_name"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SystemLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "timestamp",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When the change was made.",
                    ),
                ),
                (
                    "action_type",
                    models.CharField(
                        choices=[
                            ("CREATED", "Created"),
                            ("EDITED", "Edited"),
                            ("DELETED", "Deleted"),
                            ("SET_DEFAULT", "Set as default"),
                            ("REVOKED", "Revoked"),
                        ],
                        help_text="Kind of change, e.g. created or set as default.",
                        max_length=32,
                    ),
                ),
                (
                    "object_type",
                    models.CharField(
                        help_text="Human readable label for the object type (e.g. CertificateTemplate).",
                        max_length=128,
                    ),
                ),
                (
                    "object_id",
                    models.PositiveIntegerField(
                        help_text="Primary key of the changed object.",
                    ),
                ),
                (
                    "description",
                    models.TextField(
                        blank=True,
                        help_text="Summary shown in the admin audit list.",
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        help_text="Changed fields and other details of the change.",
                        null=True,
                    ),
                ),
                (
                    "content_type",
                    models.ForeignKey(
                        help_text="Model of the changed object.",
                        on_delete=models.deletion.CASCADE,
                        to="contenttypes.contenttype",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Administrator who made the change.",
                        on_delete=models.deletion.CASCADE,
                        related_name="system_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(
                        fields=["user", "timestamp"],
                        name="systemlog_user_timestamp_idx",
                    ),
                ],
                "verbose_name": "System log entry",
                "verbose_name_plural": "System log entries",
            },
        ),
        migrations.CreateModel(
            name="SecurityLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now, help_text="When the event was recorded.")),
                ("event_type", models.CharField(choices=[("LOGIN_SUCCESS", "Login success"), ("LOGIN_FAILURE", "Login failure"), ("TWO_FACTOR_DISABLED", "Two-factor disabled")], help_text="Type of security event.", max_length=32)),
                ("ip_address", models.GenericIPAddressField(blank=True, help_text="Client address, when the event came from a request.", null=True)),
                ("user_agent", models.TextField(blank=True)),
                ("description", models.TextField(blank=True, help_text="Summary shown in the security log.")),
                ("metadata", models.JSONField(blank=True, null=True)),
                ("actor", models.ForeignKey(blank=True, help_text="Authenticated user who triggered the event (empty for maintenance commands).", null=True, on_delete=models.SET_NULL, related_name="security_events", to=settings.AUTH_USER_MODEL)),
                ("target_user", models.ForeignKey(blank=True, help_text="Account whose sign-in or second factor is concerned.", null=True, on_delete=models.SET_NULL, related_name="security_events_target", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Security log entry",
                "verbose_name_plural": "Security log entries",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(fields=["timestamp"], name="securitylog_ts_idx"),
                    models.Index(fields=["event_type", "timestamp"], name="securitylog_event_ts_idx"),
                ],
            },
        ),
    ]
