"""Track the per-account two-factor flag and its TOTP secret."""

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="profile",
            name="two_factor_enabled",
            field=models.BooleanField(
                default=False,
                help_text="True when the account must pass a second authentication factor.",
            ),
        ),
        migrations.AddField(
            model_name="profile",
            name="two_factor_secret",
            field=models.CharField(
                blank=True,
                default="",
                help_text="Base32 TOTP secret; cleared whenever two-factor is disabled.",
                max_length=255,
            ),
        ),
    ]
