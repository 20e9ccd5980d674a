"""Django system checks for the core app.

These checks surface deployment settings that would weaken the admin panel.
"""

from __future__ import annotations

from django.conf import settings
from django.core import checks


@checks.register(checks.Tags.security, deploy=True)
def secret_key_configured(app_configs, **kwargs):
    """Warn when production runs with the bundled development secret key.

    Returning a warning instead of an error keeps ``manage.py`` usable for
    maintenance commands such as ``disable_2fa`` on a misconfigured host.
    """

    messages: list[checks.CheckMessage] = []

    if not settings.DEBUG and settings.SECRET_KEY == settings.INSECURE_SECRET_KEY:
        messages.append(
            checks.Warning(
                "DJANGO_SECRET_KEY is not set; the insecure development key is in use.",
                hint="Export DJANGO_SECRET_KEY with a long random value before deploying.",
                id="lmsweb.W001",
            )
        )

    return messages


@checks.register()
def certificate_verify_url_configured(app_configs, **kwargs):
    """Verification links must be absolute so printed certificates can be checked."""

    base_url = getattr(settings, "CERTIFICATE_VERIFY_BASE_URL", "")
    if base_url.startswith(("http://", "https://")):
        return []
    return [
        checks.Warning(
            "CERTIFICATE_VERIFY_BASE_URL is not an absolute http(s) URL.",
            hint="Set CERTIFICATE_VERIFY_BASE_URL, e.g. https://lms.example.com.",
            id="lmsweb.W002",
        )
    ]
