"""Management command that turns off two-factor authentication for one account."""

import logging

from django.core.management.base import BaseCommand
from django.db import connections

from lmsweb.accounts.services import TwoFactorError, disable_two_factor

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = (
        "Disable two-factor authentication for the account with the given email "
        "and clear its secret. Use when an administrator is locked out."
    )

    def add_arguments(self, parser):
        parser.add_argument("email", help="Email address of the account to update.")

    def handle(self, *args, **options):
        email = options["email"]
        try:
            user = disable_two_factor(email)
        except TwoFactorError as exc:
            self.stderr.write(self.style.ERROR(f"Could not disable two-factor authentication: {exc}"))
        except Exception as exc:
            logger.exception("Unexpected failure while disabling two-factor for %s", email)
            self.stderr.write(self.style.ERROR(f"Could not disable two-factor authentication: {exc}"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Two-factor authentication disabled for {user.email}"))
        finally:
            connections.close_all()
