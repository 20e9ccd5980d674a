"""Management command that provisions the built-in default certificate template."""

from django.conf import settings
from django.core.management.base import BaseCommand

from lmsweb.lms.services import create_template, get_default_template


class Command(BaseCommand):
    help = "Create the built-in certificate template when no default template exists."

    def add_arguments(self, parser):
        parser.add_argument(
            "--name",
            default="Classic",
            help="Name for the template created when no default exists.",
        )

    def handle(self, *args, **options):
        existing = get_default_template()
        if existing is not None:
            self.stdout.write(
                self.style.WARNING(f"Default template '{existing.name}' already exists; nothing to do.")
            )
            return

        template = create_template(
            {
                "name": options["name"],
                "branding_text": settings.DEFAULT_CERTIFICATE_BRANDING,
                "is_default": True,
            }
        )
        self.stdout.write(self.style.SUCCESS(f"Created default template '{template.name}'."))
