"""
Django management command to backfill user slugs.

Usage:
    python manage.py generate_user_slugs

Every user without a slug gets ``user-<first 5 characters of the id>``,
with ``-1``, ``-2``, ... appended while the slug is taken.
"""

from django.core.management.base import BaseCommand

from infrastructure.container import container


class Command(BaseCommand):
    help = "Assign a unique slug to every user that does not have one"

    def handle(self, *args, **options):
        updated = container.user_service().generate_missing_slugs()
        self.stdout.write(self.style.SUCCESS(f"Assigned slugs to {updated} user(s)"))
