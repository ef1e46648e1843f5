"""
Seed command - creates reproducible demo data.

Usage:
    python manage.py seed           # seed all apps
    python manage.py seed --flush   # delete seeded rows first, then rebuild
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from chs_backend.core.seeders import seed_core
from chs_backend.patients.seeders import seed_patients


class Command(BaseCommand):
    help = "Seed database with demo roles, health workers and patients"

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete previously seeded rows before seeding.",
        )

    def handle(self, *args, **options):
        flush = options.get("flush", False)

        self.stdout.write("=" * 80)
        self.stdout.write("  Community Health Service - seeding demo data")
        self.stdout.write("=" * 80)

        with transaction.atomic():
            stats = {}

            self.stdout.write("\n[1/2] Seeding core (roles, users)...")
            core_stats = seed_core(flush=flush)
            stats.update(core_stats)
            self._print_stats(core_stats)

            self.stdout.write("\n[2/2] Seeding patients...")
            patient_stats = seed_patients(flush=flush)
            stats.update(patient_stats)
            self._print_stats(patient_stats)

        self.stdout.write("\n" + "=" * 80)
        self.stdout.write(self.style.SUCCESS("  Seeding finished"))
        self.stdout.write("=" * 80)
        self._print_summary(stats)

    def _print_stats(self, stats):
        for key, value in stats.items():
            self.stdout.write(f"  - {key}: {value}")

    def _print_summary(self, stats):
        self.stdout.write("\nRecords (total):")
        for key, value in sorted(stats.items()):
            self.stdout.write(f"  - {key}: {value}")
