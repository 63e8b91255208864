# accounting/management/commands/seed_pharmacy_chart.py

import uuid

from django.core.management.base import BaseCommand, CommandError

from accounting.services.chart_seed import seed_pharmacy_chart
from pharmacies.models import Pharmacy


class Command(BaseCommand):
    help = "Seed the standard SCF Chart of Accounts for a pharmacy (idempotent)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--pharmacy",
            required=True,
            help="Pharmacy UUID or code",
        )

    def handle(self, *args, **options):
        ref = (options["pharmacy"] or "").strip()

        try:
            lookup = {"pk": uuid.UUID(ref)}
        except ValueError:
            lookup = {"code": ref}

        pharmacy = Pharmacy.objects.filter(**lookup).first()
        if pharmacy is None:
            raise CommandError(f"Pharmacy not found: {ref}")

        self.stdout.write(f"Seeding chart of accounts for {pharmacy.name}...")
        created, updated = seed_pharmacy_chart(pharmacy)

        self.stdout.write(
            self.style.SUCCESS(
                f"✔ Pharmacy chart seeded ({created} new accounts, {updated} updated)."
            )
        )
