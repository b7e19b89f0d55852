# products/management/commands/low_stock_report.py

"""
Print products below the low-stock threshold.

Read-only: never touches the ledger.
"""

from django.conf import settings
from django.core.management.base import BaseCommand

from reports.services.ledger_report import low_stock_alerts


class Command(BaseCommand):
    help = "List products whose stock is below the low-stock threshold"

    def add_arguments(self, parser):
        parser.add_argument(
            "--threshold",
            type=int,
            default=None,
            help="Override LOW_STOCK_THRESHOLD for this run.",
        )

    def handle(self, *args, **options):
        threshold = options.get("threshold")
        if threshold is None:
            threshold = int(getattr(settings, "LOW_STOCK_THRESHOLD", 10))

        rows = low_stock_alerts(threshold=threshold)

        if not rows:
            self.stdout.write(self.style.SUCCESS(f"No products below {threshold}."))
            return

        self.stdout.write(self.style.WARNING(f"{len(rows)} product(s) below {threshold}:"))
        for row in rows:
            self.stdout.write(
                f"  {row['product_code']:<12} {row['name']:<40} "
                f"stock={row['stock']:<6} {row['status']}"
            )
