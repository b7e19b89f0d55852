from decimal import Decimal

from django.core.management.base import BaseCommand

from products.models import Product


class Command(BaseCommand):
    help = "Seed a small product catalog with opening stock"

    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products..."))

        # -------------------------------
        # PRODUCTS (code, name, buying, selling, opening stock)
        # -------------------------------
        products_data = [
            ("LMP-500", "Desk Lamp", "9.00", "12.00", 40),
            ("TSH-100", "Cotton T-Shirt", "1.80", "3.00", 120),
            ("USB-C", "USB Cable 1m", "5.50", "8.00", 8),
            ("MUG-100", "Ceramic Mug", "11.00", "15.00", 0),
            ("BAT-004", "AA Batteries (4-pack)", "19.00", "25.00", 25),
        ]

        created_count = 0

        for code, name, buying, selling, opening in products_data:
            _, created = Product.objects.get_or_create(
                product_code=code,
                defaults={
                    "name": name,
                    "buying_price": Decimal(buying),
                    "selling_price": Decimal(selling),
                    "stock": opening,
                },
            )
            if created:
                created_count += 1

        self.stdout.write(
            self.style.SUCCESS(f"Products seeded ({created_count} new).")
        )
