"""
Management command to create demo data for the POS: an administrator, a
cashier, a few categories and a small product catalog.
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import User
from apps.core.pin_auth import get_pin_authenticator
from apps.inventory.models import Category, Product

CATALOG = {
    "Beverages": [
        ("Iced Tea", Decimal("8000.00"), 50),
        ("Lemon Tea", Decimal("10000.00"), 40),
        ("Black Coffee", Decimal("15000.00"), 30),
    ],
    "Food": [
        ("Fried Rice", Decimal("25000.00"), 20),
        ("Chicken Noodles", Decimal("22000.00"), 20),
    ],
    "Snacks": [
        ("French Fries", Decimal("12000.00"), None),
        ("Banana Fritters", Decimal("5000.00"), None),
    ],
}


class Command(BaseCommand):
    help = "Create demo users and a demo catalog for the POS"

    def add_arguments(self, parser):
        parser.add_argument("--admin-pin", type=str, default="1234", help="PIN for the admin user")
        parser.add_argument(
            "--cashier-pin", type=str, default="0000", help="PIN for the cashier user"
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self._create_user("admin", User.ADMIN, options["admin_pin"])
        self._create_user("cashier", User.CASHIER, options["cashier_pin"])

        products_created = 0
        for category_name, products in CATALOG.items():
            category, _ = Category.objects.get_or_create(name=category_name)
            for name, price, stock in products:
                _, created = Product.objects.get_or_create(
                    name=name,
                    defaults={"price": price, "stock": stock, "category": category},
                )
                products_created += int(created)

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed complete: {Category.objects.count()} categories, "
                f"{products_created} new products"
            )
        )

    def _create_user(self, username, role, pin):
        """Create a user with the given role, or leave an existing one alone."""
        if User.objects.filter(username=username).exists():
            self.stdout.write(f"Using existing user: {username}")
            return

        user = User(username=username, role=role, is_staff=role == User.ADMIN)
        user.set_unusable_password()
        get_pin_authenticator().set_pin(user, pin)
        user.save()
        self.stdout.write(f"Created {role} user: {username}")
