"""
Core models for the point-of-sale platform.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Extended user model with a POS role and a login PIN.

    Cashiers and admins sign in to the terminal with username + PIN. The PIN
    is checked through apps.core.pin_auth so that the storage scheme can be
    hardened without touching the checkout code.
    """

    # Role choices
    ADMIN = "admin"
    CASHIER = "cashier"

    ROLE_CHOICES = [
        (ADMIN, "Administrator"),
        (CASHIER, "Cashier"),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=CASHIER,
        help_text="User's role in the shop",
    )

    # Stored as entered; see PlaintextPinAuthenticator
    pin = models.CharField(
        max_length=128,
        help_text="Login PIN used at the POS terminal",
    )

    class Meta:
        db_table = "users"
        ordering = ["username"]
        verbose_name = "User"
        verbose_name_plural = "Users"
        indexes = [
            models.Index(fields=["role"], name="user_role_idx"),
        ]

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    def is_admin(self):
        """Check if user is a back-office administrator."""
        return self.role == self.ADMIN

    def is_cashier(self):
        """Check if user is a cashier."""
        return self.role == self.CASHIER

    def can_manage_catalog(self):
        """Check if user can manage products and categories."""
        return self.is_admin()

    def can_manage_users(self):
        """Check if user can manage other users."""
        return self.is_admin()

    def can_view_reports(self):
        """Check if user can view sales reports."""
        return self.is_admin()

    def can_process_sales(self):
        """Check if user can ring up sales."""
        return self.role in [self.ADMIN, self.CASHIER]
