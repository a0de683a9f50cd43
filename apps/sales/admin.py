"""
Django admin configuration for sales models.

Orders are read-only here: they can be browsed but never added, edited or
deleted.
"""

from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Inline admin for order lines."""

    model = OrderItem
    extra = 0
    fields = ["position", "name", "price", "quantity", "product_id", "image_url"]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for recorded orders."""

    list_display = ["id", "cashier_username", "total", "amount_paid", "change", "created_at"]
    list_filter = ["created_at", "cashier"]
    search_fields = ["id", "cashier_username", "items__name"]
    date_hierarchy = "created_at"
    inlines = [OrderItemInline]
    readonly_fields = [
        "id",
        "cashier",
        "cashier_username",
        "subtotal",
        "discount",
        "total",
        "amount_paid",
        "change",
        "created_at",
    ]
    fieldsets = [
        (
            "Sale",
            {
                "fields": ["id", "cashier", "cashier_username", "created_at"],
            },
        ),
        (
            "Amounts",
            {
                "fields": ["subtotal", "discount", "total", "amount_paid", "change"],
            },
        ),
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
