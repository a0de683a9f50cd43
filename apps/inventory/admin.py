"""
Admin configuration for catalog models.
"""

from django.contrib import admin

from import_export.admin import ImportExportModelAdmin

from .models import Category, Product
from .resources import ProductResource


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin interface for Category."""

    list_display = ["name", "product_count", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["id", "created_at", "updated_at"]

    @admin.display(description="Products")
    def product_count(self, obj):
        return obj.products.count()


@admin.register(Product)
class ProductAdmin(ImportExportModelAdmin):
    """Admin interface for Product with catalog import/export."""

    resource_classes = [ProductResource]
    list_display = ["name", "category", "price", "stock", "updated_at"]
    list_filter = ["category", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "category", "image_url"),
            },
        ),
        (
            "Pricing & Stock",
            {
                "fields": ("price", "stock"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
