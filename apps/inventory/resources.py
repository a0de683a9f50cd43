"""
Import/export resources for the product catalog.

Used by the Django admin to load a catalog from CSV/XLSX/JSON and to export
it back out. Rows are matched on product name; unknown category names are
created on import.
"""

from import_export import fields, resources
from import_export.widgets import ForeignKeyWidget

from .models import Category, Product


class CategoryWidget(ForeignKeyWidget):
    """Resolve a category by name, creating it when missing."""

    def __init__(self):
        super().__init__(Category, field="name")

    def clean(self, value, row=None, **kwargs):
        if not value:
            return None
        category, _ = Category.objects.get_or_create(name=str(value).strip())
        return category


class ProductResource(resources.ModelResource):
    """Catalog rows: name, price, stock, category name, image URL."""

    category = fields.Field(
        column_name="category",
        attribute="category",
        widget=CategoryWidget(),
    )

    class Meta:
        model = Product
        fields = ("name", "price", "stock", "category", "image_url")
        export_order = ("name", "price", "stock", "category", "image_url")
        import_id_fields = ("name",)
        skip_unchanged = True
        report_skipped = True
