"""
Serializers for catalog models.
"""

from django.core.exceptions import ValidationError as DjangoValidationError

from rest_framework import serializers

from .models import Category, Product


class CategorySerializer(serializers.ModelSerializer):
    """Serializer for Category model."""

    class Meta:
        model = Category
        fields = ["id", "name"]
        read_only_fields = ["id"]
        # Duplicate names are reported as 409 by the views
        extra_kwargs = {"name": {"validators": []}}

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category name is required.")
        return value


class CategoryReferenceField(serializers.RelatedField):
    """
    Category reference on a product.

    Accepts either a category id or an object carrying one ({"id": ...}),
    and renders as {"id", "name"}.
    """

    default_error_messages = {
        "does_not_exist": "A valid category is required.",
    }

    def to_representation(self, value):
        return {"id": str(value.id), "name": value.name}

    def to_internal_value(self, data):
        if isinstance(data, dict):
            data = data.get("id")
        if not data:
            self.fail("does_not_exist")
        try:
            return self.get_queryset().get(pk=data)
        except (Category.DoesNotExist, DjangoValidationError, ValueError, TypeError):
            self.fail("does_not_exist")


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product model as used by the POS grid and back office."""

    category = CategoryReferenceField(queryset=Category.objects.all())
    imageUrl = serializers.URLField(
        source="image_url", max_length=500, required=False, allow_blank=True
    )
    stock = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    class Meta:
        model = Product
        fields = ["id", "name", "price", "stock", "category", "imageUrl"]
        read_only_fields = ["id"]
