"""
Views for catalog management.

Cashiers read the catalog to build carts; administrators maintain it.
"""

import logging

from django.db import transaction

from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import IsAdminOrReadOnly, IsAdminRole

from .models import Category, Product
from .serializers import CategorySerializer, ProductSerializer

logger = logging.getLogger(__name__)


def _duplicate_category_response():
    return Response(
        {"message": "Category name already exists."},
        status=status.HTTP_409_CONFLICT,
    )


class CategoryListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing categories (sorted by name) and creating them.
    """

    queryset = Category.objects.order_by("name")
    serializer_class = CategorySerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if Category.objects.filter(name=serializer.validated_data["name"]).exists():
            return _duplicate_category_response()

        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class CategoryDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for renaming and deleting a category.

    Deleting a category leaves its products in the catalog without a category.
    """

    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [IsAdminOrReadOnly]

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        name = serializer.validated_data.get("name", instance.name)
        if Category.objects.filter(name=name).exclude(pk=instance.pk).exists():
            return _duplicate_category_response()

        serializer.save()
        return Response(serializer.data)

    def perform_destroy(self, instance):
        orphaned = instance.products.count()
        instance.delete()
        logger.info(f"Deleted category {instance.name}, {orphaned} product(s) left uncategorized")


class ProductListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for the product catalog.

    Query parameters:
    - search: Filter by name (case-insensitive)
    - category: Filter by category id
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None

    def get_queryset(self):
        queryset = Product.objects.select_related("category").order_by("name")

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(name__icontains=search)

        category_id = self.request.query_params.get("category")
        if category_id:
            queryset = queryset.filter(category_id=category_id)

        return queryset


class ProductDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for a single product.

    Deleting a product never alters past orders, which keep their own copy
    of the product's name and price.
    """

    queryset = Product.objects.select_related("category")
    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]


@api_view(["POST"])
@permission_classes([IsAdminRole])
def product_bulk_create(request):
    """
    Import several products at once.

    Request body: a list of product objects as accepted by the product
    endpoint. Entries that fail validation (most commonly a missing or
    unknown category) are skipped.

    Response:
    {
        "success": true,
        "count": 3,
        "skipped": 1
    }
    """
    payload = request.data
    if not isinstance(payload, list) or not payload:
        return Response(
            {"message": "No products array to import."},
            status=status.HTTP_400_BAD_REQUEST,
        )

    valid = []
    for entry in payload:
        serializer = ProductSerializer(data=entry)
        if serializer.is_valid():
            valid.append(serializer)

    if not valid:
        return Response(
            {"message": "No valid products with category to import."},
            status=status.HTTP_400_BAD_REQUEST,
        )

    with transaction.atomic():
        for serializer in valid:
            serializer.save()

    skipped = len(payload) - len(valid)
    logger.info(f"Bulk imported {len(valid)} product(s), skipped {skipped}")

    return Response(
        {"success": True, "count": len(valid), "skipped": skipped},
        status=status.HTTP_201_CREATED,
    )
