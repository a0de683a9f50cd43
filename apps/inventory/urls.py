"""
URL configuration for the catalog app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    # Categories
    path("api/categories/", views.CategoryListCreateView.as_view(), name="category_list"),
    path(
        "api/categories/<uuid:pk>/", views.CategoryDetailView.as_view(), name="category_detail"
    ),
    # Products
    path("api/products/", views.ProductListCreateView.as_view(), name="product_list"),
    path("api/products/bulk/", views.product_bulk_create, name="product_bulk_create"),
    path("api/products/<uuid:pk>/", views.ProductDetailView.as_view(), name="product_detail"),
]
