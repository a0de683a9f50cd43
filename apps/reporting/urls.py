"""
URL configuration for reporting app.
"""

from django.urls import path

from . import views

app_name = "reporting"

urlpatterns = [
    path("api/reports/sales/", views.sales_report, name="sales_report"),
    path("api/reports/sales/export/", views.sales_report_export, name="sales_report_export"),
    path("api/reports/top-products/", views.top_products, name="top_products"),
]
