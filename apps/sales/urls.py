"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    # Checkout and transaction history
    path("api/transactions/", views.TransactionListCreateView.as_view(), name="transaction_list"),
    path(
        "api/transactions/<uuid:pk>/",
        views.TransactionDetailView.as_view(),
        name="transaction_detail",
    ),
    # POS helpers
    path("api/pos/calculate-totals/", views.pos_calculate_totals, name="pos_calculate_totals"),
]
