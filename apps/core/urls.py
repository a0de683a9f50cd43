from django.urls import path

from rest_framework_simplejwt.views import TokenRefreshView

from . import views

app_name = "core"

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    # Authentication
    path("api/login/", views.PinLoginView.as_view(), name="pin_login"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # User management
    path("api/users/", views.UserListCreateView.as_view(), name="user_list"),
    path("api/users/<int:pk>/", views.UserDetailView.as_view(), name="user_detail"),
]
