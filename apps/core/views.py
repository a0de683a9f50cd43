"""
Core views for the point-of-sale platform.
"""

import logging

from django.contrib.auth import get_user_model
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .permissions import IsAdminRole
from .serializers import PinLoginSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


@require_http_methods(["GET"])
def health_check(request):
    """
    Health check endpoint for Docker and Kubernetes.
    Returns 200 OK if the application is running.
    """
    return JsonResponse({"status": "healthy", "service": "pos-backend"})


class PinLoginView(APIView):
    """
    API endpoint for terminal login.

    Request body: {"username": "...", "pin": "..."}
    Returns the user (without PIN) and a JWT pair, or 401.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = PinLoginSerializer(data=request.data)
        if not serializer.is_valid():
            logger.info("Failed PIN login attempt")
            return Response(
                {"message": "Invalid username or PIN."},
                status=status.HTTP_401_UNAUTHORIZED,
            )
        return Response(serializer.to_login_response(), status=status.HTTP_200_OK)


class UserListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing and creating users (administrators only).
    """

    queryset = User.objects.all().order_by("username")
    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]
    pagination_class = None


class UserDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for updating and deleting a user (administrators only).

    Deleting a user keeps their past orders; orders carry a username snapshot.
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]
