"""
Serializers for PIN login and user management.
"""

from django.contrib.auth import get_user_model

from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from .pin_auth import get_pin_authenticator

User = get_user_model()


def issue_tokens(user):
    """
    Issue a JWT pair for a user who passed the PIN check.

    Adds the POS claims the terminal needs to render the right screens.
    """
    refresh = RefreshToken.for_user(user)
    refresh["username"] = user.username
    refresh["role"] = user.role

    return {
        "refresh": str(refresh),
        "access": str(refresh.access_token),
    }


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User model.

    The PIN is write-only: required when creating a user, optional on update
    (an omitted PIN leaves the current one in place).
    """

    pin = serializers.CharField(write_only=True, required=False, min_length=4, max_length=128)

    class Meta:
        model = User
        fields = ["id", "username", "role", "pin"]
        read_only_fields = ["id"]

    def validate(self, attrs):
        if self.instance is None and not attrs.get("pin"):
            raise serializers.ValidationError({"pin": "PIN is required."})
        return attrs

    def create(self, validated_data):
        pin = validated_data.pop("pin")
        user = User(**validated_data)
        user.set_unusable_password()
        get_pin_authenticator().set_pin(user, pin)
        user.save()
        return user

    def update(self, instance, validated_data):
        pin = validated_data.pop("pin", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if pin:
            get_pin_authenticator().set_pin(instance, pin)
        instance.save()
        return instance


class PinLoginSerializer(serializers.Serializer):
    """
    Serializer for terminal login with username and PIN.
    """

    username = serializers.CharField()
    pin = serializers.CharField(write_only=True)

    def validate(self, attrs):
        user = get_pin_authenticator().authenticate(attrs["username"], attrs["pin"])
        if user is None:
            raise serializers.ValidationError("Invalid username or PIN.")
        attrs["user"] = user
        return attrs

    def to_login_response(self):
        user = self.validated_data["user"]
        data = UserSerializer(user).data
        data["tokens"] = issue_tokens(user)
        return data
