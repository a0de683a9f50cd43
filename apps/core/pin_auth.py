"""
PIN authentication for POS terminals.

Terminal login is username + PIN. The lookup lives behind a small interface
so the credential scheme can be replaced independently of the rest of the
application; the authenticator in use is chosen by the
``POS_PIN_AUTHENTICATOR`` setting.
"""

import hmac
import logging

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

DEFAULT_PIN_AUTHENTICATOR = "apps.core.pin_auth.PlaintextPinAuthenticator"


class PinAuthenticator:
    """Interface for resolving a user from a username and PIN."""

    def authenticate(self, username, pin):
        """
        Return the matching active user, or None.

        Args:
            username: Login name entered at the terminal
            pin: PIN entered at the terminal
        """
        raise NotImplementedError

    def set_pin(self, user, pin):
        """Store a new PIN on the user instance (caller saves)."""
        raise NotImplementedError


class PlaintextPinAuthenticator(PinAuthenticator):
    """
    Compare PINs stored as plain text.

    WARNING: placeholder credential check. PINs are kept unhashed, which is
    unsafe for production; replace with a hashing authenticator before
    deploying outside a demo environment.
    """

    def authenticate(self, username, pin):
        from apps.core.models import User

        if not username or not pin:
            return None

        user = User.objects.filter(username=username, is_active=True).first()
        if user is None:
            return None

        if not hmac.compare_digest(str(user.pin), str(pin)):
            logger.info(f"PIN rejected for user {username}")
            return None

        return user

    def set_pin(self, user, pin):
        user.pin = pin


def get_pin_authenticator():
    """Instantiate the configured PIN authenticator."""
    path = getattr(settings, "POS_PIN_AUTHENTICATOR", DEFAULT_PIN_AUTHENTICATOR)
    return import_string(path)()
