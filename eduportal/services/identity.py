"""
Identity provider client (Supabase Auth).

Every sign-in/sign-up gets a fresh anon-key client so one user's session
never leaks into another request. Provider failures are re-raised as
AuthError with the provider's message.
"""
import logging
from datetime import datetime

from flask import g
from supabase import create_client

from ..config import config, USERS_COLLECTION, SEMESTERS, ROLE_STUDENT
from ..errors import AuthError
from ..models import UserProfile
from .document_store import get_store

logger = logging.getLogger(__name__)


def _session_payload(response):
    session = response.session
    user = response.user
    return {
        "user_id": user.id if user else None,
        "email": user.email if user else None,
        "access_token": session.access_token if session else None,
        "refresh_token": session.refresh_token if session else None,
    }


class IdentityService:
    """current-user, sign-in, sign-up, sign-out and password reset."""

    def __init__(self, url, anon_key, service_key):
        self.url = url
        self.anon_key = anon_key
        self.service_key = service_key

    def _anon_client(self):
        if not self.url or not self.anon_key:
            raise RuntimeError("Supabase credentials not configured. Check SUPABASE_URL and SUPABASE_ANON_KEY in .env")
        return create_client(self.url, self.anon_key)

    def current_user(self):
        """The authenticated caller for this request, or None."""
        user_id = getattr(g, 'user_id', None)
        if not user_id:
            return None
        return {"id": user_id, "email": getattr(g, 'user_email', '')}

    def sign_in(self, email, password):
        try:
            response = self._anon_client().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except RuntimeError:
            raise
        except Exception as e:
            logger.warning("Sign-in failed for %s: %s", email, e)
            raise AuthError(str(e) or "Login failed")
        return _session_payload(response)

    def sign_up(self, email, password, name, semester=None):
        """Create the auth account and the learner's profile document."""
        try:
            response = self._anon_client().auth.sign_up({"email": email, "password": password})
        except RuntimeError:
            raise
        except Exception as e:
            logger.warning("Sign-up failed for %s: %s", email, e)
            raise AuthError(str(e) or "Signup failed")

        if response.user is None:
            raise AuthError("Signup failed")

        profile = UserProfile(
            id=response.user.id,
            email=email,
            name=name,
            role=ROLE_STUDENT,
            semester=semester if semester in SEMESTERS else config.default_semester,
            created_at=datetime.now(),
        )
        get_store().create_document(USERS_COLLECTION, profile.to_document(), doc_id=profile.id)
        logger.info("Created student profile %s", profile.id)

        payload = _session_payload(response)
        payload["profile"] = profile.model_dump(mode="json")
        return payload

    def sign_out(self, access_token):
        """Revoke the session behind this access token."""
        if not self.url or not self.service_key:
            raise RuntimeError("Supabase credentials not configured. Check SUPABASE_URL and SUPABASE_SERVICE_KEY in .env")
        try:
            create_client(self.url, self.service_key).auth.admin.sign_out(access_token)
        except Exception as e:
            logger.warning("Sign-out failed: %s", e)
            raise AuthError(str(e) or "Logout failed")

    def send_password_reset(self, email):
        try:
            self._anon_client().auth.reset_password_for_email(email)
        except RuntimeError:
            raise
        except Exception as e:
            logger.warning("Password reset failed for %s: %s", email, e)
            raise AuthError(str(e) or "Failed to send reset email")


_identity = None


def get_identity() -> IdentityService:
    """Get or create the shared identity service."""
    global _identity
    if _identity is None:
        _identity = IdentityService(
            config.supabase_url, config.supabase_anon_key, config.supabase_service_key
        )
    return _identity
