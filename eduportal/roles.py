"""
Role resolution for signed-in users.

Resolvers are tried in order and the first non-None role wins:
1. AllowListRoleResolver: emails listed in ADMIN_EMAILS are admins.
2. ProfileRoleResolver: the role stored on the user's profile document,
   defaulting to student.
"""
import functools
import logging
from datetime import datetime

from flask import g, jsonify

from .config import config, USERS_COLLECTION, ROLE_ADMIN, ROLE_STUDENT
from .services.document_store import get_store

logger = logging.getLogger(__name__)


class RoleResolver:
    def resolve(self, user_id, email):
        """Return a role string, or None to defer to the next resolver."""
        raise NotImplementedError


class AllowListRoleResolver(RoleResolver):
    """
    Grants admin to configured emails. When a store is given it also makes
    sure the admin has a profile document, so admin-authored data has a
    name to show.
    """

    def __init__(self, admin_emails, store=None):
        self.admin_emails = {e.strip().lower() for e in admin_emails if e.strip()}
        self.store = store

    def resolve(self, user_id, email):
        if not email or email.strip().lower() not in self.admin_emails:
            return None
        if self.store is not None:
            self._ensure_admin_profile(user_id, email)
        return ROLE_ADMIN

    def _ensure_admin_profile(self, user_id, email):
        try:
            if self.store.get_document(USERS_COLLECTION, user_id) is None:
                self.store.create_document(USERS_COLLECTION, {
                    "email": email,
                    "name": "Administrator",
                    "role": ROLE_ADMIN,
                    "semester": None,
                    "created_at": datetime.now().isoformat(),
                }, doc_id=user_id)
                logger.info("Created admin profile for %s", email)
        except Exception as e:
            # The allow-list alone decides the role
            logger.error("Error creating admin profile for %s: %s", email, e)


class ProfileRoleResolver(RoleResolver):
    """Role stored on the profile document. Missing profile or lookup errors mean student."""

    def __init__(self, store):
        self.store = store

    def resolve(self, user_id, email):
        try:
            profile = self.store.get_document(USERS_COLLECTION, user_id)
        except Exception as e:
            logger.error("Error fetching user role for %s: %s", user_id, e)
            return ROLE_STUDENT
        if not profile:
            return ROLE_STUDENT
        return profile.get('role') or ROLE_STUDENT


class ChainedRoleResolver(RoleResolver):
    def __init__(self, *resolvers):
        self.resolvers = list(resolvers)

    def resolve(self, user_id, email):
        for resolver in self.resolvers:
            role = resolver.resolve(user_id, email)
            if role is not None:
                return role
        return None


def get_role_resolver():
    """The resolver chain for the configured admin list and store."""
    store = get_store()
    return ChainedRoleResolver(
        AllowListRoleResolver(config.admin_emails, store),
        ProfileRoleResolver(store),
    )


def current_role():
    """Resolve (once per request) the role of the authenticated caller."""
    if 'user_role' not in g:
        g.user_role = get_role_resolver().resolve(g.user_id, getattr(g, 'user_email', ''))
    return g.user_role


def admin_required(view):
    """Reject non-admin callers with 403."""
    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        if current_role() != ROLE_ADMIN:
            return jsonify({"error": "Admin access required"}), 403
        return view(*args, **kwargs)
    return wrapper
