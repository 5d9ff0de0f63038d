"""
Auth Routes for eduportal.
Sign-up, sign-in, sign-out and password reset against Supabase Auth, plus
the /api/me endpoint the frontend uses to pick the admin or student view.
"""
import logging
from flask import Blueprint, request, jsonify, g

from ..auth import bearer_token
from ..config import USERS_COLLECTION
from ..errors import PortalError
from ..roles import current_role
from ..services.document_store import get_store
from ..services.identity import get_identity

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


def _credentials(data):
    email = (data.get('email') or '').strip()
    password = data.get('password') or ''
    return email, password


@auth_bp.route('/api/auth/signup', methods=['POST'])
def signup():
    """Create a student account and profile."""
    data = request.get_json(silent=True) or {}
    email, password = _credentials(data)
    name = (data.get('name') or '').strip()

    if not email or not password or not name:
        return jsonify({"error": "Please fill in all fields"}), 400

    try:
        result = get_identity().sign_up(email, password, name, data.get('semester'))
        return jsonify({"success": True, **result}), 201
    except PortalError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error("Signup error: %s", e)
        return jsonify({"error": "Signup failed"}), 500


@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email, password = _credentials(data)

    if not email or not password:
        return jsonify({"error": "Email and password are required"}), 400

    try:
        return jsonify({"success": True, **get_identity().sign_in(email, password)})
    except PortalError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error("Login error: %s", e)
        return jsonify({"error": "Login failed"}), 500


@auth_bp.route('/api/auth/logout', methods=['POST'])
def logout():
    token = bearer_token()
    if not token:
        return jsonify({"error": "Authentication required"}), 401

    try:
        get_identity().sign_out(token)
        return jsonify({"success": True})
    except PortalError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error("Logout error: %s", e)
        return jsonify({"error": "Logout failed"}), 500


@auth_bp.route('/api/auth/reset-password', methods=['POST'])
def reset_password():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip()
    if not email:
        return jsonify({"error": "Email is required"}), 400

    try:
        get_identity().send_password_reset(email)
        return jsonify({"success": True, "message": "Password reset email sent! Check your inbox."})
    except PortalError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error("Password reset error: %s", e)
        return jsonify({"error": "Failed to send reset email"}), 500


@auth_bp.route('/api/me', methods=['GET'])
def me():
    """Current user, resolved role and profile."""
    try:
        profile = get_store().get_document(USERS_COLLECTION, g.user_id) or {}
        return jsonify({
            "id": g.user_id,
            "email": g.user_email,
            "role": current_role(),
            "name": profile.get('name', ''),
            "semester": profile.get('semester'),
        })
    except Exception as e:
        logger.error("Error loading current user: %s", e)
        return jsonify({"error": str(e)}), 500
