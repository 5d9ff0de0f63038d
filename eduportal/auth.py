"""
Supabase JWT Authentication for eduportal.
Validates Bearer tokens on all /api/ routes except public endpoints.
"""
import os
import jwt
from flask import request, jsonify, g


# Routes that don't require authentication
PUBLIC_PREFIXES = [
    '/api/auth/',          # Sign-in, sign-up and password reset
]

PUBLIC_EXACT = [
    '/api/status',
]


def get_jwt_secret():
    """Get the Supabase JWT secret from environment."""
    secret = os.getenv('SUPABASE_JWT_SECRET')
    if not secret:
        raise RuntimeError('SUPABASE_JWT_SECRET not configured')
    return secret


def validate_token(token):
    """
    Validate a Supabase JWT and return the decoded payload.
    Returns None if invalid.
    """
    try:
        payload = jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=['HS256'],
            audience='authenticated',
        )
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def bearer_token():
    """The raw Bearer token on the current request, or None."""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    return auth_header[7:]


def is_public_route(path):
    """Check if a route is public (no auth required)."""
    if path in PUBLIC_EXACT:
        return True
    for prefix in PUBLIC_PREFIXES:
        if path.startswith(prefix):
            return True
    return False


def init_auth(app):
    """
    Register the before_request auth hook on the Flask app.
    Call this BEFORE registering blueprints.
    """
    @app.before_request
    def check_auth():
        # Skip non-API routes
        if not request.path.startswith('/api/'):
            return None

        if is_public_route(request.path):
            return None

        token = bearer_token()
        if token is None:
            return jsonify({'error': 'Authentication required'}), 401

        payload = validate_token(token)
        if payload is None:
            return jsonify({'error': 'Invalid or expired token'}), 401

        # Attach user info to Flask's g object for use in route handlers
        g.user_id = payload.get('sub')
        g.user_email = payload.get('email', '')
