"""
eduportal API Routes
====================

All API route blueprints for the portal.

Usage:
    from eduportal.routes import register_routes
    register_routes(app)
"""
from .auth_routes import auth_bp
from .content_routes import content_bp
from .submission_routes import submission_bp
from .analytics_routes import analytics_bp


def register_routes(app):
    """Register all route blueprints with the Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(content_bp)
    app.register_blueprint(submission_bp)
    app.register_blueprint(analytics_bp)


__all__ = [
    'register_routes',
    'auth_bp',
    'content_bp',
    'submission_bp',
    'analytics_bp',
]
