"""
Analytics API routes for eduportal.
Admin dashboard, student roster management, and the student's own profile.
"""
import logging
from flask import Blueprint, request, jsonify, g

from ..roles import admin_required
from ..services.analytics import (
    build_admin_dashboard, build_student_profile, build_student_roster, remove_student,
)
from ..services.document_store import get_store

analytics_bp = Blueprint('analytics', __name__)
logger = logging.getLogger(__name__)


@analytics_bp.route('/api/admin/analytics')
@admin_required
def get_analytics():
    """Summary cards, chart data and the most recent scores."""
    try:
        return jsonify(build_admin_dashboard(get_store()))
    except Exception as e:
        logger.error("Analytics error: %s", e)
        return jsonify({"error": str(e)}), 500


@analytics_bp.route('/api/admin/students')
@admin_required
def list_students():
    search = request.args.get('search', '')
    try:
        students = build_student_roster(get_store(), search)
        return jsonify({"students": students, "total": len(students)})
    except Exception as e:
        logger.error("Student roster error: %s", e)
        return jsonify({"error": str(e)}), 500


@analytics_bp.route('/api/admin/students/<student_id>', methods=['DELETE'])
@admin_required
def delete_student(student_id):
    """Remove a student and every score they have."""
    try:
        removed = remove_student(get_store(), student_id)
        logger.info("Removed student %s and %d scores", student_id, removed)
        return jsonify({"success": True, "scores_removed": removed})
    except Exception as e:
        logger.error("Delete student error: %s", e)
        return jsonify({"error": f"Failed to delete: {e}"}), 500


@analytics_bp.route('/api/profile')
def get_profile():
    """The signed-in student's stats and score history."""
    try:
        return jsonify(build_student_profile(get_store(), g.user_id))
    except Exception as e:
        logger.error("Profile error: %s", e)
        return jsonify({"error": str(e)}), 500
