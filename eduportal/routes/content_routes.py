"""
Content Routes for eduportal.
Admins create assignments and quizzes from pasted text; students list the
content for their semester and open a single item (answers stripped).
"""
import logging
from flask import Blueprint, request, jsonify, g

from ..config import DEFAULT_SEMESTER
from ..errors import ParseEmptyError, PortalError
from ..models import QuestionKind
from ..roles import admin_required
from ..services.content_service import (
    content_for_learner, create_question_set, get_question_set, list_question_sets,
)
from ..services.document_store import get_store

content_bp = Blueprint('content', __name__)
logger = logging.getLogger(__name__)


def _create(kind, default_semester=None):
    data = request.get_json(silent=True) or {}
    title = data.get('title', '')
    questions_text = data.get('questions_text', '')
    semester = data.get('semester') or default_semester

    try:
        question_set = create_question_set(get_store(), title, kind, questions_text, semester)
    except ParseEmptyError as e:
        # Hand the text back so the admin can fix it
        return jsonify({**e.to_dict(), "questions_text": questions_text}), 400
    except PortalError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error("Error creating %s: %s", kind.value, e)
        return jsonify({"error": f"Failed to create {kind.value}"}), 500

    count = len(question_set.questions)
    if kind is QuestionKind.MULTIPLE_CHOICE:
        message = f"Quiz created for Semester {semester.replace('sem-', '')} with {count} questions!"
    else:
        message = f"Assignment created with {count} questions!"

    return jsonify({
        "success": True,
        "id": question_set.id,
        "question_count": count,
        "message": message,
    }), 201


@content_bp.route('/api/admin/assignments', methods=['POST'])
@admin_required
def create_assignment():
    """Create an open-answer assignment from "Qn:/An:" text."""
    return _create(QuestionKind.OPEN_ANSWER)


@content_bp.route('/api/admin/quizzes', methods=['POST'])
@admin_required
def create_quiz():
    """Create a multiple-choice quiz. Quizzes default to the first semester."""
    return _create(QuestionKind.MULTIPLE_CHOICE, default_semester=DEFAULT_SEMESTER)


@content_bp.route('/api/admin/content', methods=['GET'])
@admin_required
def list_all_content():
    try:
        question_sets = list_question_sets(get_store())
        return jsonify({"content": [qs.model_dump(mode="json") for qs in question_sets]})
    except Exception as e:
        logger.error("List content error: %s", e)
        return jsonify({"error": str(e)}), 500


@content_bp.route('/api/content', methods=['GET'])
def list_content():
    """Content visible to the signed-in student, split into pending and completed."""
    try:
        result = content_for_learner(get_store(), g.user_id)
        return jsonify({
            "semester": result["semester"],
            "pending": [qs.learner_view() for qs in result["pending"]],
            "completed": [qs.learner_view() for qs in result["completed"]],
        })
    except Exception as e:
        logger.error("Error fetching content: %s", e)
        return jsonify({"error": str(e)}), 500


@content_bp.route('/api/content/<set_id>', methods=['GET'])
def get_content(set_id):
    try:
        return jsonify(get_question_set(get_store(), set_id).learner_view())
    except PortalError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error("Error fetching content %s: %s", set_id, e)
        return jsonify({"error": str(e)}), 500
