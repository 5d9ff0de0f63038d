"""
Submission Routes for eduportal.
Students submit one answer per question; the attempt is graded at once
and a score record saved.
"""
import logging
from flask import Blueprint, request, jsonify, g

from ..errors import PortalError
from ..services.document_store import get_store
from ..services.submission_service import submit_attempt

submission_bp = Blueprint('submission', __name__)
logger = logging.getLogger(__name__)


@submission_bp.route('/api/content/<set_id>/submit', methods=['POST'])
def submit(set_id):
    """
    Body: {"answers": ["...", ...]} in question order. Quiz answers are
    option labels "A".."D".
    """
    data = request.get_json(silent=True) or {}
    answers = data.get('answers')
    if not isinstance(answers, list):
        return jsonify({"error": "answers must be a list"}), 400

    try:
        result, record = submit_attempt(get_store(), set_id, g.user_id, answers)
    except PortalError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error("Submit error for %s: %s", set_id, e)
        return jsonify({"error": "Failed to submit"}), 500

    return jsonify({
        "success": True,
        "score_id": record.id,
        "student_name": record.student_name,
        "score": result.score,
        "total_questions": result.total_questions,
        "percentage": result.percentage,
        "feedback_summary": result.feedback_summary,
        "verdicts": [v.model_dump() for v in result.verdicts],
    })
