"""
Submission Service
==================
Fetches everything a graded attempt needs, grades it and saves exactly
one score record. Incomplete attempts are rejected before grading and
leave nothing behind.
"""
import logging

from ..config import SCORES_COLLECTION, USERS_COLLECTION
from .content_service import get_question_set
from .grading_service import build_score_record, ensure_complete, grade_submission

logger = logging.getLogger(__name__)

UNKNOWN_STUDENT = "Unknown Student"


def resolve_student_name(store, user_id):
    profile = store.get_document(USERS_COLLECTION, user_id)
    if profile and profile.get('name'):
        return profile['name']
    return UNKNOWN_STUDENT


def submit_attempt(store, set_id, user_id, answers):
    """
    Grade and record one attempt.

    Returns (GradeResult, ScoreRecord). Raises NotFoundError,
    IncompleteSubmissionError or MalformedSubmissionError without saving.
    """
    question_set = get_question_set(store, set_id)
    ensure_complete(question_set, answers)

    student_name = resolve_student_name(store, user_id)
    result = grade_submission(question_set, answers)
    record = build_score_record(question_set, result, user_id, student_name)

    saved = store.create_document(SCORES_COLLECTION, record.to_document())
    record.id = str(saved["id"])

    logger.info("Recorded score %d/%d for '%s' (student %s)",
                record.score, record.total_questions, question_set.title, user_id)
    return result, record
