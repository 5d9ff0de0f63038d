"""
Content Service
===============
Creates, loads and lists question sets (assignments and quizzes) in the
document store. This is the boundary where parser output becomes a
record: empty parses are rejected here, never saved.
"""
import logging
from datetime import datetime

from ..config import CONTENT_COLLECTION, SCORES_COLLECTION, USERS_COLLECTION, SEMESTERS, config
from ..errors import MalformedQuestionSetError, NotFoundError, ParseEmptyError
from ..models import QuestionKind, QuestionSet
from .content_parser import parse_questions

logger = logging.getLogger(__name__)


def build_question_set(title, kind, text, semester=None, created_at=None) -> QuestionSet:
    """
    Parse raw question text into a validated, unsaved QuestionSet.

    Raises:
        MalformedQuestionSetError: blank title or unknown semester
        ParseEmptyError: the text held no valid questions
    """
    title = (title or "").strip()
    if not title or not (text or "").strip():
        raise MalformedQuestionSetError("Please fill in all fields")
    if semester is not None and semester not in SEMESTERS:
        raise MalformedQuestionSetError(f"Unknown semester: {semester}")

    kind = QuestionKind(kind)
    questions = parse_questions(kind, text)
    if not questions:
        raise ParseEmptyError()

    return QuestionSet(
        title=title,
        kind=kind,
        semester=semester,
        questions=questions,
        created_at=created_at or datetime.now(),
    ).validate_structure()


def create_question_set(store, title, kind, text, semester=None) -> QuestionSet:
    """Build and persist a question set. Returns it with its store id."""
    question_set = build_question_set(title, kind, text, semester)
    saved = store.create_document(CONTENT_COLLECTION, question_set.to_document())
    question_set.id = str(saved["id"])
    logger.info("Created %s '%s' with %d questions",
                question_set.kind.value, question_set.title, len(question_set.questions))
    return question_set


def get_question_set(store, set_id) -> QuestionSet:
    doc = store.get_document(CONTENT_COLLECTION, set_id)
    if not doc:
        raise NotFoundError("Assignment not found")
    return QuestionSet.from_document(doc)


def list_question_sets(store):
    """All stored question sets, newest first. Unreadable records are skipped."""
    question_sets = []
    for doc in store.list_documents(CONTENT_COLLECTION, order_by='created_at', descending=True):
        try:
            question_sets.append(QuestionSet.from_document(doc))
        except MalformedQuestionSetError as e:
            logger.warning("Skipping content record %s: %s", doc.get('id'), e.message)
    return question_sets


def learner_semester(store, user_id):
    profile = store.get_document(USERS_COLLECTION, user_id)
    if profile and profile.get('semester'):
        return profile['semester']
    return config.default_semester


def content_for_learner(store, user_id):
    """
    Question sets visible to a learner, split by whether the learner has
    already submitted them.
    """
    semester = learner_semester(store, user_id)
    visible = [qs for qs in list_question_sets(store) if qs.is_visible_to(semester)]

    scores = store.list_documents(SCORES_COLLECTION, filters={'student_id': user_id})
    attempted_ids = {str(s.get('assignment_id')) for s in scores}

    pending = [qs for qs in visible if qs.id not in attempted_ids]
    completed = [qs for qs in visible if qs.id in attempted_ids]

    return {
        "semester": semester,
        "pending": pending,
        "completed": completed,
    }
