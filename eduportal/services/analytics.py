"""
Analytics Service
=================
Aggregates score records for the admin dashboard, the student roster and
a student's own profile page. The aggregation helpers are pure functions
over store documents; the build_* functions do the fetching.
"""
import math

from ..config import SCORES_COLLECTION, USERS_COLLECTION, ROLE_STUDENT
from ..models import QuestionKind, calculate_percentage
from .content_service import list_question_sets

SCORE_BUCKETS = [
    ("0-20%", 0, 20),
    ("21-40%", 20, 40),
    ("41-60%", 40, 60),
    ("61-80%", 60, 80),
    ("81-100%", 80, 100),
]


def _percent(score_doc):
    total = score_doc.get('total_questions') or 0
    if not total:
        return 0.0
    return (score_doc.get('score', 0) / total) * 100


def _average_percent(score_docs):
    if not score_docs:
        return 0.0
    return sum(_percent(s) for s in score_docs) / len(score_docs)


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def _scores_by_student(score_docs):
    grouped = {}
    for s in score_docs:
        grouped.setdefault(s.get('student_id'), []).append(s)
    return grouped


def dashboard_summary(students, question_sets, score_docs):
    return {
        "total_students": len(students),
        "total_assignments": sum(1 for qs in question_sets if qs.kind is QuestionKind.OPEN_ANSWER),
        "total_quizzes": sum(1 for qs in question_sets if qs.kind is QuestionKind.MULTIPLE_CHOICE),
        "average_score": round(_average_percent(score_docs), 1),
    }


def student_performance(students, score_docs, limit=10):
    """Average percentage and attempt count per student (first `limit` students)."""
    grouped = _scores_by_student(score_docs)
    rows = []
    for student in students[:limit]:
        student_scores = grouped.get(student.get('id'), [])
        name = (student.get('name') or '').split(' ')[0]
        rows.append({
            "name": name,
            "score": _round_half_up(_average_percent(student_scores)),
            "attempts": len(student_scores),
        })
    return rows


def assignment_completion(question_sets, score_docs, total_students, limit=5):
    """How many submissions each of the first `limit` question sets has."""
    rows = []
    for qs in question_sets[:limit]:
        completed = sum(1 for s in score_docs if s.get('assignment_title') == qs.title)
        name = qs.title if len(qs.title) <= 15 else qs.title[:15] + '...'
        rows.append({"name": name, "completed": completed, "total": total_students})
    return rows


def score_distribution(score_docs):
    """Count scores per percentage band. Bands are (low, high], the first includes 0."""
    distribution = []
    for label, low, high in SCORE_BUCKETS:
        if low == 0:
            count = sum(1 for s in score_docs if _percent(s) <= high)
        elif high == 100:
            count = sum(1 for s in score_docs if _percent(s) > low)
        else:
            count = sum(1 for s in score_docs if low < _percent(s) <= high)
        distribution.append({"range": label, "count": count})
    return distribution


def with_percentage(score_doc):
    row = dict(score_doc)
    row["percentage"] = calculate_percentage(score_doc.get('score', 0), score_doc.get('total_questions', 0))
    return row


def student_roster(students, score_docs, search=None):
    """Roster rows with per-student submission count and average."""
    grouped = _scores_by_student(score_docs)
    term = (search or '').strip().lower()

    rows = []
    for student in students:
        name = student.get('name') or ''
        email = student.get('email') or ''
        if term and term not in name.lower() and term not in email.lower():
            continue
        student_scores = grouped.get(student.get('id'), [])
        rows.append({
            "id": student.get('id'),
            "name": name,
            "email": email,
            "semester": student.get('semester'),
            "created_at": student.get('created_at'),
            "score_count": len(student_scores),
            "average_score": round(_average_percent(student_scores), 1),
        })
    return rows


def student_profile_stats(score_docs):
    """Attempts, average and best percentage, plus history newest first."""
    history = sorted(score_docs, key=lambda s: s.get('timestamp') or '', reverse=True)
    return {
        "total_attempts": len(history),
        "average_score": round(_average_percent(history), 1),
        "best_score": round(max((_percent(s) for s in history), default=0.0), 1),
        "history": [with_percentage(s) for s in history],
    }


# =============================================================================
# STORE-BACKED VIEWS
# =============================================================================

def list_students(store):
    return store.list_documents(USERS_COLLECTION, filters={'role': ROLE_STUDENT})


def build_admin_dashboard(store, recent_limit=10):
    score_docs = store.list_documents(SCORES_COLLECTION, order_by='timestamp', descending=True)
    students = list_students(store)
    question_sets = list_question_sets(store)

    return {
        "summary": dashboard_summary(students, question_sets, score_docs),
        "student_performance": student_performance(students, score_docs),
        "assignment_completion": assignment_completion(question_sets, score_docs, len(students)),
        "score_distribution": score_distribution(score_docs),
        "recent_scores": [with_percentage(s) for s in score_docs[:recent_limit]],
    }


def build_student_roster(store, search=None):
    return student_roster(list_students(store), store.list_documents(SCORES_COLLECTION), search)


def build_student_profile(store, user_id):
    profile = store.get_document(USERS_COLLECTION, user_id) or {}
    score_docs = store.list_documents(SCORES_COLLECTION, filters={'student_id': user_id})
    stats = student_profile_stats(score_docs)
    stats["profile"] = {
        "id": user_id,
        "name": profile.get('name', ''),
        "email": profile.get('email', ''),
        "semester": profile.get('semester'),
        "created_at": profile.get('created_at'),
    }
    return stats


def remove_student(store, student_id):
    """Delete a student's scores one by one, then the profile. Returns the number of scores removed."""
    score_docs = store.list_documents(SCORES_COLLECTION, filters={'student_id': student_id})
    for score in score_docs:
        store.delete_document(SCORES_COLLECTION, score['id'])
    store.delete_document(USERS_COLLECTION, student_id)
    return len(score_docs)
