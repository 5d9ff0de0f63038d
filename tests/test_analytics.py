"""
Test: Analytics — dashboard summary, distribution, roster, profile stats.
"""
import pytest
from eduportal.models import QuestionSet
from eduportal.services.analytics import (
    assignment_completion, build_admin_dashboard, dashboard_summary, remove_student,
    score_distribution, student_performance, student_profile_stats, student_roster,
)

STUDENTS = [
    {"id": "s1", "name": "Alice Martin", "email": "alice@example.com", "role": "student", "semester": "sem-1"},
    {"id": "s2", "name": "Bruno Petit", "email": "bruno@example.com", "role": "student", "semester": "sem-2"},
]


def _score(student_id, score, total, title="Greetings", timestamp="2026-03-01T10:00:00"):
    return {
        "student_id": student_id, "student_name": "", "assignment_id": "1",
        "assignment_title": title, "score": score, "total_questions": total,
        "timestamp": timestamp,
    }


def _set(title, kind):
    doc = {"id": title, "title": title, "type": kind, "questions": []}
    return QuestionSet.from_document(doc)


class TestDashboardSummary:
    def test_counts_and_average(self):
        sets = [_set("A", "assignment"), _set("B", "quiz"), _set("C", "quiz")]
        scores = [_score("s1", 1, 2), _score("s2", 1, 1)]
        summary = dashboard_summary(STUDENTS, sets, scores)
        assert summary == {
            "total_students": 2,
            "total_assignments": 1,
            "total_quizzes": 2,
            "average_score": 75.0,
        }

    def test_no_scores(self):
        assert dashboard_summary([], [], [])["average_score"] == 0


class TestScoreDistribution:
    def test_band_edges(self):
        scores = [
            _score("s1", 0, 5),   # 0%
            _score("s1", 1, 5),   # 20%
            _score("s1", 2, 5),   # 40%
            _score("s1", 3, 5),   # 60%
            _score("s1", 4, 5),   # 80%
            _score("s1", 5, 5),   # 100%
        ]
        counts = {row["range"]: row["count"] for row in score_distribution(scores)}
        assert counts == {"0-20%": 2, "21-40%": 1, "41-60%": 1, "61-80%": 1, "81-100%": 1}


class TestStudentPerformance:
    def test_first_name_and_rounded_average(self):
        scores = [_score("s1", 1, 3), _score("s1", 1, 2)]
        rows = student_performance(STUDENTS, scores)
        assert rows[0] == {"name": "Alice", "score": 42, "attempts": 2}
        assert rows[1] == {"name": "Bruno", "score": 0, "attempts": 0}

    def test_limit(self):
        many = [{"id": str(i), "name": f"S{i}"} for i in range(15)]
        assert len(student_performance(many, [])) == 10


class TestAssignmentCompletion:
    def test_truncates_long_titles(self):
        sets = [_set("A very long assignment title", "assignment")]
        rows = assignment_completion(sets, [_score("s1", 1, 1, title="A very long assignment title")], 2)
        assert rows == [{"name": "A very long ass...", "completed": 1, "total": 2}]


class TestStudentRoster:
    def test_counts_and_average(self):
        rows = student_roster(STUDENTS, [_score("s1", 1, 3), _score("s1", 3, 3)])
        alice = rows[0]
        assert alice["score_count"] == 2
        assert alice["average_score"] == 66.7

    def test_search_name_or_email(self):
        assert [r["id"] for r in student_roster(STUDENTS, [], search="BRUNO")] == ["s2"]
        assert [r["id"] for r in student_roster(STUDENTS, [], search="alice@")] == ["s1"]


class TestStudentProfileStats:
    def test_stats(self):
        scores = [
            _score("s1", 1, 4, timestamp="2026-03-01T10:00:00"),
            _score("s1", 3, 4, timestamp="2026-03-05T10:00:00"),
        ]
        stats = student_profile_stats(scores)
        assert stats["total_attempts"] == 2
        assert stats["average_score"] == 50.0
        assert stats["best_score"] == 75.0
        assert stats["history"][0]["timestamp"] == "2026-03-05T10:00:00"
        assert stats["history"][0]["percentage"] == 75.0

    def test_empty(self):
        stats = student_profile_stats([])
        assert stats["total_attempts"] == 0
        assert stats["best_score"] == 0


class TestStoreBacked:
    def test_dashboard(self, store):
        for s in STUDENTS:
            store.create_document("users", s, doc_id=s["id"])
        store.create_document("scores", _score("s1", 2, 2))
        dashboard = build_admin_dashboard(store)
        assert dashboard["summary"]["total_students"] == 2
        assert dashboard["recent_scores"][0]["percentage"] == 100.0

    def test_remove_student(self, store):
        store.create_document("users", STUDENTS[0], doc_id="s1")
        store.create_document("scores", _score("s1", 1, 1))
        store.create_document("scores", _score("s1", 0, 1))
        store.create_document("scores", _score("s2", 1, 1))

        assert remove_student(store, "s1") == 2
        assert store.get_document("users", "s1") is None
        assert [s["student_id"] for s in store.list_documents("scores")] == ["s2"]
