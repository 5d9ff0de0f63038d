"""
Test: Grading service — open-answer and quiz scoring, completeness checks.
"""
from datetime import datetime

import pytest
from pydantic import ValidationError

from eduportal.errors import (
    IncompleteSubmissionError, MalformedQuestionSetError, MalformedSubmissionError,
)
from eduportal.models import MultipleChoiceQuestion, OpenAnswerQuestion, QuestionKind, QuestionSet
from eduportal.services.content_parser import parse_multiple_choice, parse_open_answer
from eduportal.services.grading_service import (
    build_score_record, calculate_percentage, ensure_complete, feedback_summary,
    find_unanswered, grade_submission, normalize_answer,
)


def _assignment(*pairs):
    return QuestionSet(
        id="set-1",
        title="French Basics",
        kind=QuestionKind.OPEN_ANSWER,
        questions=[OpenAnswerQuestion(prompt=p, expected_answer=a) for p, a in pairs],
    )


def _quiz(*labels):
    return QuestionSet(
        id="quiz-1",
        title="Vocabulary Quiz",
        kind=QuestionKind.MULTIPLE_CHOICE,
        semester="sem-1",
        questions=[
            MultipleChoiceQuestion(prompt=f"Q{i}", options=["a", "b", "c", "d"], correct_option_label=label)
            for i, label in enumerate(labels, start=1)
        ],
    )


class TestNormalizeAnswer:
    def test_trims_and_lowercases(self):
        assert normalize_answer("  Bonjour ") == "bonjour"

    def test_none(self):
        assert normalize_answer(None) == ""


class TestOpenAnswerGrading:
    def test_case_and_whitespace_insensitive(self):
        result = grade_submission(_assignment(("Hello?", "Bonjour")), ["  bonjour "])
        assert result.score == 1
        assert result.verdicts[0].is_correct is True

    def test_inner_text_must_match(self):
        result = grade_submission(_assignment(("Thanks?", "merci beaucoup")), ["merci"])
        assert result.score == 0

    def test_no_partial_credit(self):
        set_ = _assignment(("a", "un"), ("b", "deux"), ("c", "trois"))
        result = grade_submission(set_, ["UN", "two", "Trois"])
        assert result.score == 2
        assert result.total_questions == 3
        assert [v.is_correct for v in result.verdicts] == [True, False, True]

    def test_verdicts_keep_question_order(self):
        set_ = _assignment(("a", "x"), ("b", "y"), ("c", "z"))
        result = grade_submission(set_, ["wrong", "y", "wrong"])
        assert [v.number for v in result.verdicts] == [1, 2, 3]
        assert [v.expected for v in result.verdicts] == ["x", "y", "z"]


class TestMultipleChoiceGrading:
    def test_exact_label(self):
        result = grade_submission(_quiz("C"), ["C"])
        assert result.score == 1

    def test_lowercase_label_is_wrong(self):
        result = grade_submission(_quiz("C"), ["c"])
        assert result.score == 0
        assert result.verdicts[0].is_correct is False

    def test_duplicate_option_text_graded_by_label(self):
        quiz = QuestionSet(
            id="q", title="Dupes", kind=QuestionKind.MULTIPLE_CHOICE,
            questions=[MultipleChoiceQuestion(prompt="?", options=["x"] * 4, correct_option_label="D")],
        )
        assert grade_submission(quiz, ["A"]).score == 0
        assert grade_submission(quiz, ["D"]).score == 1


class TestGradingBoundary:
    def test_answer_count_mismatch(self):
        with pytest.raises(MalformedSubmissionError):
            grade_submission(_quiz("A", "B"), ["A"])

    def test_non_text_answer(self):
        with pytest.raises(MalformedSubmissionError):
            grade_submission(_quiz("A"), [0])

    def test_empty_question_set(self):
        with pytest.raises(MalformedQuestionSetError):
            grade_submission(_assignment(), [])

    def test_quiz_with_three_options(self):
        quiz = _quiz("A")
        quiz.questions[0].options = ["a", "b", "c"]
        with pytest.raises(MalformedQuestionSetError):
            grade_submission(quiz, ["A"])


class TestCompleteness:
    def test_find_unanswered(self):
        assert find_unanswered(["a", "  ", "", None, "b"]) == [2, 3, 4]

    def test_complete_passes(self):
        ensure_complete(_quiz("A", "B"), ["A", "B"])

    def test_blank_answer_rejected(self):
        with pytest.raises(IncompleteSubmissionError) as exc:
            ensure_complete(_assignment(("a", "x"), ("b", "y"), ("c", "z")), ["x", " ", "z"])
        assert exc.value.unanswered == [2]

    def test_missing_trailing_answers_rejected(self):
        with pytest.raises(IncompleteSubmissionError) as exc:
            ensure_complete(_quiz("A", "B", "C"), ["A"])
        assert exc.value.unanswered == [2, 3]


class TestScoreRecord:
    def test_build(self):
        quiz = _quiz("A", "B")
        result = grade_submission(quiz, ["A", "C"])
        when = datetime(2026, 3, 1, 10, 30)
        record = build_score_record(quiz, result, "student-1", "Marie Curie", timestamp=when)

        assert record.question_set_id == "quiz-1"
        assert record.question_set_title == "Vocabulary Quiz"
        assert record.score == 1
        assert record.total_questions == 2
        assert record.percentage == 50.0
        assert record.to_document()["assignment_id"] == "quiz-1"

    def test_score_above_total_rejected(self):
        quiz = _quiz("A")
        result = grade_submission(quiz, ["A"])
        result.score = 2
        with pytest.raises(ValidationError):
            build_score_record(quiz, result, "s", "n")


class TestPercentageAndFeedback:
    def test_one_decimal(self):
        assert calculate_percentage(1, 3) == 33.3
        assert calculate_percentage(2, 3) == 66.7
        assert calculate_percentage(3, 3) == 100.0

    def test_zero_total(self):
        assert calculate_percentage(0, 0) == 0.0

    def test_feedback_bands(self):
        assert feedback_summary(10, 10).startswith("Excellent work!")
        assert feedback_summary(6, 10).startswith("Keep practicing!")
        assert "1/4" in feedback_summary(1, 4)


class TestEndToEnd:
    def test_open_answer_scenario(self):
        questions = parse_open_answer("Q1: Capital of France?\nA1: Paris")
        set_ = QuestionSet(id="1", title="Geo", kind=QuestionKind.OPEN_ANSWER, questions=questions)
        result = grade_submission(set_, ["paris"])
        assert (result.score, result.total_questions) == (1, 1)

    def test_quiz_scenario(self):
        questions = parse_multiple_choice("Q1: X?\nA) a\nB) b\nC) c\nD) d\nCorrect: B")
        set_ = QuestionSet(id="2", title="Quiz", kind=QuestionKind.MULTIPLE_CHOICE, questions=questions)
        assert questions[0].correct_option_label == "B"
        assert grade_submission(set_, ["B"]).score == 1
        assert grade_submission(set_, ["b"]).score == 0
