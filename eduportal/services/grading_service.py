"""
Grading Service
===============
Scores a learner's answers against a stored question set.

Answers are matched to questions by position: answers[i] answers
questions[i]. The caller must reject blank answers (see ensure_complete)
before grading; grade_submission enforces the length match itself.

Open answers compare trimmed, lower-cased text. Multiple choice compares
the submitted option label exactly, with no case folding: "c" is not "C".
"""
from datetime import datetime
from typing import List

from ..errors import IncompleteSubmissionError, MalformedSubmissionError
from ..models import (
    GradeResult, QuestionKind, QuestionSet, QuestionVerdict, ScoreRecord,
    calculate_percentage,
)

__all__ = [
    'normalize_answer', 'find_unanswered', 'ensure_complete',
    'grade_submission', 'build_score_record', 'calculate_percentage',
    'feedback_summary',
]


def normalize_answer(text):
    return (text or "").strip().lower()


def find_unanswered(answers) -> List[int]:
    """1-based question numbers whose answer is missing or blank."""
    return [
        number for number, answer in enumerate(answers, start=1)
        if answer is None or not str(answer).strip()
    ]


def ensure_complete(question_set: QuestionSet, answers):
    """Raise IncompleteSubmissionError unless every question has an answer."""
    answers = list(answers or [])
    unanswered = find_unanswered(answers)
    # Missing trailing answers count as blank too
    unanswered.extend(range(len(answers) + 1, len(question_set.questions) + 1))
    if unanswered:
        raise IncompleteSubmissionError(unanswered)


def _is_correct(kind, question, answer):
    if kind is QuestionKind.OPEN_ANSWER:
        return normalize_answer(answer) == normalize_answer(question.expected_answer)
    return answer == question.correct_option_label


def _expected(kind, question):
    if kind is QuestionKind.OPEN_ANSWER:
        return question.expected_answer
    return question.correct_option_label


def feedback_summary(score, total):
    percentage = calculate_percentage(score, total)

    if percentage >= 90:
        comment = "Excellent work!"
    elif percentage >= 80:
        comment = "Great job!"
    elif percentage >= 70:
        comment = "Good effort!"
    elif percentage >= 60:
        comment = "Keep practicing!"
    else:
        comment = "Don't give up - review the material and try again!"

    return f"{comment} You scored {score}/{total} ({percentage}%)."


def grade_submission(question_set: QuestionSet, answers) -> GradeResult:
    """
    Grade answers against a question set.

    Verdicts come back in the set's stored question order. Raises
    MalformedQuestionSetError for a structurally broken set and
    MalformedSubmissionError when the answer count differs from the
    question count.
    """
    question_set.validate_structure()
    answers = list(answers)

    if len(answers) != len(question_set.questions):
        raise MalformedSubmissionError(
            f"Expected {len(question_set.questions)} answers, got {len(answers)}"
        )
    if not all(isinstance(a, str) for a in answers):
        raise MalformedSubmissionError("Answers must be text")

    kind = question_set.kind
    verdicts = []
    for number, (question, answer) in enumerate(zip(question_set.questions, answers), start=1):
        verdicts.append(QuestionVerdict(
            number=number,
            is_correct=_is_correct(kind, question, answer),
            submitted=answer,
            expected=_expected(kind, question),
        ))

    score = sum(1 for v in verdicts if v.is_correct)
    total = len(question_set.questions)

    return GradeResult(
        score=score,
        total_questions=total,
        verdicts=verdicts,
        feedback_summary=feedback_summary(score, total),
    )


def build_score_record(question_set: QuestionSet, result: GradeResult,
                       student_id, student_name, timestamp=None) -> ScoreRecord:
    """The record persisted for one graded attempt."""
    return ScoreRecord(
        student_id=student_id,
        student_name=student_name,
        question_set_id=question_set.id,
        question_set_title=question_set.title,
        score=result.score,
        total_questions=result.total_questions,
        timestamp=timestamp or datetime.now(),
    )
