"""
Data contracts for question sets, grading results and score records.

Store documents use snake_case columns. Question documents keep the short
field names the content tables have always used:
    open answer:      {"question": ..., "answer": ...}
    multiple choice:  {"question": ..., "options": [4 x str], "correct_answer": "A".."D"}
"""
from datetime import datetime
from enum import Enum
from typing import ClassVar, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from .config import SEMESTERS, ROLE_STUDENT
from .errors import MalformedQuestionSetError

OPTION_LABELS = ["A", "B", "C", "D"]


class QuestionKind(str, Enum):
    OPEN_ANSWER = "assignment"
    MULTIPLE_CHOICE = "quiz"


def calculate_percentage(score, total):
    """Score as a percentage rounded to one decimal place."""
    if not total:
        return 0.0
    return round((score / total) * 100, 1)


# =============================================================================
# QUESTIONS
# =============================================================================

class OpenAnswerQuestion(BaseModel):
    kind: ClassVar[QuestionKind] = QuestionKind.OPEN_ANSWER

    prompt: str
    expected_answer: str

    def to_document(self):
        return {"question": self.prompt, "answer": self.expected_answer}

    @classmethod
    def from_document(cls, doc):
        return cls(prompt=doc["question"], expected_answer=doc["answer"])


class MultipleChoiceQuestion(BaseModel):
    kind: ClassVar[QuestionKind] = QuestionKind.MULTIPLE_CHOICE

    prompt: str
    options: List[str]
    correct_option_label: str

    def to_document(self):
        return {
            "question": self.prompt,
            "options": list(self.options),
            "correct_answer": self.correct_option_label,
        }

    @classmethod
    def from_document(cls, doc):
        return cls(
            prompt=doc["question"],
            options=list(doc["options"]),
            correct_option_label=doc["correct_answer"],
        )


Question = Union[OpenAnswerQuestion, MultipleChoiceQuestion]

_QUESTION_TYPES = {
    QuestionKind.OPEN_ANSWER: OpenAnswerQuestion,
    QuestionKind.MULTIPLE_CHOICE: MultipleChoiceQuestion,
}


class QuestionSet(BaseModel):
    """An assignment or quiz as stored in the content collection."""
    id: Optional[str] = None
    title: str
    kind: QuestionKind
    semester: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    def validate_structure(self):
        """Check the invariants grading relies on. Returns self."""
        if not self.title.strip():
            raise MalformedQuestionSetError("Question set title is empty")
        if not self.questions:
            raise MalformedQuestionSetError(f"'{self.title}' has no questions")
        if self.semester is not None and self.semester not in SEMESTERS:
            raise MalformedQuestionSetError(f"Unknown semester: {self.semester}")

        expected_type = _QUESTION_TYPES[self.kind]
        for number, question in enumerate(self.questions, start=1):
            if not isinstance(question, expected_type):
                raise MalformedQuestionSetError(
                    f"Question {number} does not match set kind '{self.kind.value}'"
                )
            if self.kind is QuestionKind.MULTIPLE_CHOICE:
                if len(question.options) != len(OPTION_LABELS):
                    raise MalformedQuestionSetError(
                        f"Question {number} has {len(question.options)} options, expected 4"
                    )
                if question.correct_option_label not in OPTION_LABELS:
                    raise MalformedQuestionSetError(
                        f"Question {number} has invalid correct label '{question.correct_option_label}'"
                    )
        return self

    def is_visible_to(self, semester):
        return self.semester is None or self.semester == semester

    def to_document(self):
        return {
            "title": self.title,
            "type": self.kind.value,
            "semester": self.semester,
            "questions": [q.to_document() for q in self.questions],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_document(cls, doc):
        try:
            kind = QuestionKind(doc.get("type"))
        except ValueError:
            raise MalformedQuestionSetError(f"Unknown content type: {doc.get('type')!r}")

        question_type = _QUESTION_TYPES[kind]
        try:
            questions = [question_type.from_document(q) for q in doc.get("questions") or []]
        except (KeyError, TypeError) as e:
            raise MalformedQuestionSetError(f"Malformed question record: {e}")

        return cls(
            id=str(doc["id"]) if doc.get("id") is not None else None,
            title=doc.get("title") or "",
            kind=kind,
            semester=doc.get("semester") or None,
            questions=questions,
            created_at=doc.get("created_at"),
        )

    def learner_view(self):
        """The set as shown to a learner: prompts and options, no answers."""
        questions = []
        for number, q in enumerate(self.questions, start=1):
            item = {"number": number, "question": q.prompt}
            if self.kind is QuestionKind.MULTIPLE_CHOICE:
                item["options"] = [
                    {"label": label, "text": text}
                    for label, text in zip(OPTION_LABELS, q.options)
                ]
            questions.append(item)

        return {
            "id": self.id,
            "title": self.title,
            "type": self.kind.value,
            "semester": self.semester,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "question_count": len(self.questions),
            "questions": questions,
        }


# =============================================================================
# GRADING RESULTS
# =============================================================================

class QuestionVerdict(BaseModel):
    number: int
    is_correct: bool
    submitted: str
    expected: str


class GradeResult(BaseModel):
    score: int
    total_questions: int
    verdicts: List[QuestionVerdict]
    feedback_summary: str = ""

    @property
    def percentage(self):
        return calculate_percentage(self.score, self.total_questions)


class ScoreRecord(BaseModel):
    id: Optional[str] = None
    student_id: str
    student_name: str
    question_set_id: str
    question_set_title: str
    score: int
    total_questions: int
    timestamp: datetime

    @model_validator(mode="after")
    def _check_score_bounds(self):
        if self.total_questions < 1:
            raise ValueError("total_questions must be at least 1")
        if not 0 <= self.score <= self.total_questions:
            raise ValueError(
                f"score {self.score} outside 0..{self.total_questions}"
            )
        return self

    @property
    def percentage(self):
        return calculate_percentage(self.score, self.total_questions)

    def to_document(self):
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "assignment_id": self.question_set_id,
            "assignment_title": self.question_set_title,
            "score": self.score,
            "total_questions": self.total_questions,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=str(doc["id"]) if doc.get("id") is not None else None,
            student_id=doc["student_id"],
            student_name=doc.get("student_name") or "",
            question_set_id=str(doc["assignment_id"]),
            question_set_title=doc.get("assignment_title") or "",
            score=doc["score"],
            total_questions=doc["total_questions"],
            timestamp=doc["timestamp"],
        )


# =============================================================================
# USER PROFILES
# =============================================================================

class UserProfile(BaseModel):
    id: str
    email: str
    name: str
    role: str = ROLE_STUDENT
    semester: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_document(self):
        return {
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "semester": self.semester,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=str(doc["id"]),
            email=doc.get("email") or "",
            name=doc.get("name") or "",
            role=doc.get("role") or ROLE_STUDENT,
            semester=doc.get("semester"),
            created_at=doc.get("created_at"),
        )
