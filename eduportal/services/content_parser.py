"""
Content Parser
==============
Turns the plain text an admin pastes into ordered question records.

Assignment (open answer) format, consumed in fixed pairs of lines:
    Q1: What is the French word for "hello"?
    A1: Bonjour

Quiz (multiple choice) format:
    Q1: Question text?
    A) Option 1
    B) Option 2
    C) Option 3
    D) Option 4
    Correct: A

Blank lines are ignored everywhere. Label numbers are decorative: output
order is input order. Malformed records are dropped, never raised, so an
unusable block simply yields an empty list.
"""
import re
from enum import Enum
from typing import List, NamedTuple, Optional

from ..models import (
    OPTION_LABELS, MultipleChoiceQuestion, OpenAnswerQuestion, QuestionKind,
)

_QUESTION_LABEL = re.compile(r'^Q\d+:\s*', re.IGNORECASE)
_ANSWER_LABEL = re.compile(r'^A\d+:\s*', re.IGNORECASE)
_OPTION_LABEL = re.compile(r'^([A-D])\)\s*', re.IGNORECASE)
_CORRECT_LABEL = re.compile(r'^Correct:\s*', re.IGNORECASE)


def split_lines(text):
    """Non-empty, trimmed lines in input order."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def _strip_label(line, pattern):
    return pattern.sub('', line, count=1).strip()


# =============================================================================
# TOKENIZER
# =============================================================================

class TokenKind(Enum):
    QUESTION = "question"
    ANSWER = "answer"
    OPTION = "option"
    CORRECT = "correct"
    TEXT = "text"


class Token(NamedTuple):
    kind: TokenKind
    text: str
    label: Optional[str] = None


def tokenize(text):
    """Classify each non-empty line by its leading label."""
    tokens = []
    for line in split_lines(text):
        if _QUESTION_LABEL.match(line):
            tokens.append(Token(TokenKind.QUESTION, _strip_label(line, _QUESTION_LABEL)))
        elif _ANSWER_LABEL.match(line):
            tokens.append(Token(TokenKind.ANSWER, _strip_label(line, _ANSWER_LABEL)))
        elif _OPTION_LABEL.match(line):
            label = _OPTION_LABEL.match(line).group(1).upper()
            tokens.append(Token(TokenKind.OPTION, _strip_label(line, _OPTION_LABEL), label))
        elif _CORRECT_LABEL.match(line):
            tokens.append(Token(TokenKind.CORRECT, _strip_label(line, _CORRECT_LABEL)))
        else:
            tokens.append(Token(TokenKind.TEXT, line))
    return tokens


# =============================================================================
# OPEN ANSWER
# =============================================================================

def parse_open_answer(text) -> List[OpenAnswerQuestion]:
    """
    Parse "Qn: prompt / An: answer" line pairs.

    Pairing is positional: line 2k is the prompt, line 2k+1 the answer,
    whatever labels they carry. A dangling final line is dropped, as is
    any pair whose prompt or answer is empty once the label is removed.
    """
    lines = split_lines(text)
    questions = []

    for i in range(0, len(lines) - 1, 2):
        prompt = _strip_label(lines[i], _QUESTION_LABEL)
        answer = _strip_label(lines[i + 1], _ANSWER_LABEL)
        if prompt and answer:
            questions.append(OpenAnswerQuestion(prompt=prompt, expected_answer=answer))

    return questions


# =============================================================================
# MULTIPLE CHOICE
# =============================================================================

class ParserState(Enum):
    AWAIT_RECORD = "await_record"
    COLLECTING_OPTIONS = "collecting_options"
    AWAIT_CORRECT_LABEL = "await_correct_label"


class _Draft:
    def __init__(self, prompt):
        self.prompt = prompt
        self.options = []
        self.correct_label = ""

    def build(self):
        """The finished question, or None if the record is rejected."""
        if not self.prompt:
            return None
        if len(self.options) != len(OPTION_LABELS):
            return None
        if self.correct_label not in OPTION_LABELS:
            return None
        return MultipleChoiceQuestion(
            prompt=self.prompt,
            options=self.options,
            correct_option_label=self.correct_label,
        )


def parse_multiple_choice(text) -> List[MultipleChoiceQuestion]:
    """
    Parse quiz records with a single pass over the token stream.

    A "Qn:" line opens a record. Consecutive option lines are collected
    in the order they appear; the first non-option line ends collection.
    If that line is "Correct: X" it is consumed as the answer label,
    otherwise it is re-examined as the possible start of the next record.
    A record is kept only with a prompt, exactly four options and a
    correct label of A, B, C or D. Lines outside any record are skipped.
    """
    questions = []
    state = ParserState.AWAIT_RECORD
    draft = None

    def finish():
        question = draft.build()
        if question is not None:
            questions.append(question)

    tokens = tokenize(text)
    i = 0
    while i < len(tokens):
        token = tokens[i]

        if state is ParserState.AWAIT_RECORD:
            if token.kind is TokenKind.QUESTION:
                draft = _Draft(token.text)
                state = ParserState.COLLECTING_OPTIONS
            i += 1

        elif state is ParserState.COLLECTING_OPTIONS:
            if token.kind is TokenKind.OPTION:
                draft.options.append(token.text)
                i += 1
            else:
                state = ParserState.AWAIT_CORRECT_LABEL

        elif state is ParserState.AWAIT_CORRECT_LABEL:
            if token.kind is TokenKind.CORRECT:
                draft.correct_label = token.text.upper()
                i += 1
            finish()
            draft = None
            state = ParserState.AWAIT_RECORD

    # Input ended inside a record
    if draft is not None:
        finish()

    return questions


def parse_questions(kind, text):
    """Parse text for the given content kind."""
    if QuestionKind(kind) is QuestionKind.MULTIPLE_CHOICE:
        return parse_multiple_choice(text)
    return parse_open_answer(text)
