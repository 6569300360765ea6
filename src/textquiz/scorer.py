"""
Offline answer scoring.

Compares a submitted answer with the reference answer using Levenshtein
distance over normalized strings. Used whenever no language model is
configured, and as the fallback when the model call fails.
"""

from typing import List

from .errors import InvalidInput
from .models import GradingResult

PASS_THRESHOLD = 0.7
STRIPPED_PUNCTUATION = ".,!?;:"

PERFECT_FEEDBACK = "Perfect! That is exactly right."
NEAR_MATCH_FEEDBACK = "Almost perfect! The expected answer is: {answer}"
MISMATCH_FEEDBACK = "Not quite. The correct answer is: {answer}"

_PUNCTUATION_TABLE = str.maketrans("", "", STRIPPED_PUNCTUATION)
_ASCII_LOWER_TABLE = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def normalize(text) -> str:
    # Only ASCII letters are folded; other scripts pass through untouched.
    return str(text).strip().translate(_ASCII_LOWER_TABLE).translate(_PUNCTUATION_TABLE)


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between ``a`` and ``b``."""
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    rows: List[List[int]] = [[0] * (len(longer) + 1) for _ in range(len(shorter) + 1)]
    for i in range(len(shorter) + 1):
        rows[i][0] = i
    for j in range(len(longer) + 1):
        rows[0][j] = j

    for i in range(1, len(shorter) + 1):
        for j in range(1, len(longer) + 1):
            if shorter[i - 1] == longer[j - 1]:
                rows[i][j] = rows[i - 1][j - 1]
            else:
                rows[i][j] = 1 + min(rows[i - 1][j - 1], rows[i][j - 1], rows[i - 1][j])
    return rows[len(shorter)][len(longer)]


def similarity(a: str, b: str) -> float:
    """Similarity in [0, 1] of two strings, after normalization."""
    first, second = normalize(a), normalize(b)
    longer, shorter = (first, second) if len(first) >= len(second) else (second, first)
    if len(longer) == 0:
        return 1.0
    return 1 - edit_distance(longer, shorter) / len(longer)


def evaluate(user_answer: str, correct_answer: str) -> GradingResult:
    """
    Grade ``user_answer`` against ``correct_answer``.

    Exact matches (after normalization) score 100. Answers at least 70%
    similar count as correct and score proportionally. Anything else is
    incorrect and scored on a half-credit scale.

    Raises:
        InvalidInput: if either answer is missing or empty.
    """
    if not user_answer or not correct_answer:
        raise InvalidInput("userAnswer and correctAnswer are required")

    if normalize(user_answer) == normalize(correct_answer):
        return GradingResult(is_correct=True, score=100, feedback=PERFECT_FEEDBACK)

    ratio = similarity(user_answer, correct_answer)
    if ratio >= PASS_THRESHOLD:
        return GradingResult(
            is_correct=True,
            score=round(ratio * 100),
            feedback=NEAR_MATCH_FEEDBACK.format(answer=correct_answer),
        )
    return GradingResult(
        is_correct=False,
        score=round(ratio * 50),
        feedback=MISMATCH_FEEDBACK.format(answer=correct_answer),
    )
