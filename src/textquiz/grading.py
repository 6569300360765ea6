import asyncio
import logging
import math
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import ValidationError

from . import scorer
from .backends import GeminiClient, text_part
from .errors import BackendError, InvalidInput
from .models import CheckAnswerRequest, CheckQuizResponse, GradingResult

logger = logging.getLogger("textquiz.grading")

GRADING_PROMPT = (
    "You are an assistant that grades student answers.\n\n"
    "Grade the following answer.\n\n"
    "Question type: {question_type}\n"
    "Correct answer: {correct_answer}\n"
    "Student answer: {user_answer}\n\n"
    "Do not require an exact match; mark the answer correct if the meaning is right.\n"
    "Output JSON in this form:\n"
    '{{"isCorrect": true/false, "score": 0-100, "feedback": "feedback"}}'
    "\n\nOutput JSON only. Do not add any other text."
)


def _clamp_score(score):
    # Anything but a finite number fails validation.
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return score if isinstance(score, str) else None
    if not math.isfinite(score):
        return None
    return max(0, min(100, round(score)))


def require_pair(pair: CheckAnswerRequest):
    if not pair.user_answer or not pair.correct_answer:
        raise InvalidInput("userAnswer and correctAnswer are required")


class AnswerGrader(ABC):
    """Grades one submitted answer against its reference."""

    @abstractmethod
    async def grade(self, pair: CheckAnswerRequest) -> GradingResult:
        pass


class SimilarityGrader(AnswerGrader):
    """Deterministic edit-distance grading. The question type is ignored."""

    async def grade(self, pair: CheckAnswerRequest) -> GradingResult:
        return scorer.evaluate(pair.user_answer, pair.correct_answer)


class GeminiGrader(AnswerGrader):
    """Asks Gemini for a meaning-based grade, falling back to similarity on failure."""

    def __init__(self, gemini: GeminiClient, fallback: Optional[AnswerGrader] = None):
        self.gemini = gemini
        self.fallback = fallback or SimilarityGrader()

    async def grade(self, pair: CheckAnswerRequest) -> GradingResult:
        require_pair(pair)
        prompt = GRADING_PROMPT.format(
            question_type=pair.question_type or "unspecified",
            correct_answer=pair.correct_answer,
            user_answer=pair.user_answer,
        )
        try:
            data = await self.gemini.generate_json([text_part(prompt)])
            data["score"] = _clamp_score(data.get("score"))
            return GradingResult.model_validate(data)
        except (BackendError, ValidationError) as e:
            logger.warning(f"Gemini grading failed, using similarity fallback: {e}")
            return await self.fallback.grade(pair)


async def grade_quiz(grader: AnswerGrader, pairs: List[CheckAnswerRequest]) -> CheckQuizResponse:
    """Grade every pair of a quiz. Results keep the order of ``pairs``."""
    for pair in pairs:
        require_pair(pair)
    results = list(await asyncio.gather(*(grader.grade(pair) for pair in pairs)))

    total = len(results)
    return CheckQuizResponse(
        results=results,
        correct_count=sum(1 for r in results if r.is_correct),
        total_questions=total,
        total_score=round(sum(r.score for r in results) / total) if total else 0,
    )


def create_grader(mode: str, gemini: Optional[GeminiClient] = None) -> AnswerGrader:
    if mode == "gemini" and gemini is not None:
        return GeminiGrader(gemini)
    return SimilarityGrader()
