from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionType(str, Enum):
    VOCABULARY = "vocabulary"
    WORD_ORDER = "word-order"
    TRANSLATION = "translation"
    READING = "reading"


# --- Grading ---
class GradingResult(CamelModel):
    is_correct: bool
    score: int = Field(ge=0, le=100)
    feedback: str


class CheckAnswerRequest(CamelModel):
    user_answer: Optional[str] = None
    correct_answer: Optional[str] = None
    question_type: Optional[str] = None


class CheckAnswerResponse(CamelModel):
    success: bool = True
    result: GradingResult


class CheckQuizRequest(CamelModel):
    answers: List[CheckAnswerRequest]


class CheckQuizResponse(CamelModel):
    success: bool = True
    results: List[GradingResult]
    correct_count: int
    total_questions: int
    total_score: int


# --- Text extraction ---
class AnalyzeImageRequest(CamelModel):
    image_url: Optional[str] = None


class AnalyzeImageResponse(CamelModel):
    success: bool = True
    text: str


# --- Quiz generation ---
class ChoiceQuestion(BaseModel):
    """Vocabulary and reading questions: pick one of four options."""

    word: str
    options: List[str]
    correct: int
    explanation: str = ""


class WordOrderQuestion(BaseModel):
    original: str
    shuffled: List[str]
    answer: str
    explanation: str = ""


class TranslationQuestion(BaseModel):
    question: str
    answer: str
    explanation: str = ""


Question = Union[ChoiceQuestion, WordOrderQuestion, TranslationQuestion]


class Quiz(BaseModel):
    questions: List[Question]


class GenerateQuizRequest(CamelModel):
    text: Optional[str] = None
    quiz_type: Optional[str] = None
    language: str = "en"


class GenerateQuizResponse(CamelModel):
    success: bool = True
    quiz: Quiz


class StatusResponse(BaseModel):
    backend: str
    model: Optional[str] = None
