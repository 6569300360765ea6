import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from .backends import GeminiClient
from .config import Settings, settings
from .errors import InvalidInput
from .extraction import GeminiTextExtractor, OfflineTextExtractor, TextExtractor
from .generators import QuizFactory, QuizGenerator
from .globals import glossary, templates
from .grading import AnswerGrader, create_grader, grade_quiz
from .models import (
    AnalyzeImageRequest,
    AnalyzeImageResponse,
    CheckAnswerRequest,
    CheckAnswerResponse,
    CheckQuizRequest,
    CheckQuizResponse,
    GenerateQuizRequest,
    GenerateQuizResponse,
    QuestionType,
    StatusResponse,
)

logger = logging.getLogger("textquiz.router")

router = APIRouter()


# --- Dependencies ---
def get_settings() -> Settings:
    return settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http


def get_gemini(
    config: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> Optional[GeminiClient]:
    if config.backend_mode != "gemini":
        return None
    return GeminiClient(
        api_key=config.GEMINI_API_KEY,
        model=config.GEMINI_MODEL,
        base_url=config.GEMINI_BASE_URL,
        client=http,
    )


def get_extractor(
    config: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
    gemini: Optional[GeminiClient] = Depends(get_gemini),
) -> TextExtractor:
    if gemini is None:
        return OfflineTextExtractor()
    return GeminiTextExtractor(gemini, http, config.MAX_IMAGE_BYTES)


def get_quiz_generator(
    config: Settings = Depends(get_settings),
    gemini: Optional[GeminiClient] = Depends(get_gemini),
) -> QuizGenerator:
    return QuizFactory.create(config.backend_mode, glossary, gemini)


def get_grader(
    config: Settings = Depends(get_settings),
    gemini: Optional[GeminiClient] = Depends(get_gemini),
) -> AnswerGrader:
    return create_grader(config.backend_mode, gemini)


# --- Routes ---
@router.get("/", response_class=HTMLResponse)
async def home(request: Request, config: Settings = Depends(get_settings)):
    return templates.TemplateResponse(
        request, "index.html", {"backend": config.backend_mode}
    )


@router.get("/api/status", response_model=StatusResponse)
async def status(config: Settings = Depends(get_settings)):
    mode = config.backend_mode
    return StatusResponse(
        backend=mode, model=config.GEMINI_MODEL if mode == "gemini" else None
    )


@router.post("/api/analyze-image", response_model=AnalyzeImageResponse)
async def analyze_image(
    body: AnalyzeImageRequest, extractor: TextExtractor = Depends(get_extractor)
):
    if not body.image_url:
        raise InvalidInput("imageUrl is required")
    text = await extractor.extract(body.image_url)
    logger.info(f"Extracted {len(text)} characters from image")
    return AnalyzeImageResponse(text=text)


@router.post("/api/generate-quiz", response_model=GenerateQuizResponse)
async def generate_quiz(
    body: GenerateQuizRequest, generator: QuizGenerator = Depends(get_quiz_generator)
):
    if not body.text or not body.quiz_type:
        raise InvalidInput("text and quizType are required")
    try:
        quiz_type = QuestionType(body.quiz_type)
    except ValueError:
        raise InvalidInput(f"Invalid quiz type: {body.quiz_type}") from None

    quiz = await generator.generate(body.text, quiz_type, body.language)
    logger.info(f"Generated {len(quiz.questions)} questions [Type: {quiz_type.value}]")
    return GenerateQuizResponse(quiz=quiz)


@router.post("/api/check-answer", response_model=CheckAnswerResponse)
async def check_answer(
    body: CheckAnswerRequest, grader: AnswerGrader = Depends(get_grader)
):
    result = await grader.grade(body)
    return CheckAnswerResponse(result=result)


@router.post("/api/check-quiz", response_model=CheckQuizResponse)
async def check_quiz(body: CheckQuizRequest, grader: AnswerGrader = Depends(get_grader)):
    response = await grade_quiz(grader, body.answers)
    logger.info(
        f"Graded quiz: {response.correct_count}/{response.total_questions} correct, "
        f"score {response.total_score}"
    )
    return response
