import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import settings
from .errors import BackendError, BackendUnavailable, InvalidInput
from .globals import glossary
from .router import router

logger = logging.getLogger("textquiz")


# --- Logging Setup ---
def setup_logging():
    logger.setLevel(logging.INFO)

    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    glossary.load_all()
    app.state.http = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.GEMINI_TIMEOUT_SECONDS)
    )
    logger.info(f"Starting with backend: {settings.backend_mode}")
    yield
    await app.state.http.aclose()


# --- Error Handlers ---
async def invalid_input_handler(request: Request, exc: InvalidInput):
    logger.info(f"Rejected {request.url.path}: {exc}")
    return JSONResponse({"error": str(exc)}, status_code=400)


async def backend_error_handler(request: Request, exc: BackendError):
    if isinstance(exc, BackendUnavailable):
        logger.warning(f"{request.url.path}: {exc}")
        return JSONResponse({"error": str(exc)}, status_code=503)
    logger.error(f"{request.url.path} failed: {exc} {exc.details}")
    return JSONResponse({"error": str(exc), "details": exc.details}, status_code=500)


# --- App Factory ---
def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")
    app.add_exception_handler(InvalidInput, invalid_input_handler)
    app.add_exception_handler(BackendError, backend_error_handler)

    app.include_router(router)

    return app
