import os

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


class Settings:
    PROJECT_NAME: str = "textquiz"
    DEBUG: bool = os.environ.get("DEBUG", "").lower() in ("1", "true", "yes")
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "textquiz.log"
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")
    TEMPLATES_DIR: str = os.path.join(PACKAGE_DIR, "templates")
    STATIC_DIR: str = os.path.join(PACKAGE_DIR, "static")
    GLOSSARY_DIR: str = os.environ.get("GLOSSARY_DIR", "glossary")
    # auto: gemini when an API key is present, offline otherwise
    BACKEND: str = os.environ.get("TEXTQUIZ_BACKEND", "auto")
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash-exp")
    GEMINI_BASE_URL: str = os.environ.get(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    GEMINI_TIMEOUT_SECONDS: float = float(os.environ.get("GEMINI_TIMEOUT_SECONDS", "60"))
    MAX_IMAGE_BYTES: int = 10_000_000

    @property
    def backend_mode(self) -> str:
        if self.BACKEND == "gemini" or self.BACKEND == "auto":
            return "gemini" if self.GEMINI_API_KEY else "offline"
        return "offline"


settings = Settings()
