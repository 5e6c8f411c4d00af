from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "PawNotes AI functions"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_HEADERS: List[str] = ["authorization", "x-client-info", "apikey", "content-type"]

    # Gemini (gemini-ai)
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_SECRET_NAME: Optional[str] = None
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    GEMINI_TEMPERATURE: float = 0.7
    GEMINI_TOP_K: int = 40
    GEMINI_TOP_P: float = 0.95
    GEMINI_MAX_OUTPUT_TOKENS: int = 1024
    MAX_PROMPT_LENGTH: int = 20000

    # OpenAI (ai-summary, image-generator)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_IMAGE_API_KEY: Optional[str] = None
    OPENAI_SECRET_NAME: Optional[str] = None
    OPENAI_API_BASE: str = "https://api.openai.com/v1"

    SUMMARY_MODEL: str = "gpt-4o-mini"
    SUMMARY_MAX_TOKENS: int = 150
    SUMMARY_TEMPERATURE: float = 0.3
    SUMMARY_MAX_CONTENT_LENGTH: int = 50000
    SUMMARY_MAX_TITLE_LENGTH: int = 500

    IMAGE_MODEL: str = "gpt-image-1"
    IMAGE_SIZE: str = "1024x1024"
    IMAGE_QUALITY: str = "auto"

    # Advisory per-client throttle for ai-summary
    RATE_LIMIT_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_SECONDS: float = 60.0
    RATE_LIMIT_REDIS_URL: Optional[str] = None

    # None keeps the HTTP client's default (no timeout)
    UPSTREAM_TIMEOUT_SECONDS: Optional[float] = None

    def generation_config(self) -> dict:
        return {
            "temperature": self.GEMINI_TEMPERATURE,
            "topK": self.GEMINI_TOP_K,
            "topP": self.GEMINI_TOP_P,
            "maxOutputTokens": self.GEMINI_MAX_OUTPUT_TOKENS,
        }


settings = Settings()
