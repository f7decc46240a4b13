import os
from typing import List
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()

# Values shipped in .env.example that must never reach the provider
PLACEHOLDER_API_KEYS = {"", "YOUR_API_KEY_HERE", "PLACEHOLDER", "CHANGE_ME"}


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() not in ("0", "false", "no", "off", "")


class Settings(BaseModel):
    ENV: str = Field(default_factory=lambda: _env("ENV", "development"))
    PORT: int = Field(default_factory=lambda: int(_env("PORT", "5000")))
    LOG_LEVEL: str = Field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    CORS_ORIGINS: str = Field(default_factory=lambda: _env("CORS_ORIGINS", "*"))

    # Mongo
    MONGO_URI: str = Field(default_factory=lambda: _env("MONGO_URI", "mongodb://localhost:27017"))
    MONGO_DB: str = Field(default_factory=lambda: _env("MONGO_DB", "travelPlanner"))

    # Collections
    COLL_TRIPS: str = Field(default_factory=lambda: _env("COLL_TRIPS", "trips"))
    TRIP_DEDUP: bool = Field(default_factory=lambda: _env_flag("TRIP_DEDUP", "false"))

    # Gemini
    GEMINI_API_KEY: str = Field(default_factory=lambda: _env("GEMINI_API_KEY", ""))
    GEMINI_MODEL: str = Field(default_factory=lambda: _env("GEMINI_MODEL", "gemini-2.5-flash"))
    GEMINI_FALLBACK_MODELS: str = Field(
        default_factory=lambda: _env("GEMINI_FALLBACK_MODELS", "gemini-2.0-flash,gemini-flash-latest")
    )

    # Generation behaviour
    LLM_PROVIDER: str = Field(default_factory=lambda: _env("LLM_PROVIDER", "gemini"))
    USE_LLM: bool = Field(default_factory=lambda: _env_flag("USE_LLM", "true"))
    LLM_FALLBACK: bool = Field(default_factory=lambda: _env_flag("LLM_FALLBACK", "false"))
    LLM_TIMEOUT_SECONDS: float = Field(default_factory=lambda: float(_env("LLM_TIMEOUT_SECONDS", "30")))
    LLM_MAX_ATTEMPTS: int = Field(default_factory=lambda: int(_env("LLM_MAX_ATTEMPTS", "5")))
    LLM_BACKOFF_BASE_SECONDS: float = Field(default_factory=lambda: float(_env("LLM_BACKOFF_BASE_SECONDS", "1.0")))
    LLM_TEMPERATURE: float = Field(default_factory=lambda: float(_env("LLM_TEMPERATURE", "0.7")))
    LLM_MAX_OUTPUT_TOKENS: int = Field(default_factory=lambda: int(_env("LLM_MAX_OUTPUT_TOKENS", "8192")))

    # Allow extra .env variables without throwing validation errors
    model_config = {"extra": "allow"}

    @property
    def api_key_configured(self) -> bool:
        return self.GEMINI_API_KEY.strip() not in PLACEHOLDER_API_KEYS

    @property
    def fallback_models(self) -> List[str]:
        return [m.strip() for m in self.GEMINI_FALLBACK_MODELS.split(",") if m.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()] or ["*"]


settings = Settings()
