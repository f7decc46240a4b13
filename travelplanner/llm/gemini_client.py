# ------------------------------------------------------------
# Gemini Model Client (model fallback + transient-error backoff)
# ------------------------------------------------------------
import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, List, Optional

from google import genai
from google.genai import types

from travelplanner.config import Settings
from travelplanner.errors import (
    AuthError,
    ConfigError,
    ModelUnavailableError,
    ProviderError,
    RateLimitError,
    RequestTimeoutError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

NOT_FOUND = "not_found"
RATE_LIMITED = "rate_limited"
OVERLOADED = "overloaded"
UNAUTHORIZED = "unauthorized"
UNKNOWN = "unknown"

TRANSIENT = (RATE_LIMITED, OVERLOADED)

SleepFn = Callable[[float], Awaitable[Any]]


def classify_provider_error(exc: BaseException) -> str:
    """
    Bucket a provider exception by HTTP code first, then by message text.
    google-genai's APIError exposes the HTTP status as ``code``.
    """
    code = getattr(exc, "code", None) or getattr(exc, "status_code", None)
    if code == 404:
        return NOT_FOUND
    if code == 429:
        return RATE_LIMITED
    if code == 503:
        return OVERLOADED
    if code in (401, 403):
        return UNAUTHORIZED

    message = str(exc).lower()
    if "not found" in message:
        return NOT_FOUND
    if "quota" in message or "429" in message or "too many requests" in message:
        return RATE_LIMITED
    if "overloaded" in message or "503" in message:
        return OVERLOADED
    if "api key" in message or "403" in message or "permission denied" in message:
        return UNAUTHORIZED
    return UNKNOWN


def backoff_delay(attempt: int, base: float = 1.0) -> float:
    """Exponential delay with up to one ``base`` of jitter: 2**attempt * base + U(0, base)."""
    return (2 ** attempt) * base + random.uniform(0, base)


class _ModelNotFound(Exception):
    def __init__(self, model: str, cause: BaseException):
        super().__init__(f"{model}: {cause}")
        self.model = model
        self.cause = cause


class ModelClient:
    """
    Sends one prompt to Gemini and returns the raw text.

    Candidate models are tried in order when the provider reports the model
    as missing. Rate limits and overloads retry the same model with
    exponential backoff. Timeouts and every other failure surface at once.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[Any] = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.settings = settings
        self._client = client
        self._sleep = sleep

    # -------------------------------------------------
    # Configuration
    # -------------------------------------------------
    @property
    def candidate_models(self) -> List[str]:
        models: List[str] = []
        for name in [self.settings.GEMINI_MODEL, *self.settings.fallback_models]:
            if name and name not in models:
                models.append(name)
        return models

    def _get_client(self):
        if self._client is None:
            if not self.settings.api_key_configured:
                raise ConfigError(
                    "Gemini API key is not configured. Please set GEMINI_API_KEY in your .env file."
                )
            self._client = genai.Client(api_key=self.settings.GEMINI_API_KEY)
        return self._client

    def _generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.settings.LLM_TEMPERATURE,
            max_output_tokens=self.settings.LLM_MAX_OUTPUT_TOKENS,
            response_mime_type="application/json",
        )

    # -------------------------------------------------
    # Public API
    # -------------------------------------------------
    async def generate(self, prompt: str) -> str:
        tried: List[str] = []
        last_error: Optional[BaseException] = None

        for model in self.candidate_models:
            tried.append(model)
            try:
                return await self._generate_with_retry(model, prompt)
            except _ModelNotFound as e:
                last_error = e.cause
                logger.warning("Model '%s' not found, trying next candidate.", model)

        raise ModelUnavailableError(
            f"None of the configured Gemini models were found ({', '.join(tried)}). "
            f"Last error: {last_error}",
            models_tried=tried,
        )

    # -------------------------------------------------
    # Internals
    # -------------------------------------------------
    async def _request(self, model: str, prompt: str) -> str:
        client = self._get_client()
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=self._generation_config(),
            ),
            timeout=self.settings.LLM_TIMEOUT_SECONDS,
        )
        text = getattr(response, "text", None)
        if not text:
            raise ProviderError(f"No response text returned by Gemini model '{model}'.")
        return text

    async def _generate_with_retry(self, model: str, prompt: str) -> str:
        max_attempts = max(1, self.settings.LLM_MAX_ATTEMPTS)
        attempt = 0
        while True:
            try:
                text = await self._request(model, prompt)
                logger.info("Gemini response received from '%s'.", model)
                return text
            except asyncio.TimeoutError:
                raise RequestTimeoutError(
                    f"The AI service did not respond within {self.settings.LLM_TIMEOUT_SECONDS:g} seconds."
                )
            except (ConfigError, ProviderError):
                raise
            except Exception as e:
                kind = classify_provider_error(e)
                if kind == NOT_FOUND:
                    raise _ModelNotFound(model, e) from e

                if kind in TRANSIENT and attempt + 1 < max_attempts:
                    delay = backoff_delay(attempt, self.settings.LLM_BACKOFF_BASE_SECONDS)
                    logger.warning(
                        "Hit transient error (%s). Retrying in %dms... (Attempt %d/%d)",
                        getattr(e, "code", None) or "unknown",
                        round(delay * 1000),
                        attempt + 1,
                        max_attempts - 1,
                    )
                    await self._sleep(delay)
                    attempt += 1
                    continue

                raise _as_taxonomy(kind, e) from e


def _as_taxonomy(kind: str, exc: BaseException) -> ProviderError:
    if kind == RATE_LIMITED:
        return RateLimitError(
            "The AI service is busy or you have run out of free quota. Please try again in a few moments."
        )
    if kind == OVERLOADED:
        return ServiceUnavailableError(
            "The AI service is currently overloaded. We tried multiple times but could not "
            "generate your itinerary. Please wait a minute and try again."
        )
    if kind == UNAUTHORIZED:
        return AuthError("Invalid Gemini API key. Please check your .env file.")
    return ProviderError(str(exc) or "An unexpected error occurred while calling the AI service.")
