from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from travelplanner.config import Settings
from travelplanner.llm.gemini_client import ModelClient
from travelplanner.main import create_app
from travelplanner.services.itinerary_service import GeminiItineraryGenerator, ItineraryService
from travelplanner.services.trip_service import TripStore


# ------------------------------------------------------------
# Fakes for the google-genai client
# ------------------------------------------------------------
class FakeProviderError(Exception):
    """Mimics google.genai.errors.APIError: HTTP status on ``code``."""

    def __init__(self, code, message):
        super().__init__(f"{code} {message}")
        self.code = code


class FakeGenAI:
    """
    Stands in for ``genai.Client``. Each call consumes the next outcome;
    the last outcome repeats. Outcomes are response text, an exception to
    raise, or a coroutine function to await.
    """

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.aio = SimpleNamespace(models=SimpleNamespace(generate_content=self._generate_content))

    async def _generate_content(self, model, contents, config):
        self.calls.append(model)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return await outcome()
        return SimpleNamespace(text=outcome)


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


# ------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------
@pytest.fixture
def settings():
    return Settings(
        GEMINI_API_KEY="test-key",
        GEMINI_MODEL="gemini-primary",
        GEMINI_FALLBACK_MODELS="gemini-secondary,gemini-tertiary",
        LLM_PROVIDER="gemini",
        USE_LLM=True,
        LLM_FALLBACK=False,
        LLM_TIMEOUT_SECONDS=1,
        LLM_MAX_ATTEMPTS=5,
        LLM_BACKOFF_BASE_SECONDS=1.0,
        TRIP_DEDUP=False,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def trips_collection():
    return AsyncMongoMockClient()["travelPlannerTest"]["trips"]


@pytest.fixture
def trip_request_body():
    return {
        "fromCity": "Pune",
        "destination": "Goa",
        "numberOfDays": 3,
        "budget": 25000,
        "familyType": "couple",
    }


@pytest.fixture
def make_api(settings, trips_collection):
    """Build a TestClient whose Gemini calls are served by FakeGenAI."""

    def _make(outcomes=("{}",), dedupe=False, **overrides):
        app_settings = settings.model_copy(update=overrides)
        fake = FakeGenAI(outcomes)
        sleep = SleepRecorder()
        model_client = ModelClient(app_settings, client=fake, sleep=sleep)
        service = ItineraryService(app_settings, generator=GeminiItineraryGenerator(model_client))
        store = TripStore(trips_collection, dedupe=dedupe)
        app = create_app(app_settings, itinerary_service=service, trip_store=store)
        return SimpleNamespace(client=TestClient(app), fake=fake, sleep=sleep, settings=app_settings)

    return _make
