import logging
from typing import Dict, Optional, Protocol, Type

from travelplanner.config import Settings
from travelplanner.errors import ConfigError, TravelPlannerError
from travelplanner.llm.gemini_client import ModelClient
from travelplanner.llm.itinerary_prompt import build_itinerary_prompt
from travelplanner.llm.normalizer import normalize_itinerary
from travelplanner.planner.mock_planner import generate_mock_itinerary
from travelplanner.schemas.itinerary_schema import Itinerary, PlanTripData, TripRequest

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# 🧠 Generator capability (one implementation per provider)
# ------------------------------------------------------------------
class ItineraryGenerator(Protocol):
    async def generate(self, request: TripRequest) -> Itinerary:
        ...


class GeminiItineraryGenerator:
    """Prompt → Gemini → normalized Itinerary."""

    requires_api_key = True

    def __init__(self, client: ModelClient, strict: bool = False):
        self.client = client
        self.strict = strict

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiItineraryGenerator":
        return cls(ModelClient(settings))

    async def generate(self, request: TripRequest) -> Itinerary:
        prompt = build_itinerary_prompt(
            request.fromCity,
            request.destination,
            request.numberOfDays,
            request.budget,
            request.familyType,
        )
        raw_text = await self.client.generate(prompt)
        return normalize_itinerary(raw_text, strict=self.strict)


class MockItineraryGenerator:
    """Static, rule-based itinerary. Never fails."""

    requires_api_key = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "MockItineraryGenerator":
        return cls()

    async def generate(self, request: TripRequest) -> Itinerary:
        return generate_mock_itinerary(request)


PROVIDERS: Dict[str, Type] = {
    "gemini": GeminiItineraryGenerator,
    "mock": MockItineraryGenerator,
}


# ------------------------------------------------------------------
# 🚀 Core Service
# ------------------------------------------------------------------
class ItineraryService:
    def __init__(
        self,
        settings: Settings,
        generator: Optional[ItineraryGenerator] = None,
        fallback: Optional[ItineraryGenerator] = None,
    ):
        self.settings = settings
        self._generator = generator
        self._fallback = fallback or MockItineraryGenerator()

    @property
    def provider(self) -> str:
        return self.settings.LLM_PROVIDER.strip().lower()

    def _get_generator(self) -> ItineraryGenerator:
        if self._generator is None:
            factory = PROVIDERS.get(self.provider)
            if factory is None:
                raise ConfigError(f"Unsupported LLM provider: {self.settings.LLM_PROVIDER}")
            self._generator = factory.from_settings(self.settings)
        return self._generator

    def _check_configuration(self, generator: ItineraryGenerator) -> None:
        if getattr(generator, "requires_api_key", False) and not self.settings.api_key_configured:
            raise ConfigError(
                "Gemini API key is not configured. Please set GEMINI_API_KEY in your .env file."
            )

    async def plan(self, request: TripRequest) -> Itinerary:
        """
        Generate an itinerary for a validated request.
        Provider failures propagate as TravelPlannerError subclasses unless
        LLM_FALLBACK is on, in which case the mock itinerary is returned.
        """
        if not self.settings.USE_LLM:
            logger.info("Using mock itinerary (LLM disabled).")
            return await self._fallback.generate(request)

        try:
            generator = self._get_generator()
            self._check_configuration(generator)
            return await generator.generate(request)
        except TravelPlannerError as e:
            if not self.settings.LLM_FALLBACK:
                raise
            logger.warning("AI generation failed (%s: %s). Falling back to mock itinerary.", e.error, e.message)
            return await self._fallback.generate(request)

    async def plan_trip(self, request: TripRequest) -> PlanTripData:
        itinerary = await self.plan(request)
        return PlanTripData(
            **request.model_dump(),
            **itinerary.model_dump(),
            totalEstimatedCost=itinerary.total_estimated_cost,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ItineraryService":
        return cls(settings)
