from typing import AsyncIterator, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel

from travel_recommender.core.cache import InMemoryTTLCache
from travel_recommender.core.config import ApiSettings
from travel_recommender.core.llm import ChatModelGateway, create_chat_model
from travel_recommender.core.schemas import ChatMessage, ParsedPreferences
from travel_recommender.pipelines.extraction import PreferenceExtractor, clarifying_question
from travel_recommender.pipelines.recommendation import RecommendationGenerator, RecommendationResult
from travel_recommender.services import FactEngine, create_weather_client

REQUIRED_SETTINGS = [
    "openai_api_key",
]


def _ensure_configuration(settings: ApiSettings) -> None:
    missing = [field for field in REQUIRED_SETTINGS if not getattr(settings, field)]
    if missing:
        joined = ", ".join(missing)
        raise RuntimeError(
            f"Missing required environment variables for the recommender: {joined}"
        )


class RecommenderBundle:
    """Container for the pipelines and their shared, process-wide dependencies.

    Attributes:
        settings: Model and weather configuration
        gateway: Language-model boundary shared by both pipelines
        fact_engine: Fact provider owning the process-local TTL cache
        extractor: Preference extraction pipeline
        generator: Recommendation generation pipeline
    """

    def __init__(self, settings: ApiSettings, llm: Optional[BaseChatModel] = None) -> None:
        """Initialize the bundle.

        Args:
            settings: Configuration containing API keys and service settings
            llm: Optional pre-built chat model; built from settings when omitted
        """
        if llm is None:
            _ensure_configuration(settings)
            llm = create_chat_model(settings)

        self.settings = settings
        self.gateway = ChatModelGateway(llm)
        self.fact_engine = FactEngine(
            weather_client=create_weather_client(settings.weather_api_base),
            cache=InMemoryTTLCache(),
        )
        self.extractor = PreferenceExtractor(self.gateway)
        self.generator = RecommendationGenerator(self.gateway, self.fact_engine)

    def __repr__(self) -> str:
        return (
            f"RecommenderBundle(\n"
            f"  llm='{self.gateway.model_name}',\n"
            f"  weather_source={'configured' if self.fact_engine.weather_client else 'fallback'},\n"
            f"  min_missing_groups={self.settings.min_missing_groups}\n"
            f")"
        )

    async def close(self) -> None:
        await self.fact_engine.aclose()

    async def parse(
        self,
        *,
        text: str,
        history: Sequence[ChatMessage],
    ) -> tuple[ParsedPreferences, Optional[str]]:
        """Extract preferences and decide whether a clarifying question is due."""

        preferences = await self.extractor.extract(text, history)
        question = clarifying_question(preferences, self.settings.min_missing_groups)
        return preferences, question

    async def recommend(
        self,
        *,
        preferences: ParsedPreferences,
        history: Sequence[ChatMessage],
        tone: Optional[str],
    ) -> RecommendationResult:
        return await self.generator.recommend(preferences, history, tone)

    def stream(
        self,
        *,
        preferences: ParsedPreferences,
        history: Sequence[ChatMessage],
        tone: Optional[str],
    ) -> AsyncIterator[str]:
        return self.generator.stream(preferences, history, tone)
