"""FastAPI surface for the travel recommendation assistant."""
from __future__ import annotations

import logging
import os

# Load environment variables from .env file
from dotenv import load_dotenv

# Load .env file before any other imports that might need environment variables
load_dotenv()

from typing import AsyncIterator, Dict

import sentry_sdk
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from travel_recommender.api.dependencies import get_recommender_bundle, lifespan
from travel_recommender.api.schemas import (
    ErrorDetail,
    ParseRequest,
    ParseResponse,
    RecommendRequest,
    RecommendResponse,
)
from travel_recommender.core.errors import (
    ModelInvocationError,
    PreferenceValidationError,
    UpstreamFormatError,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if os.getenv("SENTRY_DSN"):  # pragma: no cover - runtime configuration
    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        send_default_pii=False,
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
    )

app = FastAPI(title="Travel Recommender API", version="0.1.0", lifespan=lifespan)

origins = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",
]


app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, message: str, errors: list | None = None) -> HTTPException:
    detail = ErrorDetail(error=error, message=message, errors=errors)
    return HTTPException(status_code=status_code, detail=detail.model_dump(exclude_none=True))


@app.post("/parse", response_model=ParseResponse, response_model_exclude_none=True)
async def parse_preferences(payload: ParseRequest) -> ParseResponse:
    """Extract structured travel preferences from the latest user message.

    Args:
        payload: The new user text plus optional prior conversation turns.

    Returns:
        ParseResponse with the validated preferences and, when too many
        preference groups are missing, a short clarifying question.

    Raises:
        HTTPException: 502 ``upstream_format`` when the model reply is not a
            JSON object, 422 ``validation`` when it has the wrong shape, 502
            ``model_unavailable`` when the model call fails.

    Example JSON payload:
        ```json
        {
            "text": "Beach trip in Europe in July, under $2000, 5 days, food and hiking",
            "history": [{"role": "user", "content": "Hi!"}]
        }
        ```
    """
    logger.info("Preference extraction request received")
    logger.debug(f"Payload: {payload}")

    bundle = get_recommender_bundle()
    try:
        preferences, question = await bundle.parse(text=payload.text, history=payload.history)
    except UpstreamFormatError as exc:
        logger.error(f"Bad upstream JSON during parse: {exc}")
        raise _error(502, "upstream_format", str(exc)) from exc
    except PreferenceValidationError as exc:
        logger.error(f"Preference validation failed during parse: {exc}")
        raise _error(422, "validation", str(exc), exc.errors) from exc
    except ModelInvocationError as exc:
        logger.error(f"Model invocation failed during parse: {exc}")
        raise _error(502, "model_unavailable", str(exc)) from exc
    except Exception as exc:
        logger.error(f"Unexpected error during parse: {str(exc)}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ParseResponse(preferences=preferences, clarifying_question=question)


@app.post("/recommend", response_model=RecommendResponse)
async def recommend(payload: RecommendRequest) -> RecommendResponse:
    """Generate recommendations as structured JSON plus a mode-specific markdown view.

    The follow-up mode is inferred from the latest user turn in ``history``.
    Malformed model output never fails the request; it yields an explanatory
    markdown block and an empty result instead.
    """
    logger.info("Recommendation request received")
    logger.debug(f"Payload: {payload}")

    bundle = get_recommender_bundle()
    try:
        result = await bundle.recommend(
            preferences=payload.preferences,
            history=payload.history,
            tone=payload.tone,
        )
    except ModelInvocationError as exc:
        logger.error(f"Model invocation failed during recommend: {exc}")
        raise _error(502, "model_unavailable", str(exc)) from exc
    except Exception as exc:
        logger.error(f"Unexpected error during recommend: {str(exc)}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return RecommendResponse(json=result.recommendation, markdown=result.markdown, mode=result.mode.value)


@app.post("/recommend/stream")
async def recommend_stream(payload: RecommendRequest) -> StreamingResponse:
    """Stream markdown recommendations token by token.

    The stream ends on completion, on client disconnect, or after a visible
    retry notice when the upstream model fails mid-stream.
    """
    logger.info("Streaming recommendation request received")

    bundle = get_recommender_bundle()
    tokens = bundle.stream(
        preferences=payload.preferences,
        history=payload.history,
        tone=payload.tone,
    )

    async def body() -> AsyncIterator[bytes]:
        try:
            async for fragment in tokens:
                yield fragment.encode("utf-8")
        finally:
            await tokens.aclose()

    return StreamingResponse(
        body(),
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache"},
    )


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health endpoint used for readiness probes."""

    return {"status": "healthy", "service": "travel-recommender-api"}
