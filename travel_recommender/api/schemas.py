from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from travel_recommender.core.schemas import ChatMessage, ParsedPreferences, Recommendation


class ParseRequest(BaseModel):
    """Request payload for preference extraction."""

    text: str = Field(..., min_length=1, description="Latest free-text user message")
    history: List[ChatMessage] = Field(
        default_factory=list,
        description="Prior conversation turns, oldest first",
    )


class ParseResponse(BaseModel):
    preferences: ParsedPreferences
    clarifying_question: Optional[str] = Field(
        default=None,
        alias="clarifyingQuestion",
        description="Short follow-up question when too many preference groups are missing",
    )

    model_config = ConfigDict(populate_by_name=True)


class RecommendRequest(BaseModel):
    """Request payload shared by the batch and streaming recommendation endpoints."""

    preferences: ParsedPreferences = Field(default_factory=ParsedPreferences)
    history: List[ChatMessage] = Field(
        default_factory=list,
        description="Prior conversation turns; the latest user turn selects the follow-up mode",
    )
    tone: Optional[str] = Field(
        default=None,
        description="Phrasing style; unknown values fall back to the default tone",
    )


class RecommendResponse(BaseModel):
    json_: Recommendation = Field(alias="json", description="Validated structured recommendation")
    markdown: str = Field(description="Markdown view rendered for the follow-up mode")
    mode: str = Field(description="Follow-up mode selected for this turn")

    model_config = ConfigDict(populate_by_name=True)


class ErrorDetail(BaseModel):
    error: str = Field(description="Machine-readable error category")
    message: str
    errors: Optional[list] = None
