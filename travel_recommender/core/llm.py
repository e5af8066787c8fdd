"""Language-model boundary: build the chat model and invoke it in JSON or streaming mode."""
from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import SecretStr

from travel_recommender.core.config import ApiSettings
from travel_recommender.core.errors import ModelInvocationError, StreamTransportError
from travel_recommender.core.schemas import ChatMessage

logger = logging.getLogger(__name__)


def create_chat_model(settings: ApiSettings) -> BaseChatModel:
    """Build the OpenAI chat model used by both pipelines."""

    logger.debug(f"Creating chat model: model={settings.openai_model}")
    return ChatOpenAI(
        model=settings.openai_model,
        api_key=SecretStr(settings.ensure("openai_api_key")),
        base_url=settings.openai_base_url,
    )


def content_to_text(content: Any) -> str:
    """Flatten LangChain message content (str, dict, or list of parts) to text."""

    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, dict):
        try:
            return json.dumps(content)
        except (TypeError, ValueError):
            return str(content)
    if isinstance(content, list):
        text_chunks: List[str] = []
        for chunk in content:
            if isinstance(chunk, dict) and chunk.get("type") == "text":
                text_chunks.append(chunk.get("text", ""))
            elif isinstance(chunk, str):
                text_chunks.append(chunk)
        return "".join(text_chunks)
    return str(content)


def build_messages(
    system_prompt: str,
    history: Optional[Sequence[ChatMessage]],
    user_message: str,
) -> List[BaseMessage]:
    """System prompt, prior turns, then the new user message."""

    messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
    for turn in history or []:
        if turn.role == "user":
            messages.append(HumanMessage(content=turn.content))
        else:
            messages.append(AIMessage(content=turn.content))
    messages.append(HumanMessage(content=user_message))
    return messages


class ChatModelGateway:
    """Wraps a chat model behind the two calls the pipelines need.

    ``complete`` returns the whole reply (optionally constrained to a JSON
    object); ``stream`` yields text fragments as soon as they arrive. Neither
    call retries.
    """

    def __init__(self, llm: BaseChatModel) -> None:
        self.llm = llm

    @property
    def model_name(self) -> str:
        return getattr(self.llm, "model_name", None) or type(self.llm).__name__

    async def complete(
        self,
        system_prompt: str,
        history: Optional[Sequence[ChatMessage]],
        user_message: str,
        *,
        temperature: float,
        json_mode: bool = True,
    ) -> str:
        params: Dict[str, Any] = {"temperature": temperature}
        if json_mode:
            params["response_format"] = {"type": "json_object"}
        messages = build_messages(system_prompt, history, user_message)
        logger.debug(f"Invoking {self.model_name} with {len(messages)} messages (json_mode={json_mode})")
        try:
            response = await self.llm.bind(**params).ainvoke(messages)
        except Exception as exc:
            logger.error(f"Model invocation failed: {exc}")
            raise ModelInvocationError(str(exc)) from exc
        return content_to_text(getattr(response, "content", response))

    async def stream(
        self,
        system_prompt: str,
        history: Optional[Sequence[ChatMessage]],
        user_message: str,
        *,
        temperature: float,
    ) -> AsyncIterator[str]:
        messages = build_messages(system_prompt, history, user_message)
        logger.debug(f"Streaming from {self.model_name} with {len(messages)} messages")
        upstream = None
        try:
            upstream = self.llm.bind(temperature=temperature).astream(messages)
            async for chunk in upstream:
                text = content_to_text(getattr(chunk, "content", chunk))
                if text:
                    yield text
        except Exception as exc:
            raise StreamTransportError(str(exc)) from exc
        finally:
            aclose = getattr(upstream, "aclose", None)
            if aclose is not None:
                await aclose()
