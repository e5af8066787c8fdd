"""Pytest configuration for the travel recommender project."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest
from langchain_core.messages import AIMessage, AIMessageChunk, BaseMessage

# Ensure the project root is on sys.path so that import travel_recommender works under pytest.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class _BoundStub:
    """Mimics the runnable returned by `llm.bind(...)`."""

    def __init__(self, parent: "StubChatModel", params: Dict[str, Any]) -> None:
        self._parent = parent
        self._params = params

    async def ainvoke(self, messages: List[BaseMessage]) -> AIMessage:
        self._parent.calls.append((self._params, messages))
        if self._parent.error is not None:
            raise self._parent.error
        reply = self._parent.replies.pop(0) if self._parent.replies else "{}"
        return AIMessage(content=reply)

    def astream(self, messages: List[BaseMessage]):
        self._parent.calls.append((self._params, messages))
        return self._parent._astream()


class StubChatModel:
    """Captures prompts and yields preconfigured replies or stream chunks."""

    model_name = "stub-model"

    def __init__(self) -> None:
        self.replies: List[str] = []
        self.chunks: List[str] = []
        self.error: Optional[Exception] = None
        self.stream_error: Optional[Exception] = None
        self.stream_closed = False
        self.calls: List[Tuple[Dict[str, Any], List[BaseMessage]]] = []

    def bind(self, **params: Any) -> _BoundStub:
        return _BoundStub(self, params)

    async def _astream(self):
        try:
            for chunk in self.chunks:
                yield AIMessageChunk(content=chunk)
            if self.stream_error is not None:
                raise self.stream_error
        finally:
            self.stream_closed = True

    @property
    def last_messages(self) -> Sequence[BaseMessage]:
        return self.calls[-1][1]

    @property
    def last_params(self) -> Dict[str, Any]:
        return self.calls[-1][0]


@pytest.fixture
def stub_llm() -> StubChatModel:
    return StubChatModel()
