"""Stub boundaries shared by the test modules."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Optional, Sequence

import requests
from langchain_core.language_models import BaseChatModel
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

from regassist.agent.orchestrator import AgentOrchestrator
from regassist.application.services.analysis import AnalysisService
from regassist.application.services.briefing import BriefingService
from regassist.application.services.pagination import PaginationService
from regassist.domain.models import (
    ConversationToken,
    ModelReply,
    ResultKind,
    ToolInvocation,
    ToolOutcome,
    ToolResult,
)
from regassist.infrastructure.config import Settings


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)
        self.url = "https://api.regulations.gov/v4/fake"

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeSession:
    """Records every GET and answers from a script (or raises)."""

    def __init__(self, *responses: Any):
        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []
        self._responses = list(responses)
        self.closed = False

    def get(self, url: str, params: Any = None, timeout: Any = None) -> FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, BaseException):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


class RecordingClient:
    """RegulationsPort stub returning a fixed envelope per call."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None):
        self.payload = payload if payload is not None else {"data": []}
        self.error = error
        self.calls: list[tuple[str, Any]] = []

    async def get(self, path: str, params: Any = None) -> dict[str, Any]:
        self.calls.append((path, params))
        if self.error is not None:
            raise self.error
        return self.payload


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------

class StubExecutor:
    """ToolExecutorPort stub; `handler` maps an invocation to a result."""

    def __init__(self, handler: Callable[[ToolInvocation], ToolResult]):
        self._handler = handler
        self.invocations: list[ToolInvocation] = []

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        self.invocations.append(invocation)
        return self._handler(invocation)


def collection(ids: Sequence[str], *, page: int = 1, has_next: bool = False,
               total: Optional[int] = None, kind: ResultKind = ResultKind.DOCUMENTS) -> ToolResult:
    """A collection success result with the given item ids."""
    return ToolResult.success(kind, {
        "data": [{"id": i, "attributes": {"title": f"Title {i}"}} for i in ids],
        "meta": {
            "pageNumber": page,
            "hasNextPage": has_next,
            "totalElements": len(ids) if total is None else total,
        },
    })


def single(item_id: str, kind: ResultKind = ResultKind.DOCUMENT) -> ToolResult:
    """A fetch-by-id success result (no meta)."""
    return ToolResult.success(kind, {"data": {"id": item_id, "attributes": {"title": item_id}}})


# ---------------------------------------------------------------------------
# Text generation
# ---------------------------------------------------------------------------

class ScriptedGateway:
    """ChatGatewayPort stub that replays scripted turns.

    `turns` are (text, [ToolInvocation, ...]) pairs consumed by
    send_message / send_tool_outcomes; `completions` are consumed by
    complete(). An Exception in either script is raised instead.
    """

    def __init__(self, turns: Sequence[Any] = (), completions: Sequence[Any] = ()):
        self._turns = list(turns)
        self._completions = list(completions)
        self.messages: list[dict[str, Any]] = []
        self.outcome_batches: list[list[ToolOutcome]] = []
        self.prompts: list[str] = []
        self.closed_with: Optional[list[ToolOutcome]] = None

    async def send_message(self, history, message, *, tools=None, system_instruction=None):
        self.messages.append({
            "history": history, "message": message,
            "tools": tools, "system_instruction": system_instruction,
        })
        return self._next(history.extend([{"role": "user", "text": message}]))

    async def send_tool_outcomes(self, history, outcomes, *, tools=None, system_instruction=None):
        self.outcome_batches.append(list(outcomes))
        return self._next(history.extend([{"role": "tool", "count": len(outcomes)}]))

    def close_turn(self, history, outcomes, text):
        self.closed_with = list(outcomes)
        return history.extend([{"role": "tool", "count": len(outcomes)}, {"role": "model", "text": text}])

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        step = self._completions.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def _next(self, history: ConversationToken) -> ModelReply:
        step = self._turns.pop(0)
        if isinstance(step, Exception):
            raise step
        text, calls = step
        return ModelReply(
            text=text,
            tool_calls=list(calls),
            history=history.extend([{"role": "model", "text": text}]),
        )


class FakeToolChatModel(BaseChatModel):
    """Replays AIMessages and records every prompt it receives."""

    replies: list = Field(default_factory=list)
    received: list = Field(default_factory=list)
    bound_tools: list = Field(default_factory=list)
    delay: float = 0.0

    @property
    def _llm_type(self) -> str:
        return "fake-tool-chat"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs: Any) -> ChatResult:
        self.received.append(list(messages))
        return ChatResult(generations=[ChatGeneration(message=self.replies.pop(0))])

    async def _agenerate(self, messages, stop=None, run_manager=None, **kwargs: Any) -> ChatResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self._generate(messages, stop=stop, **kwargs)

    def bind_tools(self, tools, **kwargs: Any):
        self.bound_tools.append(list(tools))
        return self


def call(name: str, call_id: Optional[str] = None, **arguments: Any) -> ToolInvocation:
    return ToolInvocation(name=name, arguments=arguments, call_id=call_id)


TRANSPORT_ERROR = requests.exceptions.ConnectionError("Connection refused")


# ---------------------------------------------------------------------------
# Composition root
# ---------------------------------------------------------------------------

class FakeFactory:
    """ServiceFactory stand-in wiring real services onto the stubs above."""

    def __init__(self, gateway=None, executor=None, client=None, config=None):
        self.config = config or Settings(regulations_api_key="reg-key", google_api_key="llm-key")
        self.gateway = gateway or ScriptedGateway()
        self.executor = executor or StubExecutor(lambda inv: collection([]))
        self.client = client or RecordingClient()
        self.closed = False

    def create_orchestrator(self):
        return AgentOrchestrator(self.gateway, self.executor, [], "system prompt")

    def create_pagination_service(self):
        return PaginationService(self.executor)

    def create_briefing_service(self):
        return BriefingService(self.gateway, self.executor)

    def create_analysis_service(self):
        return AnalysisService(self.gateway, self.executor, self.client)

    def close(self) -> None:
        self.closed = True
