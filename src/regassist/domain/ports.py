"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the system needs without specifying HOW. Infrastructure
modules provide concrete implementations; application services and the
agent depend only on these protocols.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from regassist.domain.models import (
    ConversationToken,
    ModelReply,
    ToolInvocation,
    ToolOutcome,
    ToolResult,
)


@runtime_checkable
class RegulationsPort(Protocol):
    """Read-only access to the Regulations.gov v4 API.

    Raises UpstreamError subclasses on non-2xx responses or transport
    failures.
    """

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]: ...


@runtime_checkable
class ToolExecutorPort(Protocol):
    """Run one invocation; never raises, failures come back as data."""

    async def execute(self, invocation: ToolInvocation) -> ToolResult: ...


@runtime_checkable
class ChatGatewayPort(Protocol):
    """Text-generation service: tool-augmented chat and plain completion."""

    async def send_message(
        self,
        history: ConversationToken,
        message: str,
        *,
        tools: Optional[Sequence[Any]] = None,
        system_instruction: Optional[str] = None,
    ) -> ModelReply: ...

    async def send_tool_outcomes(
        self,
        history: ConversationToken,
        outcomes: Sequence[ToolOutcome],
        *,
        tools: Optional[Sequence[Any]] = None,
        system_instruction: Optional[str] = None,
    ) -> ModelReply: ...

    def close_turn(
        self,
        history: ConversationToken,
        outcomes: Sequence[ToolOutcome],
        text: str,
    ) -> ConversationToken: ...

    async def complete(self, prompt: str) -> str: ...
