"""
infrastructure.llm.chat_gateway - LangChain implementation of ChatGatewayPort.

Owns the ConversationToken format: each entry is a LangChain message
serialized with messages_to_dict(). The system instruction is never
stored in the token; it is prepended on every call so the server stays
in control of it.

Every model call is bounded by a timeout. Provider errors propagate
unchanged for the application layer to classify.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
    messages_from_dict,
    messages_to_dict,
)

from regassist.domain.exceptions import InvalidRequestError, ModelServiceError
from regassist.domain.models import (
    ConversationToken,
    ModelReply,
    ToolInvocation,
    ToolOutcome,
)

logger = logging.getLogger(__name__)


class LangChainChatGateway:
    """Tool-augmented chat and plain completion over one shared chat model.

    Implements ChatGatewayPort (structural typing, no explicit inheritance).
    Holds no per-conversation state.
    """

    def __init__(self, llm: BaseChatModel, timeout: Optional[float] = 60.0):
        self._llm = llm
        self._timeout = timeout

    async def send_message(
        self,
        history: ConversationToken,
        message: str,
        *,
        tools: Optional[Sequence[Any]] = None,
        system_instruction: Optional[str] = None,
    ) -> ModelReply:
        """Append a user message to the exchange and get the model's reply."""
        return await self._turn(
            history, [HumanMessage(content=message)], tools, system_instruction,
        )

    async def send_tool_outcomes(
        self,
        history: ConversationToken,
        outcomes: Sequence[ToolOutcome],
        *,
        tools: Optional[Sequence[Any]] = None,
        system_instruction: Optional[str] = None,
    ) -> ModelReply:
        """Send one round's tool results back as a single turn."""
        return await self._turn(
            history, _tool_messages(outcomes), tools, system_instruction,
        )

    def close_turn(
        self,
        history: ConversationToken,
        outcomes: Sequence[ToolOutcome],
        text: str,
    ) -> ConversationToken:
        """Record outcomes and a final assistant text without calling the model.

        Keeps the exchange replayable when the agent stops with tool calls
        still pending: every requested call gets a response.
        """
        closing = [*_tool_messages(outcomes), AIMessage(content=text)]
        return history.extend(messages_to_dict(closing))

    async def complete(self, prompt: str) -> str:
        """Tool-free, history-free completion."""
        reply = await self._invoke(self._llm, [HumanMessage(content=prompt)])
        return _content_text(reply)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _turn(
        self,
        history: ConversationToken,
        new_messages: list[BaseMessage],
        tools: Optional[Sequence[Any]],
        system_instruction: Optional[str],
    ) -> ModelReply:
        prior = _decode_history(history)
        prompt: list[BaseMessage] = []
        if system_instruction:
            prompt.append(SystemMessage(content=system_instruction))
        prompt.extend(prior)
        prompt.extend(new_messages)

        llm = self._llm.bind_tools(list(tools)) if tools else self._llm
        reply = await self._invoke(llm, prompt)

        tool_calls = [
            ToolInvocation(
                name=call["name"],
                arguments=dict(call.get("args") or {}),
                call_id=call.get("id"),
            )
            for call in (reply.tool_calls or [])
        ]
        logger.info(
            "Model replied (history=%d, tool_calls=%s)",
            len(prior), [c.name for c in tool_calls],
        )
        updated = history.extend(messages_to_dict([*new_messages, reply]))
        return ModelReply(text=_content_text(reply), tool_calls=tool_calls, history=updated)

    async def _invoke(self, llm: Any, messages: list[BaseMessage]) -> AIMessage:
        try:
            return await asyncio.wait_for(llm.ainvoke(messages), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Model call timed out after %ss", self._timeout)
            raise ModelServiceError(
                f"The AI service did not respond within {self._timeout:g} seconds. "
                "Please try again."
            )


def _decode_history(history: ConversationToken) -> list[BaseMessage]:
    try:
        return messages_from_dict(history.to_list())
    except (KeyError, ValueError, TypeError) as e:
        logger.warning("Rejected conversation token: %r", e)
        raise InvalidRequestError("history is not a valid conversation token") from e


def _tool_messages(outcomes: Sequence[ToolOutcome]) -> list[BaseMessage]:
    """One ToolMessage per outcome, correlated by call id (or name)."""
    return [
        ToolMessage(
            content=json.dumps(outcome.result.to_dict()),
            tool_call_id=outcome.invocation.call_id or outcome.invocation.name,
            name=outcome.invocation.name,
        )
        for outcome in outcomes
    ]


def _content_text(message: BaseMessage) -> str:
    """Plain text of a message whose content may be a list of parts."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)
