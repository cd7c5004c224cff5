"""
agent.orchestrator - Conversation orchestrator (the agent loop).

Runs the model + tool loop for one user message:

    AWAITING_MODEL → EXECUTING_TOOLS → AWAITING_MODEL → … → DONE

Stateless per call. The conversation travels in the ConversationToken the
caller supplies and gets back. The only state is the "last successful
result" and its pagination cursor, and both live only for one call.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence

from regassist.application.dto import AnswerResult
from regassist.application.errors import model_errors
from regassist.domain.exceptions import InvalidRequestError
from regassist.domain.models import (
    ConversationToken,
    PaginationCursor,
    ToolInvocation,
    ToolOutcome,
    ToolResult,
)
from regassist.domain.ports import ChatGatewayPort, ToolExecutorPort

logger = logging.getLogger(__name__)

ROUND_LIMIT_MESSAGE = (
    "I wasn't able to complete this request within the allowed number of steps. "
    "Please try narrowing your question."
)
NOT_EXECUTED_MESSAGE = "Not executed: the step limit for this request was reached."


class AgentOrchestrator:
    """Drives the exchange between the caller, the model and the executor.

    Constructed once by the ServiceFactory with all dependencies injected
    and shared by concurrent requests.
    """

    def __init__(
        self,
        gateway: ChatGatewayPort,
        executor: ToolExecutorPort,
        tools: Sequence[Any],
        system_prompt: str,
        max_rounds: int = 8,
    ):
        self._gateway = gateway
        self._executor = executor
        self._tools = list(tools)
        self._system_prompt = system_prompt
        self._max_rounds = max_rounds

    async def answer(
        self,
        message: str,
        history: Optional[ConversationToken] = None,
    ) -> AnswerResult:
        """Process a user message and return the final answer.

        Args:
            message: The user's message text.
            history: Token returned by the previous call (None for a new chat).

        Returns:
            AnswerResult with the model's text, the last successful tool
            result of this call, its pagination cursor and the new token.

        Raises:
            InvalidRequestError: if message is empty (no external call made).
            ModelServiceError: if the text-generation service fails.
        """
        if not message or not message.strip():
            raise InvalidRequestError("message is required")

        history = history or ConversationToken.empty()
        logger.info("Agent processing (history=%d): %s", len(history), message[:80])

        last_result: Optional[ToolResult] = None
        pagination: Optional[PaginationCursor] = None

        with model_errors("chat"):
            reply = await self._gateway.send_message(
                history, message,
                tools=self._tools, system_instruction=self._system_prompt,
            )

        rounds = 0
        while reply.tool_calls:
            if rounds >= self._max_rounds:
                logger.warning(
                    "Agent stopped after %d rounds with %d tool call(s) pending",
                    rounds, len(reply.tool_calls),
                )
                pending = [
                    ToolOutcome(call, ToolResult.failure(NOT_EXECUTED_MESSAGE))
                    for call in reply.tool_calls
                ]
                return AnswerResult(
                    text=ROUND_LIMIT_MESSAGE,
                    result=last_result,
                    pagination=pagination,
                    history=self._gateway.close_turn(reply.history, pending, ROUND_LIMIT_MESSAGE),
                )

            rounds += 1
            outcomes = await self._run_round(reply.tool_calls)

            # Outcomes are in the order the model requested them; with several
            # collection results in one round the last one's cursor survives.
            for outcome in outcomes:
                if not outcome.result.ok:
                    continue
                last_result = outcome.result
                pagination = PaginationCursor.from_result(
                    outcome.invocation.name, outcome.invocation.arguments, outcome.result,
                )

            with model_errors("chat"):
                reply = await self._gateway.send_tool_outcomes(
                    reply.history, outcomes,
                    tools=self._tools, system_instruction=self._system_prompt,
                )

        logger.info(
            "Agent finished: %d round(s), output starts with: %s",
            rounds, reply.text[:80],
        )
        return AnswerResult(
            text=reply.text,
            result=last_result,
            pagination=pagination,
            history=reply.history,
        )

    async def _run_round(self, calls: Sequence[ToolInvocation]) -> list[ToolOutcome]:
        """Execute one round's calls concurrently, each failure-isolated."""
        logger.info("Executing round: %s", [c.name for c in calls])
        results = await asyncio.gather(
            *(self._executor.execute(call) for call in calls),
            return_exceptions=True,
        )
        outcomes = []
        for call, result in zip(calls, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(
                    "Tool '%s' raised instead of returning a failure", call.name,
                    exc_info=result,
                )
                result = ToolResult.failure(str(result) or type(result).__name__)
            outcomes.append(ToolOutcome(invocation=call, result=result))
        return outcomes
