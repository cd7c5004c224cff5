"""
agent.executor - Runs one operation against Regulations.gov.

The executor is the failure boundary for data fetches: unknown names,
invalid arguments, HTTP errors and transport errors all come back as the
failure variant of ToolResult. Nothing raised by a fetch escapes execute(),
so one bad call never aborts an agent round or a briefing batch.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from regassist.agent.tools.registry import ToolRegistry
from regassist.domain.exceptions import UnknownOperationError, UpstreamError
from regassist.domain.models import ToolInvocation, ToolResult
from regassist.domain.ports import RegulationsPort

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Validates and executes ToolInvocations.

    Stateless; one instance is shared by every request.
    """

    def __init__(self, registry: ToolRegistry, client: RegulationsPort):
        self._registry = registry
        self._client = client

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        """Run one invocation and return its result (never raises)."""
        try:
            operation = self._registry.get(invocation.name)
        except UnknownOperationError as e:
            logger.warning("Rejected unknown tool '%s'", invocation.name)
            return ToolResult.failure(str(e))

        try:
            args = operation.validate(invocation.arguments or {})
        except ValidationError as e:
            logger.warning("Rejected arguments for '%s': %s", invocation.name, invocation.arguments)
            return ToolResult.failure(
                f"Invalid arguments for {invocation.name}: {_format_validation(e)}"
            )

        try:
            result = await operation.run(self._client, args)
        except UpstreamError as e:
            logger.info("Tool '%s' failed: %s", invocation.name, e)
            return ToolResult.failure(str(e))

        logger.info("Tool '%s' succeeded (%s)", invocation.name, result.kind.value)
        return result


def _format_validation(error: ValidationError) -> str:
    """Compact 'field: message' list for a pydantic ValidationError."""
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)
