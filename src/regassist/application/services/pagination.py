"""
application.services.pagination - "Load more" for a previous operation.

The caller hands back the operation name and arguments from a
PaginationCursor; the service fetches the following page and returns a
fresh cursor. Nothing is remembered between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from regassist.application.dto import ContinuationResult
from regassist.domain.exceptions import InvalidRequestError
from regassist.domain.models import PaginationCursor, ToolInvocation
from regassist.domain.ports import ToolExecutorPort

logger = logging.getLogger(__name__)


def next_page_arguments(operation_arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Copy the arguments with the page advanced by one (missing page = 1)."""
    current = operation_arguments.get("page") or 1
    try:
        page = int(current)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"page must be a number, got {current!r}")
    return {**operation_arguments, "page": page + 1}


class PaginationService:
    """Fetches the next page of a previously executed operation."""

    def __init__(self, executor: ToolExecutorPort):
        self._executor = executor

    async def continue_pagination(
        self,
        operation_name: str,
        operation_arguments: Mapping[str, Any],
    ) -> ContinuationResult:
        """Run the operation for page + 1 and rebuild the cursor.

        The caller's mapping is never mutated. Fetch-by-id operations have
        no collection metadata, so their continuation carries no cursor.

        Raises:
            InvalidRequestError: if the name or arguments are missing.
        """
        if not operation_name or not isinstance(operation_arguments, Mapping):
            raise InvalidRequestError("toolName and toolInput are required")

        next_args = next_page_arguments(operation_arguments)
        logger.info("Loading page %s of %s", next_args["page"], operation_name)

        result = await self._executor.execute(
            ToolInvocation(name=operation_name, arguments=next_args)
        )
        pagination = PaginationCursor.from_result(operation_name, next_args, result)
        return ContinuationResult(result=result, pagination=pagination)
