"""
agent.tools.registry - Operation registration, lookup, and schema export.

Central registry of the Regulations.gov operations. Exports LangChain
StructuredTools so the chat model can be bound to the operation schemas;
execution itself always goes through ToolExecutor.
"""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.tools import StructuredTool

from regassist.agent.tools.base import BaseOperation
from regassist.agent.tools.comments import GetCommentTool, SearchCommentsTool
from regassist.agent.tools.dockets import GetDocketTool, SearchDocketsTool
from regassist.agent.tools.documents import GetDocumentTool, SearchDocumentsTool
from regassist.domain.exceptions import UnknownOperationError

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Manages operation registration and lookup."""

    def __init__(self):
        self._tools: dict[str, BaseOperation] = {}

    def register(self, tool: BaseOperation) -> None:
        """Register an operation by its name."""
        self._tools[tool.name.value] = tool
        logger.debug("Registered tool: %s", tool.name.value)

    def get(self, name: str) -> BaseOperation:
        """Get an operation by name.

        Raises:
            UnknownOperationError: if nothing is registered under that name.
        """
        if name not in self._tools:
            raise UnknownOperationError(name)
        return self._tools[name]

    def all(self) -> list[BaseOperation]:
        """Return all registered operations."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        """Return all registered operation names."""
        return list(self._tools.keys())

    def to_langchain_tools(self) -> list[StructuredTool]:
        """Convert all registered operations to LangChain StructuredTools.

        The tools are declarations for bind_tools(); the orchestrator runs
        the requested calls itself so it can batch and track results.
        """
        lc_tools = []
        for tool in self._tools.values():
            def _make_func(t: BaseOperation):
                def func(**kwargs: Any) -> str:
                    raise RuntimeError(
                        f"'{t.name.value}' is executed by ToolExecutor, not by LangChain"
                    )
                return func

            lc_tools.append(StructuredTool.from_function(
                func=_make_func(tool),
                name=tool.name.value,
                description=tool.description,
                args_schema=tool.get_schema(),
            ))
        return lc_tools


def default_tool_registry(page_size: int = 5) -> ToolRegistry:
    """Create a registry with the six Regulations.gov operations."""
    registry = ToolRegistry()
    registry.register(SearchDocumentsTool(page_size=page_size))
    registry.register(GetDocumentTool())
    registry.register(SearchCommentsTool(page_size=page_size))
    registry.register(GetCommentTool())
    registry.register(SearchDocketsTool(page_size=page_size))
    registry.register(GetDocketTool())
    return registry
