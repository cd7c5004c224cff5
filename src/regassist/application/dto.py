"""
application.dto - Data Transfer Objects for service input/output.

These are the structured results that the orchestrator and services
return to callers (REST endpoints, CLI adapter).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from regassist.domain.models import ConversationToken, PaginationCursor, ToolResult


@dataclass(frozen=True)
class AnswerResult:
    """Result of one conversational turn."""
    text: str
    result: Optional[ToolResult]
    pagination: Optional[PaginationCursor]
    history: ConversationToken


@dataclass(frozen=True)
class ContinuationResult:
    """Result of fetching the next page of a previous operation."""
    result: ToolResult
    pagination: Optional[PaginationCursor]


@dataclass(frozen=True)
class BriefingResult:
    """Narrated briefing plus the deduplicated items it was built from."""
    narrative: str
    items: list[dict[str, Any]] = field(default_factory=list)
    queries: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentAnswer:
    """Answer to a question about one document, plus the Q&A history."""
    answer: str
    history: ConversationToken
