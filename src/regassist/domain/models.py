"""
domain.models - Value objects for the regulations assistant.

These are immutable data containers with no dependencies on infrastructure
(no LangChain, no requests). The text-generation gateway and the
Regulations.gov client translate to and from these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class OperationName(str, Enum):
    """The closed set of data-fetch operations the assistant may call."""
    SEARCH_DOCUMENTS = "search_documents"
    GET_DOCUMENT = "get_document"
    SEARCH_COMMENTS = "search_comments"
    GET_COMMENT = "get_comment"
    SEARCH_DOCKETS = "search_dockets"
    GET_DOCKET = "get_docket"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ResultKind(str, Enum):
    """Shape of a successful result payload."""
    DOCUMENTS = "documents"
    DOCUMENT = "document"
    COMMENTS = "comments"
    COMMENT = "comment"
    DOCKETS = "dockets"
    DOCKET = "docket"


@dataclass(frozen=True)
class ToolInvocation:
    """A request to run one operation with specific arguments.

    call_id is the correlation id the text-generation service attached to
    the request (if any). Arguments are validated by the operation schema,
    not here.
    """
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    call_id: Optional[str] = None


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one operation: success {kind, payload} xor failure {error}."""
    kind: Optional[ResultKind] = None
    payload: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.error is None) == (self.kind is None):
            raise ValueError("ToolResult must be either a success or a failure")

    @classmethod
    def success(cls, kind: ResultKind, payload: dict[str, Any]) -> ToolResult:
        return cls(kind=kind, payload=payload)

    @classmethod
    def failure(cls, error: str) -> ToolResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def meta(self) -> Optional[dict[str, Any]]:
        """Collection metadata of the upstream envelope, if present."""
        if not self.ok or not isinstance(self.payload, dict):
            return None
        meta = self.payload.get("meta")
        return meta if isinstance(meta, dict) else None

    @property
    def items(self) -> list[dict[str, Any]]:
        """Items of a collection payload; empty for single-item or failures."""
        if not self.ok or not isinstance(self.payload, dict):
            return []
        data = self.payload.get("data")
        return data if isinstance(data, list) else []

    def to_dict(self) -> dict[str, Any]:
        """Wire form, shared by the model feedback and the REST adapter."""
        if not self.ok:
            return {"error": self.error}
        return {"type": self.kind.value, "data": self.payload}


@dataclass(frozen=True)
class PaginationCursor:
    """Bookkeeping that allows a later "fetch next page" call."""
    operation_name: str
    operation_arguments: dict[str, Any]
    page_number: int
    has_more: bool
    total_elements: int

    @classmethod
    def from_result(
        cls,
        operation_name: str,
        operation_arguments: dict[str, Any],
        result: ToolResult,
    ) -> Optional[PaginationCursor]:
        """Build a cursor from a result's collection metadata.

        Returns None for failures and for payloads without metadata
        (fetch-by-id operations).
        """
        meta = result.meta
        if meta is None:
            return None
        return cls(
            operation_name=operation_name,
            operation_arguments=dict(operation_arguments),
            page_number=meta.get("pageNumber") or 1,
            has_more=bool(meta.get("hasNextPage") or False),
            total_elements=meta.get("totalElements") or 0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasMore": self.has_more,
            "page": self.page_number,
            "totalElements": self.total_elements,
            "toolName": self.operation_name,
            "toolInput": self.operation_arguments,
        }


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConversationToken:
    """Opaque, serializable record of the prior exchange with the model.

    Only the chat gateway knows what an entry looks like. Everyone else
    receives a token, hands it on and returns the new one.
    """
    entries: tuple[dict[str, Any], ...] = ()

    @classmethod
    def empty(cls) -> ConversationToken:
        return cls()

    @classmethod
    def from_list(cls, entries: Optional[list[dict[str, Any]]]) -> ConversationToken:
        return cls(entries=tuple(entries or ()))

    def to_list(self) -> list[dict[str, Any]]:
        return list(self.entries)

    def extend(self, entries: list[dict[str, Any]]) -> ConversationToken:
        return ConversationToken(entries=self.entries + tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ToolOutcome:
    """One invocation paired with its result, as fed back to the model."""
    invocation: ToolInvocation
    result: ToolResult


@dataclass(frozen=True)
class ModelReply:
    """The text-generation service's answer to one turn."""
    text: str
    tool_calls: list[ToolInvocation] = field(default_factory=list)
    history: ConversationToken = field(default_factory=ConversationToken)
