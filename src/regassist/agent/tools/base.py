"""
agent.tools.base - Base operation interface.

Every Regulations.gov operation declares a pydantic input schema and
knows how to turn validated arguments into one GET request. Validation
always runs before any network call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional
from urllib.parse import quote

from pydantic import BaseModel

from regassist.domain.models import OperationName, ResultKind, ToolResult
from regassist.domain.ports import RegulationsPort


class BaseOperation(ABC):
    """Abstract base for all data-fetch operations."""

    name: ClassVar[OperationName]
    description: ClassVar[str]
    result_kind: ClassVar[ResultKind]

    @abstractmethod
    def get_schema(self) -> type[BaseModel]:
        """Return the pydantic schema for this operation's arguments."""
        ...

    @abstractmethod
    def build_request(self, args: BaseModel) -> tuple[str, dict[str, Any]]:
        """Return (path, query params) for validated arguments."""
        ...

    def validate(self, arguments: dict[str, Any]) -> BaseModel:
        """Validate raw arguments. Raises pydantic.ValidationError."""
        return self.get_schema().model_validate(arguments)

    async def run(self, client: RegulationsPort, args: BaseModel) -> ToolResult:
        """Issue exactly one request for already-validated arguments."""
        path, params = self.build_request(args)
        payload = await client.get(path, params or None)
        return ToolResult.success(self.result_kind, payload)


class SearchOperation(BaseOperation):
    """A paged, sorted collection search.

    Subclasses set the collection path, the sort order and which optional
    schema fields map onto which filter[...] parameters.
    """

    collection: ClassVar[str]
    sort: ClassVar[str] = "-postedDate"
    filters: ClassVar[dict[str, str]] = {}

    def __init__(self, page_size: int = 5):
        self._page_size = page_size

    def build_request(self, args: BaseModel) -> tuple[str, dict[str, Any]]:
        params: dict[str, Any] = {
            "filter[searchTerm]": args.searchTerm,
            "page[number]": args.page or 1,
            "page[size]": self._page_size,
            "sort": self.sort,
        }
        # Optional filters only when the caller supplied a value
        for field_name, param in self.filters.items():
            value = getattr(args, field_name, None)
            if value:
                params[param] = value
        return f"/{self.collection}", params


class FetchOperation(BaseOperation):
    """Fetch one record by its identifier."""

    collection: ClassVar[str]
    id_field: ClassVar[str]
    extra_params: ClassVar[Optional[dict[str, Any]]] = None

    def build_request(self, args: BaseModel) -> tuple[str, dict[str, Any]]:
        record_id = getattr(args, self.id_field)
        path = f"/{self.collection}/{quote(str(record_id), safe='')}"
        return path, dict(self.extra_params or {})
