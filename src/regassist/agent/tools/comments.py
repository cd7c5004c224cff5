"""
agent.tools.comments - Public comment search and fetch operations.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from regassist.agent.tools.base import FetchOperation, SearchOperation
from regassist.domain.models import OperationName, ResultKind


class SearchCommentsInput(BaseModel):
    """Input schema for the search_comments operation."""
    searchTerm: str = Field(min_length=1, description="The search term to find comments")
    docketId: Optional[str] = Field(
        default=None, description="Optional: filter comments by docket ID"
    )
    page: Optional[int] = Field(
        default=None, description="Page number for pagination (default: 1)"
    )


class GetCommentInput(BaseModel):
    """Input schema for the get_comment operation."""
    commentId: str = Field(min_length=1, description="The exact comment ID")


class SearchCommentsTool(SearchOperation):
    name = OperationName.SEARCH_COMMENTS
    description = (
        "Search for public comments on Regulations.gov. Use for questions about "
        "comments submitted on regulations."
    )
    result_kind = ResultKind.COMMENTS
    collection = "comments"
    sort = "-postedDate"
    filters = {"docketId": "filter[docketId]"}

    def get_schema(self) -> type[BaseModel]:
        return SearchCommentsInput


class GetCommentTool(FetchOperation):
    name = OperationName.GET_COMMENT
    description = "Retrieve a specific comment by its comment ID from Regulations.gov."
    result_kind = ResultKind.COMMENT
    collection = "comments"
    id_field = "commentId"
    extra_params = {"include": "attachments"}

    def get_schema(self) -> type[BaseModel]:
        return GetCommentInput
