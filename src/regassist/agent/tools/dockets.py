"""
agent.tools.dockets - Docket (rulemaking folder) search and fetch operations.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from regassist.agent.tools.base import FetchOperation, SearchOperation
from regassist.domain.models import OperationName, ResultKind


class SearchDocketsInput(BaseModel):
    """Input schema for the search_dockets operation."""
    searchTerm: str = Field(min_length=1, description="The search term to find dockets")
    agencyId: Optional[str] = Field(
        default=None, description="Optional: filter by agency acronym"
    )
    page: Optional[int] = Field(
        default=None, description="Page number for pagination (default: 1)"
    )


class GetDocketInput(BaseModel):
    """Input schema for the get_docket operation."""
    docketId: str = Field(
        min_length=1, description="The exact docket ID, e.g. EPA-HQ-OAR-2003-0129"
    )


class SearchDocketsTool(SearchOperation):
    name = OperationName.SEARCH_DOCKETS
    description = (
        "Search for dockets (rulemaking folders) on Regulations.gov. A docket is a "
        "collection of all documents and comments for a specific rulemaking."
    )
    result_kind = ResultKind.DOCKETS
    collection = "dockets"
    sort = "-lastModifiedDate"
    filters = {"agencyId": "filter[agencyId]"}

    def get_schema(self) -> type[BaseModel]:
        return SearchDocketsInput


class GetDocketTool(FetchOperation):
    name = OperationName.GET_DOCKET
    description = "Retrieve a specific docket by its docket ID from Regulations.gov."
    result_kind = ResultKind.DOCKET
    collection = "dockets"
    id_field = "docketId"

    def get_schema(self) -> type[BaseModel]:
        return GetDocketInput
