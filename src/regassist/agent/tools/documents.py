"""
agent.tools.documents - Document search and fetch operations.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from regassist.agent.tools.base import FetchOperation, SearchOperation
from regassist.domain.models import OperationName, ResultKind


class SearchDocumentsInput(BaseModel):
    """Input schema for the search_documents operation."""
    searchTerm: str = Field(min_length=1, description="The search term to find documents")
    agencyId: Optional[str] = Field(
        default=None,
        description="Optional: filter by agency acronym, e.g. EPA, FDA, DOT, USDA",
    )
    documentType: Optional[str] = Field(
        default=None,
        description=(
            "Optional: filter by document type: Rule, Proposed Rule, Notice, "
            "Supporting & Related Material, or Other"
        ),
    )
    page: Optional[int] = Field(
        default=None, description="Page number for pagination (default: 1)"
    )


class GetDocumentInput(BaseModel):
    """Input schema for the get_document operation."""
    documentId: str = Field(
        min_length=1,
        description="The exact document ID, e.g. EPA-HQ-OAR-2003-0129-0001 or FDA-2009-N-0501-0012",
    )


class SearchDocumentsTool(SearchOperation):
    name = OperationName.SEARCH_DOCUMENTS
    description = (
        "Search for regulatory documents on Regulations.gov. Use for questions "
        "about finding rules, proposed rules, notices, or other regulatory documents."
    )
    result_kind = ResultKind.DOCUMENTS
    collection = "documents"
    sort = "-postedDate"
    filters = {"agencyId": "filter[agencyId]", "documentType": "filter[documentType]"}

    def get_schema(self) -> type[BaseModel]:
        return SearchDocumentsInput


class GetDocumentTool(FetchOperation):
    name = OperationName.GET_DOCUMENT
    description = "Retrieve a specific document by its document ID from Regulations.gov."
    result_kind = ResultKind.DOCUMENT
    collection = "documents"
    id_field = "documentId"

    def get_schema(self) -> type[BaseModel]:
        return GetDocumentInput
