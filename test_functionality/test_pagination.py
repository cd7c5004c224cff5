import asyncio

import pytest

from fakes import StubExecutor, collection, single
from regassist.application.services.pagination import PaginationService, next_page_arguments
from regassist.domain.exceptions import InvalidRequestError
from regassist.domain.models import ToolResult


def test_next_page_arguments_defaults_missing_page_to_one():
    assert next_page_arguments({"searchTerm": "PFAS"}) == {"searchTerm": "PFAS", "page": 2}
    assert next_page_arguments({"searchTerm": "PFAS", "page": None})["page"] == 2
    assert next_page_arguments({"searchTerm": "PFAS", "page": 4})["page"] == 5


def test_next_page_arguments_rejects_non_numeric_page():
    with pytest.raises(InvalidRequestError):
        next_page_arguments({"page": "three"})


def test_continuation_fetches_next_page_without_mutating_input():
    executor = StubExecutor(lambda inv: collection(["A", "B"], page=3, has_next=False, total=12))
    original = {"searchTerm": "drones", "agencyId": "FAA", "page": 2}

    result = asyncio.run(
        PaginationService(executor).continue_pagination("search_documents", original)
    )

    assert original == {"searchTerm": "drones", "agencyId": "FAA", "page": 2}
    assert executor.invocations[0].arguments == {"searchTerm": "drones", "agencyId": "FAA", "page": 3}
    assert result.result.items[0]["id"] == "A"
    assert result.pagination.to_dict() == {
        "hasMore": False,
        "page": 3,
        "totalElements": 12,
        "toolName": "search_documents",
        "toolInput": {"searchTerm": "drones", "agencyId": "FAA", "page": 3},
    }


def test_fetch_by_id_continuation_has_no_cursor():
    executor = StubExecutor(lambda inv: single("EPA-1"))

    result = asyncio.run(
        PaginationService(executor).continue_pagination("get_document", {"documentId": "EPA-1"})
    )

    assert result.result.ok
    assert result.pagination is None


def test_failure_passes_through_without_cursor():
    executor = StubExecutor(lambda inv: ToolResult.failure("Rate limit reached"))

    result = asyncio.run(
        PaginationService(executor).continue_pagination("search_comments", {"searchTerm": "x"})
    )

    assert result.result.to_dict() == {"error": "Rate limit reached"}
    assert result.pagination is None


@pytest.mark.parametrize("name, arguments", [("", {"searchTerm": "x"}), ("search_documents", None)])
def test_missing_name_or_arguments_rejected(name, arguments):
    executor = StubExecutor(lambda inv: collection([]))
    with pytest.raises(InvalidRequestError, match="toolName and toolInput are required"):
        asyncio.run(PaginationService(executor).continue_pagination(name, arguments))
    assert executor.invocations == []
