import asyncio

import pytest

from fakes import ScriptedGateway, StubExecutor, call, collection, single
from regassist.agent.orchestrator import (
    NOT_EXECUTED_MESSAGE,
    ROUND_LIMIT_MESSAGE,
    AgentOrchestrator,
)
from regassist.domain.exceptions import InvalidRequestError, ModelQuotaExceededError
from regassist.domain.models import ConversationToken, ToolResult

TOOLS = ["search_documents-schema"]
PROMPT = "system prompt"


def _orchestrator(gateway, executor, max_rounds=8):
    return AgentOrchestrator(gateway, executor, TOOLS, PROMPT, max_rounds=max_rounds)


def _by_name(results):
    return StubExecutor(lambda inv: results[inv.name])


def test_plain_answer_without_tools():
    gateway = ScriptedGateway(turns=[("Hello! Ask me about regulations.", [])])
    executor = _by_name({})
    history = ConversationToken.from_list([{"role": "user", "text": "earlier"}])

    result = asyncio.run(_orchestrator(gateway, executor).answer("hi", history))

    assert result.text == "Hello! Ask me about regulations."
    assert result.result is None
    assert result.pagination is None
    assert len(result.history) == 3
    assert gateway.messages[0]["tools"] == TOOLS
    assert gateway.messages[0]["system_instruction"] == PROMPT
    assert executor.invocations == []


def test_loop_continues_until_model_stops_requesting_tools():
    gateway = ScriptedGateway(turns=[
        ("", [call("search_documents", "c1", searchTerm="PFAS")]),
        ("", [call("get_document", "c2", documentId="EPA-1")]),
        ("Here is the rule.", []),
    ])
    executor = _by_name({
        "search_documents": collection(["EPA-1", "EPA-2"], has_next=True, total=40),
        "get_document": single("EPA-1"),
    })

    result = asyncio.run(_orchestrator(gateway, executor).answer("PFAS rules"))

    assert result.text == "Here is the rule."
    assert [i.name for i in executor.invocations] == ["search_documents", "get_document"]
    assert len(gateway.outcome_batches) == 2
    # The fetch-by-id result is last and carries no collection metadata.
    assert result.result.payload["data"]["id"] == "EPA-1"
    assert result.pagination is None


def test_search_result_produces_cursor():
    gateway = ScriptedGateway(turns=[
        ("", [call("search_dockets", searchTerm="noise", page=2)]),
        ("Found dockets.", []),
    ])
    executor = _by_name({"search_dockets": collection(["D1"], page=2, has_next=True, total=12)})

    result = asyncio.run(_orchestrator(gateway, executor).answer("noise dockets"))

    assert result.pagination.to_dict() == {
        "hasMore": True,
        "page": 2,
        "totalElements": 12,
        "toolName": "search_dockets",
        "toolInput": {"searchTerm": "noise", "page": 2},
    }


def test_failures_are_isolated_and_sent_back_in_one_batch():
    gateway = ScriptedGateway(turns=[
        ("", [
            call("get_document", "a", documentId="MISSING"),
            call("search_documents", "b", searchTerm="drones"),
        ]),
        ("Partial answer.", []),
    ])
    executor = _by_name({
        "get_document": ToolResult.failure("Not found: the requested ID does not exist on Regulations.gov."),
        "search_documents": collection(["FAA-1"]),
    })

    result = asyncio.run(_orchestrator(gateway, executor).answer("drones"))

    batch = gateway.outcome_batches[0]
    assert [o.invocation.call_id for o in batch] == ["a", "b"]
    assert not batch[0].result.ok
    assert batch[1].result.ok
    assert result.result.items[0]["id"] == "FAA-1"


def test_last_cursor_in_a_round_wins():
    results = {
        "search_documents": collection(["DOC"], total=7),
        "search_comments": collection(["COM"], total=99),
    }
    gateway = ScriptedGateway(turns=[
        ("", [call("search_documents", searchTerm="x"), call("search_comments", searchTerm="x")]),
        ("done", []),
    ])

    result = asyncio.run(_orchestrator(gateway, _by_name(results)).answer("x"))

    assert result.pagination.operation_name == "search_comments"
    assert result.pagination.total_elements == 99


def test_executor_exception_becomes_failure_outcome():
    def handler(inv):
        if inv.name == "get_docket":
            raise RuntimeError("boom")
        return collection(["A"])

    gateway = ScriptedGateway(turns=[
        ("", [call("get_docket", docketId="D"), call("search_documents", searchTerm="a")]),
        ("ok", []),
    ])

    result = asyncio.run(_orchestrator(gateway, StubExecutor(handler)).answer("a"))

    batch = gateway.outcome_batches[0]
    assert batch[0].result.error == "boom"
    assert result.result.items[0]["id"] == "A"


def test_all_failures_leave_no_result():
    gateway = ScriptedGateway(turns=[
        ("", [call("get_document", documentId="X")]),
        ("Sorry, nothing found.", []),
    ])
    executor = _by_name({"get_document": ToolResult.failure("Not found")})

    result = asyncio.run(_orchestrator(gateway, executor).answer("X?"))

    assert result.result is None
    assert result.pagination is None


def test_round_limit_stops_with_terminal_text():
    looping = ("", [call("search_documents", "c", searchTerm="again")])
    gateway = ScriptedGateway(turns=[looping] * 3)
    executor = _by_name({"search_documents": collection(["A"])})

    result = asyncio.run(_orchestrator(gateway, executor, max_rounds=2).answer("loop"))

    assert result.text == ROUND_LIMIT_MESSAGE
    assert len(executor.invocations) == 2
    assert result.result.items[0]["id"] == "A"
    assert [o.result.error for o in gateway.closed_with] == [NOT_EXECUTED_MESSAGE]
    assert result.history.to_list()[-1] == {"role": "model", "text": ROUND_LIMIT_MESSAGE}


def test_empty_message_rejected_before_any_call():
    gateway = ScriptedGateway()
    with pytest.raises(InvalidRequestError):
        asyncio.run(_orchestrator(gateway, _by_name({})).answer("   "))
    assert gateway.messages == []


def test_model_failure_is_classified():
    gateway = ScriptedGateway(turns=[
        RuntimeError("429 Too Many Requests: RESOURCE_EXHAUSTED, retry in 12.5s"),
    ])

    with pytest.raises(ModelQuotaExceededError, match="Please retry in 12.5s"):
        asyncio.run(_orchestrator(gateway, _by_name({})).answer("hello"))
