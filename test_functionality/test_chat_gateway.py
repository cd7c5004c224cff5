import asyncio
import json

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from fakes import FakeToolChatModel, call, collection
from regassist.domain.exceptions import InvalidRequestError, ModelServiceError
from regassist.domain.models import ConversationToken, ToolOutcome, ToolResult
from regassist.infrastructure.llm.chat_gateway import LangChainChatGateway


TOOL_CALL_REPLY = AIMessage(
    content="",
    tool_calls=[{"name": "search_documents", "args": {"searchTerm": "PFAS"}, "id": "call-1"}],
)


def test_send_message_maps_tool_calls_and_extends_history():
    llm = FakeToolChatModel(replies=[TOOL_CALL_REPLY])
    gateway = LangChainChatGateway(llm)

    reply = asyncio.run(gateway.send_message(
        ConversationToken.empty(), "PFAS rules?",
        tools=["schema"], system_instruction="Be helpful.",
    ))

    assert [(c.name, c.arguments, c.call_id) for c in reply.tool_calls] == [
        ("search_documents", {"searchTerm": "PFAS"}, "call-1"),
    ]
    assert llm.bound_tools == [["schema"]]
    prompt = llm.received[0]
    assert isinstance(prompt[0], SystemMessage) and prompt[0].content == "Be helpful."
    assert isinstance(prompt[1], HumanMessage)
    # The system instruction is never stored in the token.
    assert [entry["type"] for entry in reply.history.to_list()] == ["human", "ai"]


def test_tool_outcomes_replay_history_and_correlate_by_call_id():
    llm = FakeToolChatModel(replies=[TOOL_CALL_REPLY, AIMessage(content="Two rules found.")])
    gateway = LangChainChatGateway(llm)
    first = asyncio.run(gateway.send_message(ConversationToken.empty(), "PFAS?", tools=["schema"]))

    outcome = ToolOutcome(first.tool_calls[0], collection(["EPA-1"]))
    second = asyncio.run(gateway.send_tool_outcomes(first.history, [outcome], tools=["schema"]))

    assert second.text == "Two rules found."
    assert second.tool_calls == []
    prompt = llm.received[1]
    assert [type(m) for m in prompt] == [HumanMessage, AIMessage, ToolMessage]
    assert prompt[2].tool_call_id == "call-1"
    assert json.loads(prompt[2].content)["type"] == "documents"
    assert len(second.history) == 4


def test_close_turn_records_without_calling_model():
    llm = FakeToolChatModel(replies=[TOOL_CALL_REPLY])
    gateway = LangChainChatGateway(llm)
    first = asyncio.run(gateway.send_message(ConversationToken.empty(), "loop", tools=["schema"]))

    closed = gateway.close_turn(
        first.history, [ToolOutcome(first.tool_calls[0], ToolResult.failure("Not executed"))], "Stopped.",
    )

    entries = closed.to_list()
    assert [e["type"] for e in entries] == ["human", "ai", "tool", "ai"]
    assert entries[-1]["data"]["content"] == "Stopped."
    assert len(llm.received) == 1


def test_complete_is_tool_free_and_joins_content_parts():
    llm = FakeToolChatModel(replies=[AIMessage(content=[{"type": "text", "text": "Hello "}, "world"])])
    gateway = LangChainChatGateway(llm)

    text = asyncio.run(gateway.complete("Say hello"))

    assert text == "Hello world"
    assert llm.bound_tools == []
    assert [type(m) for m in llm.received[0]] == [HumanMessage]


def test_slow_model_times_out():
    llm = FakeToolChatModel(replies=[AIMessage(content="late")], delay=1.0)
    gateway = LangChainChatGateway(llm, timeout=0.01)

    with pytest.raises(ModelServiceError, match="did not respond within 0.01 seconds"):
        asyncio.run(gateway.complete("hi"))


def test_outcomes_without_call_id_correlate_by_name():
    llm = FakeToolChatModel(replies=[AIMessage(content="ok")])
    gateway = LangChainChatGateway(llm)
    outcome = ToolOutcome(call("get_docket", docketId="D"), collection([]))

    asyncio.run(gateway.send_tool_outcomes(ConversationToken.empty(), [outcome]))

    assert llm.received[0][0].tool_call_id == "get_docket"


def test_foreign_history_is_rejected_before_calling_model():
    llm = FakeToolChatModel(replies=[AIMessage(content="never")])
    gateway = LangChainChatGateway(llm)
    history = ConversationToken.from_list([{"role": "user", "parts": [{"text": "x"}]}])

    with pytest.raises(InvalidRequestError, match="not a valid conversation token"):
        asyncio.run(gateway.send_message(history, "hello"))
    assert llm.received == []
