from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from fakes import (
    FakeFactory,
    FakeToolChatModel,
    RecordingClient,
    ScriptedGateway,
    StubExecutor,
    call,
    collection,
)
from regassist.adapters.rest.app import create_app
from regassist.domain.exceptions import UpstreamRateLimitedError
from regassist.domain.models import ResultKind
from regassist.infrastructure.config import Settings
from regassist.infrastructure.llm.chat_gateway import LangChainChatGateway


def _client(factory: FakeFactory) -> TestClient:
    return TestClient(create_app(factory=factory))


def test_health():
    with _client(FakeFactory()) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_chat_returns_original_wire_shape():
    gateway = ScriptedGateway(turns=[
        ("", [call("search_documents", "c1", searchTerm="PFAS")]),
        ("Here are 2 documents.", []),
    ])
    executor = StubExecutor(lambda inv: collection(["EPA-1", "EPA-2"], has_next=True, total=30))

    with _client(FakeFactory(gateway, executor)) as client:
        response = client.post("/api/chat", json={"message": "PFAS", "history": []})

    assert response.status_code == 200
    body = response.json()
    assert body["response"] == "Here are 2 documents."
    assert body["results"]["type"] == "documents"
    assert [d["id"] for d in body["results"]["data"]["data"]] == ["EPA-1", "EPA-2"]
    assert body["pagination"] == {
        "hasMore": True, "page": 1, "totalElements": 30,
        "toolName": "search_documents", "toolInput": {"searchTerm": "PFAS"},
    }
    assert isinstance(body["history"], list) and body["history"]


def test_chat_requires_message():
    with _client(FakeFactory()) as client:
        response = client.post("/api/chat", json={"history": []})
    assert response.status_code == 400
    assert response.json() == {"error": "message is required"}


def test_malformed_body_is_a_bad_request():
    with _client(FakeFactory()) as client:
        response = client.post("/api/chat", json={"message": "hi", "history": "not a list"})
    assert response.status_code == 400
    assert "history" in response.json()["error"]


def test_chat_model_failure_is_a_classified_500():
    gateway = ScriptedGateway(turns=[RuntimeError("API_KEY_INVALID")])
    with _client(FakeFactory(gateway)) as client:
        response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json()["error"].startswith("Invalid or missing AI provider API key.")


def test_load_more():
    executor = StubExecutor(lambda inv: collection(["C-6"], page=2, total=6, kind=ResultKind.COMMENTS))
    with _client(FakeFactory(executor=executor)) as client:
        response = client.post("/api/load-more", json={
            "toolName": "search_comments", "toolInput": {"searchTerm": "noise"},
        })

    body = response.json()
    assert response.status_code == 200
    assert body["results"]["type"] == "comments"
    assert body["pagination"]["toolInput"] == {"searchTerm": "noise", "page": 2}
    assert body["pagination"]["hasMore"] is False


def test_load_more_requires_fields():
    with _client(FakeFactory()) as client:
        response = client.post("/api/load-more", json={"toolName": "search_documents"})
    assert response.status_code == 400
    assert response.json() == {"error": "toolName and toolInput are required"}


def test_profile_briefing():
    gateway = ScriptedGateway(completions=['["organic labeling"]', "**Your Next Steps**"])
    executor = StubExecutor(lambda inv: collection(["USDA-1"]))

    with _client(FakeFactory(gateway, executor)) as client:
        response = client.post("/api/profile-briefing", json={"description": "organic farm"})

    assert response.status_code == 200
    assert response.json()["briefing"] == "**Your Next Steps**"
    assert [i["id"] for i in response.json()["items"]] == ["USDA-1"]


def test_profile_briefing_requires_description():
    with _client(FakeFactory()) as client:
        response = client.post("/api/profile-briefing", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "description is required"}


def test_summarize_and_synthesize():
    gateway = ScriptedGateway(completions=["summary text", "synthesis text"])
    item = {"id": "EPA-1", "attributes": {"title": "PFAS"}}

    with _client(FakeFactory(gateway)) as client:
        summary = client.post("/api/summarize", json={"item": item, "resultType": "agencies"})
        synthesis = client.post("/api/synthesize", json={
            "items": [item], "resultType": "documents", "originalQuery": "PFAS",
        })

    assert summary.json() == {"summary": "summary text"}
    assert synthesis.json() == {"synthesis": "synthesis text"}


def test_summarize_requires_item():
    with _client(FakeFactory()) as client:
        response = client.post("/api/summarize", json={"resultType": "documents"})
    assert response.status_code == 400
    assert response.json() == {"error": "item is required"}


def test_document_qa_returns_history():
    gateway = ScriptedGateway(turns=[("It closes in March.", [])])
    with _client(FakeFactory(gateway)) as client:
        response = client.post("/api/document-qa", json={
            "question": "When?", "item": {"id": "FAA-1"}, "qaHistory": [],
        })

    assert response.json()["answer"] == "It closes in March."
    assert len(response.json()["qaHistory"]) == 2


def test_draft_comment():
    gateway = ScriptedGateway(completions=["Dear agency"])
    with _client(FakeFactory(gateway)) as client:
        ok = client.post("/api/draft-comment", json={
            "document": {"id": "FAA-1", "attributes": {}},
            "position": "Support", "perspective": "Pilot",
        })
        missing = client.post("/api/draft-comment", json={"document": {"id": "FAA-1"}})

    assert ok.json() == {"comment": "Dear agency"}
    assert missing.status_code == 400


def test_open_for_comment_passes_query_params():
    client_stub = RecordingClient(payload={"data": [], "meta": {"totalElements": 0}})
    with _client(FakeFactory(client=client_stub)) as client:
        response = client.get("/api/open-for-comment", params={"agencyId": "EPA", "page": 3})

    assert response.status_code == 200
    assert response.json() == {"data": [], "meta": {"totalElements": 0}}
    path, params = client_stub.calls[0]
    assert path == "/documents"
    assert params["filter[agencyId]"] == "EPA"
    assert params["page[number]"] == 3
    assert "filter[searchTerm]" not in params


def test_open_for_comment_rate_limit_is_429():
    client_stub = RecordingClient(error=UpstreamRateLimitedError("Rate limit reached.", status_code=429))
    with _client(FakeFactory(client=client_stub)) as client:
        response = client.get("/api/open-for-comment")
    assert response.status_code == 429
    assert response.json() == {"error": "Rate limit reached."}


def test_status_reports_configured_keys():
    config = Settings(regulations_api_key="reg-key", llm_provider="openai")
    with _client(FakeFactory(config=config)) as client:
        response = client.get("/api/status")
    assert response.json() == {
        "regulationsApiKey": True, "llmApiKey": False, "llmProvider": "openai",
    }


def test_caller_owned_factory_is_not_closed():
    factory = FakeFactory()
    with _client(factory):
        pass
    assert factory.closed is False


FOREIGN_HISTORY = [{"role": "user", "parts": [{"text": "x"}]}]


def _real_gateway() -> LangChainChatGateway:
    return LangChainChatGateway(FakeToolChatModel(replies=[AIMessage(content="unused")]))


def test_chat_rejects_foreign_history():
    with _client(FakeFactory(_real_gateway())) as client:
        response = client.post("/api/chat", json={"message": "hi", "history": FOREIGN_HISTORY})
    assert response.status_code == 400
    assert response.json() == {"error": "history is not a valid conversation token"}


def test_document_qa_rejects_foreign_history():
    with _client(FakeFactory(_real_gateway())) as client:
        response = client.post("/api/document-qa", json={
            "question": "When?", "item": {"id": "FAA-1"}, "qaHistory": FOREIGN_HISTORY,
        })
    assert response.status_code == 400
    assert response.json() == {"error": "history is not a valid conversation token"}
