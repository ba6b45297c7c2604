"""
Unit tests for the generative-text API (/api/claude).
"""

from content_gateway.clients import prompts
from content_gateway.models.generative import MessagesResponse
from content_gateway.resilience.exceptions import RetriesExhausted, UpstreamTimeoutError


def test_complete_uses_cache_without_system_prompt(client, generative_client):
    generative_client.complete_cached.return_value = "42"

    response = client.post("/api/claude/complete", json={"prompt": "Meaning of life?"})

    assert response.status_code == 200
    assert response.json()["data"] == {"response": "42", "prompt": "Meaning of life?"}
    generative_client.complete_cached.assert_awaited_once_with("Meaning of life?")
    generative_client.complete.assert_not_awaited()


def test_complete_with_system_prompt(client, generative_client):
    generative_client.complete.return_value = "Yes."

    client.post("/api/claude/complete", json={"prompt": "Sure?", "system": "Be terse"})

    generative_client.complete.assert_awaited_once_with("Sure?", "Be terse")


def test_complete_blank_prompt(client, generative_client):
    response = client.post("/api/claude/complete", json={"prompt": "   "})

    assert response.status_code == 400
    assert response.json() == {"status": "error", "data": None, "message": "Prompt is required"}
    generative_client.complete_cached.assert_not_awaited()


def test_complete_missing_prompt(client):
    assert client.post("/api/claude/complete", json={}).status_code == 400


def test_chat(client, generative_client):
    generative_client.send_request.return_value = MessagesResponse(
        id="msg_1",
        content=[{"type": "text", "text": "Hi"}],
        model="test-model",
        stop_reason="end_turn",
    )

    response = client.post(
        "/api/claude/chat",
        json={
            "model": "test-model",
            "max_tokens": 50,
            "messages": [{"role": "user", "content": "Hello"}],
        },
    )

    assert response.status_code == 200
    assert response.json()["data"]["content"][0]["text"] == "Hi"
    sent = generative_client.send_request.await_args.args[0]
    assert sent.max_tokens == 50


def test_chat_invalid_request(client, generative_client):
    response = client.post("/api/claude/chat", json={"model": "m", "max_tokens": 0, "messages": []})

    assert response.status_code == 400
    assert response.json()["message"] == "Request validation failed"
    generative_client.send_request.assert_not_awaited()


def test_analyze(client, generative_client):
    generative_client.analyze_text.return_value = "Positive"

    response = client.post("/api/claude/analyze", json={"text": "Great!", "type": "sentiment"})

    assert response.json()["data"] == {
        "analysis": "Positive",
        "type": "sentiment",
        "originalText": "Great!",
    }
    generative_client.analyze_text.assert_awaited_once_with("Great!", "sentiment")


def test_analyze_blank_text(client):
    response = client.post("/api/claude/analyze", json={"text": ""})

    assert response.status_code == 400
    assert response.json()["message"] == "Text is required"


def test_generate_default_creativity(client, generative_client):
    generative_client.generate_content.return_value = "A poem"

    response = client.post("/api/claude/generate", json={"prompt": "roses", "type": "poem"})

    data = response.json()["data"]
    assert data["content"] == "A poem"
    assert data["creativity"] == prompts.DEFAULT_CREATIVITY
    generative_client.generate_content.assert_awaited_once_with("roses", "poem", None)


def test_generate_blank_prompt(client):
    assert client.post("/api/claude/generate", json={"prompt": ""}).status_code == 400


def test_conversation(client, generative_client):
    generative_client.conversation.return_value = "Fine, thanks"

    response = client.post(
        "/api/claude/conversation",
        json={
            "messages": [
                {"role": "user", "content": "Hi"},
                {"role": "assistant", "content": "Hello"},
                {"role": "user", "content": "How are you?"},
            ],
            "system": "Be friendly",
        },
    )

    assert response.json()["data"] == {"response": "Fine, thanks", "messageCount": "3"}
    messages, system = generative_client.conversation.await_args.args
    assert [m.content for m in messages] == ["Hi", "Hello", "How are you?"]
    assert system == "Be friendly"


def test_conversation_without_messages(client):
    response = client.post("/api/claude/conversation", json={"messages": []})

    assert response.status_code == 400
    assert response.json()["message"] == "Messages are required"


def test_conversation_blank_turn(client):
    response = client.post(
        "/api/claude/conversation", json={"messages": [{"role": "user", "content": " "}]}
    )

    assert response.status_code == 400


def test_upstream_exhaustion(client, generative_client):
    generative_client.complete_cached.side_effect = RetriesExhausted(
        UpstreamTimeoutError("generative_api did not respond"), attempts=4
    )

    response = client.post("/api/claude/complete", json={"prompt": "x"})

    assert response.status_code == 503
    assert response.json()["status"] == "error"


def test_single_timeout_maps_to_504(client, generative_client):
    generative_client.analyze_text.side_effect = UpstreamTimeoutError("slow")

    assert client.post("/api/claude/analyze", json={"text": "x"}).status_code == 504


def test_health(client, generative_client):
    generative_client.health_check.return_value = False

    body = client.get("/api/claude/health").json()

    assert body["status"] == "unhealthy"
    assert body["service"] == "generative-api"


def test_analysis_types(client):
    body = client.get("/api/claude/analysis-types").json()

    assert body["types"] == ["sentiment", "summary", "keywords", "language", "general"]
    assert set(body["description"]) == set(body["types"])


def test_content_types(client):
    body = client.get("/api/claude/content-types").json()

    assert body["types"] == ["story", "poem", "essay", "code", "general"]
    assert body["creativity"]["default"] == 0.9
