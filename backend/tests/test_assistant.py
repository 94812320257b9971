"""Tests for the Gemini prompt client and assistant flows, using httpx.MockTransport."""

import json

import httpx
import pytest

from app.core.errors import PromptServiceError
from app.core.firebase import Collections
from app.schemas.assistant import ChatbotInput, ChatbotOutput, SmartSuggestionsInput
from app.services.assistant import POPULAR_ROUTES, AssistantService, PromptClient
from app.services.assistant.flows import build_suggestions_prompt


def _gemini_reply(payload) -> dict:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _transport(payload, status_code: int = 200, seen: list = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=_gemini_reply(payload))

    return httpx.MockTransport(handler)


async def test_generate_parses_structured_output() -> None:
    seen = []
    client = PromptClient("test-key", transport=_transport({"reply": "Use Search Trains."}, seen=seen))

    result = await client.generate("hello", ChatbotOutput)

    assert result.reply == "Use Search Trains."
    body = json.loads(seen[0].content)
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert seen[0].url.params["key"] == "test-key"
    assert seen[0].url.path.endswith("gemini-1.5-flash:generateContent")


async def test_missing_api_key_is_a_prompt_error() -> None:
    with pytest.raises(PromptServiceError):
        await PromptClient(None).generate("hello", ChatbotOutput)


async def test_off_schema_output_is_a_prompt_error() -> None:
    client = PromptClient("test-key", transport=_transport({"answer": "wrong key"}))

    with pytest.raises(PromptServiceError):
        await client.generate("hello", ChatbotOutput)


async def test_non_json_output_is_a_prompt_error() -> None:
    client = PromptClient("test-key", transport=_transport("not json at all"))

    with pytest.raises(PromptServiceError):
        await client.generate("hello", ChatbotOutput)


async def test_http_error_status_is_a_prompt_error() -> None:
    client = PromptClient("test-key", transport=_transport({}, status_code=500))

    with pytest.raises(PromptServiceError):
        await client.generate("hello", ChatbotOutput)


def test_suggestions_prompt_lists_routes() -> None:
    prompt = build_suggestions_prompt(SmartSuggestionsInput(
        user_id="user-1",
        origin="New Delhi (NDLS)",
        destination="Jaipur Jn (JP)",
        date="2026-11-02",
        popular_routes=POPULAR_ROUTES,
    ))

    assert "from New Delhi (NDLS) to Jaipur Jn (JP) on 2026-11-02" in prompt
    assert "- From Chennai Egmore (MS) to Bengaluru Cantt (BNC)" in prompt
    assert "past routes:\n- None" in prompt


async def test_chat_stores_the_exchange(db, booking_store) -> None:
    client = PromptClient("test-key", transport=_transport({"reply": "Happy to help."}))
    assistant = AssistantService(client, booking_store, db)

    result = await assistant.chat(ChatbotInput(message="How do I cancel?"), user_id="user-1", session_id="chat-1")

    assert result.reply == "Happy to help."
    stored = [s.to_dict() for s in db.collection(Collections.CHAT_MESSAGES).stream()]
    assert stored[0]["session_id"] == "chat-1"
    assert stored[0]["bot_reply"] == "Happy to help."


async def test_suggest_returns_validated_suggestions(db, booking_store) -> None:
    reply = {"suggestions": [
        {"origin": "New Delhi (NDLS)", "destination": "Jaipur Jn (JP)", "date": "2026-11-02", "reason": "Fastest"},
    ]}
    assistant = AssistantService(PromptClient("test-key", transport=_transport(reply)), booking_store, db)

    result = await assistant.suggest(SmartSuggestionsInput(
        user_id="user-1", origin="New Delhi (NDLS)", destination="Jaipur Jn (JP)", date="2026-11-02",
    ))

    assert result.suggestions[0].reason == "Fastest"


async def test_blocked_reply_without_parts_is_a_prompt_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": [{"content": {"parts": []}, "finishReason": "SAFETY"}]})

    client = PromptClient("test-key", transport=httpx.MockTransport(handler))

    with pytest.raises(PromptServiceError):
        await client.generate("hello", ChatbotOutput)
