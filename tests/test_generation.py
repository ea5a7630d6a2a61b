"""
Tests for AI card generation.
"""

import json

import httpx
import openai
import pytest

from flashstudy.core.exceptions import ExternalAPIError
from flashstudy.generation.prompts import CARDS_PER_GENERATION, build_prompt, is_language_learning
from flashstudy.generation.service import parse_generated_cards

API = "/api/v1"
PRO = ["ai_flashcard_generation", "unlimited_decks"]


def cards_json(n):
    return json.dumps({"cards": [{"front": f"Q{i}", "back": f"A{i}"} for i in range(n)]})


class TestPrompts:

    @pytest.mark.parametrize("topic, description", [
        ("Spanish", "Learning Spanish for travel"),
        ("Irish words", "Translate common phrases"),
        ("German", "Basic vocab"),
        ("Phrases", "English to French"),
    ])
    def test_language_decks_detected(self, topic, description):
        assert is_language_learning(topic, description)

    @pytest.mark.parametrize("topic, description", [
        ("World capitals", "Countries and their capitals"),
        ("Biology", None),
        ("Spanish history", "The Reconquista and the Golden Age"),
    ])
    def test_other_decks_not_language(self, topic, description):
        assert not is_language_learning(topic, description)

    def test_prompt_mentions_topic_and_context(self):
        prompt = build_prompt("Photosynthesis", "Plant biology basics")
        assert '"Photosynthesis". Context: Plant biology basics' in prompt
        assert f"Generate exactly {CARDS_PER_GENERATION} flashcards" in prompt
        assert "educational" in prompt

    def test_language_prompt_asks_for_bare_translations(self):
        prompt = build_prompt("Spanish", "learn spanish greetings")
        assert "direct translation" in prompt


class TestParseGeneratedCards:

    def test_drops_blank_entries_and_trims(self):
        content = json.dumps({"cards": [
            {"front": " Q1 ", "back": "A1"},
            {"front": "", "back": "A2"},
            {"front": "Q3"},
            "junk",
            {"front": "Q4", "back": " A4"},
        ]})
        cards = parse_generated_cards(content)
        assert [(c.front, c.back) for c in cards] == [("Q1", "A1"), ("Q4", "A4")]

    def test_invalid_json(self):
        with pytest.raises(ExternalAPIError):
            parse_generated_cards("not json")

    def test_empty_reply(self):
        with pytest.raises(ExternalAPIError):
            parse_generated_cards(None)

    def test_missing_cards_key(self):
        assert parse_generated_cards("{}") == []


class TestGenerateEndpoint:

    def test_requires_feature(self, client, auth_headers, make_deck):
        deck_id = make_deck(description="Capitals of Europe")
        resp = client.post(f"{API}/decks/{deck_id}/generate", json={}, headers=auth_headers())

        assert resp.status_code == 403
        assert resp.json()["code"] == "FEATURE_REQUIRED"

    def test_requires_description(self, client, auth_headers, make_deck, fake_openai):
        deck_id = make_deck()
        resp = client.post(f"{API}/decks/{deck_id}/generate", json={}, headers=auth_headers(features=PRO))

        assert resp.status_code == 400
        assert resp.json()["code"] == "DESCRIPTION_REQUIRED"
        assert fake_openai.completions.calls == []

    def test_generates_and_saves_cards(self, client, auth_headers, make_deck, fake_openai):
        deck_id = make_deck(name="Capitals", description="Capitals of Europe")
        fake_openai.completions.content = cards_json(20)
        headers = auth_headers(features=PRO)

        resp = client.post(f"{API}/decks/{deck_id}/generate", json={}, headers=headers)

        assert resp.status_code == 201
        assert resp.json()["cards_generated"] == 20
        deck = client.get(f"{API}/decks/{deck_id}", headers=headers).json()
        assert len(deck["cards"]) == 20

        call = fake_openai.completions.calls[0]
        assert call["response_format"] == {"type": "json_object"}
        assert "Capitals of Europe" in call["messages"][1]["content"]

    def test_request_overrides_topic(self, client, auth_headers, make_deck, fake_openai):
        deck_id = make_deck(name="Deck", description="Some context")
        fake_openai.completions.content = cards_json(1)

        client.post(
            f"{API}/decks/{deck_id}/generate",
            json={"topic": "Rivers"},
            headers=auth_headers(features=PRO),
        )
        assert '"Rivers"' in fake_openai.completions.calls[0]["messages"][1]["content"]

    def test_empty_generation(self, client, auth_headers, make_deck, fake_openai):
        deck_id = make_deck(description="Capitals of Europe")
        fake_openai.completions.content = '{"cards": []}'

        resp = client.post(f"{API}/decks/{deck_id}/generate", json={}, headers=auth_headers(features=PRO))
        assert resp.status_code == 502
        assert resp.json()["code"] == "GENERATION_EMPTY"

    def test_rate_limit_error_is_mapped(self, client, auth_headers, make_deck, fake_openai):
        deck_id = make_deck(description="Capitals of Europe")
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        fake_openai.completions.error = openai.RateLimitError(
            "Rate limit reached",
            response=httpx.Response(429, request=request),
            body=None,
        )

        resp = client.post(f"{API}/decks/{deck_id}/generate", json={}, headers=auth_headers(features=PRO))
        assert resp.status_code == 503
        assert resp.json() == {
            "error": "Too many requests. Please try again in a moment.",
            "code": "AI_SERVICE_ERROR",
        }

    def test_timeout_is_mapped(self, client, auth_headers, make_deck, fake_openai):
        deck_id = make_deck(description="Capitals of Europe")
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        fake_openai.completions.error = openai.APITimeoutError(request=request)

        resp = client.post(f"{API}/decks/{deck_id}/generate", json={}, headers=auth_headers(features=PRO))
        assert resp.status_code == 503
        assert resp.json()["error"] == "Request timed out. Please try again."

    def test_other_users_deck(self, client, auth_headers, make_deck):
        deck_id = make_deck(description="Capitals", user_id="owner")
        resp = client.post(
            f"{API}/decks/{deck_id}/generate",
            json={},
            headers=auth_headers("intruder", features=PRO),
        )
        assert resp.status_code == 403
