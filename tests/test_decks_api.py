"""
Tests for deck and card endpoints.
"""

API = "/api/v1"


class TestDecks:

    def test_create_and_get_deck(self, client, auth_headers):
        headers = auth_headers()
        resp = client.post(
            f"{API}/decks",
            json={"name": "  Spanish  ", "description": "   "},
            headers=headers,
        )

        assert resp.status_code == 201
        deck = resp.json()
        assert deck["name"] == "Spanish"
        assert deck["description"] is None
        assert deck["card_count"] == 0

        resp = client.get(f"{API}/decks/{deck['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["cards"] == []

    def test_blank_name_rejected(self, client, auth_headers):
        resp = client.post(f"{API}/decks", json={"name": "   "}, headers=auth_headers())
        assert resp.status_code == 422

    def test_free_plan_deck_limit(self, client, auth_headers):
        headers = auth_headers("free-user")
        for i in range(3):
            resp = client.post(f"{API}/decks", json={"name": f"Deck {i}"}, headers=headers)
            assert resp.status_code == 201

        resp = client.post(f"{API}/decks", json={"name": "One too many"}, headers=headers)
        assert resp.status_code == 403
        assert resp.json()["code"] == "DECK_LIMIT_REACHED"

    def test_unlimited_decks_feature(self, client, auth_headers):
        headers = auth_headers("pro-user", features=["unlimited_decks"])
        for i in range(5):
            resp = client.post(f"{API}/decks", json={"name": f"Deck {i}"}, headers=headers)
            assert resp.status_code == 201

    def test_list_only_own_decks_newest_first(self, client, auth_headers, make_deck):
        first = make_deck(name="First", cards=[("q", "a")])
        second = make_deck(name="Second")
        make_deck(name="Theirs", user_id="other")

        resp = client.get(f"{API}/decks", headers=auth_headers())
        data = resp.json()

        assert data["total"] == 2
        assert [d["id"] for d in data["decks"]] == [second, first]
        assert data["decks"][1]["card_count"] == 1

    def test_update_deck(self, client, auth_headers, make_deck):
        deck_id = make_deck(name="Old", description="old")
        resp = client.patch(
            f"{API}/decks/{deck_id}",
            json={"name": "New", "description": "Learning French"},
            headers=auth_headers(),
        )

        assert resp.status_code == 200
        assert resp.json()["name"] == "New"
        assert resp.json()["description"] == "Learning French"

    def test_cannot_touch_other_users_deck(self, client, auth_headers, make_deck):
        deck_id = make_deck(user_id="owner")
        headers = auth_headers("intruder")

        assert client.get(f"{API}/decks/{deck_id}", headers=headers).status_code == 403
        assert client.patch(
            f"{API}/decks/{deck_id}", json={"name": "x"}, headers=headers
        ).status_code == 403
        assert client.delete(f"{API}/decks/{deck_id}", headers=headers).status_code == 403

    def test_delete_deck_removes_cards(self, client, auth_headers, make_deck):
        deck_id = make_deck(cards=[("q", "a")])
        headers = auth_headers()

        assert client.delete(f"{API}/decks/{deck_id}", headers=headers).status_code == 204
        resp = client.get(f"{API}/decks/{deck_id}", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == "DECK_NOT_FOUND"

    def test_requires_token(self, client):
        assert client.get(f"{API}/decks").status_code == 401
        resp = client.get(f"{API}/decks", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401


class TestCards:

    def test_cards_listed_most_recently_updated_first(self, client, auth_headers, make_deck):
        deck_id = make_deck(cards=[("one", "1"), ("two", "2"), ("three", "3")])
        headers = auth_headers()

        cards = client.get(f"{API}/decks/{deck_id}", headers=headers).json()["cards"]
        assert [c["front"] for c in cards] == ["three", "two", "one"]

        client.patch(
            f"{API}/decks/{deck_id}/cards/{cards[-1]['id']}",
            json={"front": "one (edited)", "back": "1"},
            headers=headers,
        )
        cards = client.get(f"{API}/decks/{deck_id}", headers=headers).json()["cards"]
        assert cards[0]["front"] == "one (edited)"

    def test_card_sides_are_trimmed_and_required(self, client, auth_headers, make_deck):
        deck_id = make_deck()
        headers = auth_headers()

        resp = client.post(
            f"{API}/decks/{deck_id}/cards",
            json={"front": "  Hello ", "back": " Hola  "},
            headers=headers,
        )
        assert resp.status_code == 201
        assert (resp.json()["front"], resp.json()["back"]) == ("Hello", "Hola")

        resp = client.post(
            f"{API}/decks/{deck_id}/cards",
            json={"front": "Hello", "back": "   "},
            headers=headers,
        )
        assert resp.status_code == 422

    def test_card_must_belong_to_deck(self, client, auth_headers, make_deck):
        deck_a = make_deck(name="A", cards=[("q", "a")])
        deck_b = make_deck(name="B")
        headers = auth_headers()
        card_id = client.get(f"{API}/decks/{deck_a}", headers=headers).json()["cards"][0]["id"]

        resp = client.delete(f"{API}/decks/{deck_b}/cards/{card_id}", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == "CARD_NOT_FOUND"

    def test_cannot_add_card_to_other_users_deck(self, client, auth_headers, make_deck):
        deck_id = make_deck(user_id="owner")
        resp = client.post(
            f"{API}/decks/{deck_id}/cards",
            json={"front": "q", "back": "a"},
            headers=auth_headers("intruder"),
        )
        assert resp.status_code == 403

    def test_delete_card(self, client, auth_headers, make_deck):
        deck_id = make_deck(cards=[("q", "a")])
        headers = auth_headers()
        card_id = client.get(f"{API}/decks/{deck_id}", headers=headers).json()["cards"][0]["id"]

        assert client.delete(f"{API}/decks/{deck_id}/cards/{card_id}", headers=headers).status_code == 204
        assert client.get(f"{API}/decks/{deck_id}", headers=headers).json()["cards"] == []
