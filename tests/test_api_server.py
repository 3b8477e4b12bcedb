"""
Tests for server/api_server.py
"""

import pytest
from fastapi.testclient import TestClient

from smartshoot_app.server.api_server import create_api_app

ADMIN = {"X-Admin-Pin": "1234"}


@pytest.fixture
def client(manager):
    return TestClient(create_api_app(manager))


def _begin(client, round_id="round1"):
    client.post("/player", json={"name": "  Gita  "})
    client.post("/round", json={"round_id": round_id})
    return client.post("/start").json()


class TestPlayerFlow:
    def test_lists_rounds_and_categories(self, client):
        rounds = client.get("/rounds").json()
        assert [r["id"] for r in rounds] == ["round1", "round2"]
        assert rounds[0]["total_questions"] == 6
        assert rounds[0]["question_counts"]["C4"] == 0

        categories = client.get("/categories").json()
        assert categories[0] == {"id": "C1", "label": "Konsep Dasar"}

    def test_start_draws_tiles(self, client):
        state = _begin(client)
        assert state["state"] == "awaiting_selection"
        assert state["player"]["name"] == "Gita"
        assert state["question_count"] == 6
        assert all(tile["outcome"] is None for tile in state["tiles"])

    def test_selected_question_hides_answer_key(self, client):
        state = _begin(client)
        tile = state["tiles"][0]
        state = client.post(f"/questions/{tile['id']}/select").json()

        current = state["current_question"]
        assert current["id"] == tile["id"]
        assert "<p>" in current["prompt_html"]
        assert "correct_answer" not in current

    def test_answer_then_next(self, client):
        state = _begin(client)
        tile_id = state["tiles"][0]["id"]
        client.post(f"/questions/{tile_id}/select")

        result = client.post("/answer", json={"answer": True}).json()
        assert result["correct"] is True
        assert result["state"]["state"] == "feedback"
        assert result["state"]["player"]["score"] == 100

        state = client.post("/next").json()
        assert state["state"] == "awaiting_selection"
        assert state["tiles"][0]["outcome"] == "correct"

    def test_answer_without_question_is_ignored(self, client):
        _begin(client)
        result = client.post("/answer", json={"answer": True}).json()
        assert result["correct"] is None

    def test_full_game_lands_on_leaderboard(self, client):
        state = _begin(client)
        for tile in state["tiles"]:
            client.post(f"/questions/{tile['id']}/select")
            client.post("/skip")

        state = client.get("/state").json()
        assert state["game_complete"] is True
        assert state["player"]["wrong_answers"] == 6

        leaderboard = client.get("/leaderboard").json()
        assert leaderboard[0]["name"] == "Gita"
        assert leaderboard[0]["completed_at"] is not None

    def test_play_after_end_is_ignored(self, client):
        state = _begin(client)
        first, second = state["tiles"][0]["id"], state["tiles"][1]["id"]
        client.post(f"/questions/{first}/select")
        client.post("/answer", json={"answer": True})
        client.post("/end")

        state = client.post(f"/questions/{second}/select").json()
        assert state["current_question"] is None
        result = client.post("/answer", json={"answer": True}).json()
        assert result["correct"] is None
        assert result["state"]["state"] == "complete"
        assert result["state"]["player"]["score"] == 100
        assert [p["score"] for p in client.get("/leaderboard").json()] == [100]

    def test_round_leaderboard(self, client):
        for name, round_id in (("Gita", "round1"), ("Hadi", "round2"), ("Intan", "round1")):
            client.post("/player", json={"name": name})
            client.post("/round", json={"round_id": round_id})
            client.post("/start")
            client.post("/end")

        board = client.get("/leaderboard", params={"round_id": "round1"}).json()
        assert sorted(p["name"] for p in board) == ["Gita", "Intan"]
        assert len(client.get("/leaderboard", params={"round_id": "round1", "limit": 1}).json()) == 1
        assert len(client.get("/leaderboard").json()) == 3
        assert client.get("/leaderboard", params={"round_id": "round1", "limit": 0}).status_code == 422

    def test_reset(self, client):
        _begin(client)
        state = client.post("/reset").json()
        assert state["state"] == "idle"
        assert state["player"] is None


class TestAdminSurface:
    def test_requires_pin(self, client):
        assert client.post("/admin/login").status_code == 401
        assert client.post("/admin/login", headers={"X-Admin-Pin": "0000"}).status_code == 401
        assert client.post("/admin/login", headers=ADMIN).json() == {"ok": True}

    def test_create_and_delete_round(self, client):
        response = client.post(
            "/admin/rounds",
            json={"name": "Babak Final", "question_counts": {"C5": 2, "C6": 2}},
            headers=ADMIN,
        )
        assert response.status_code == 201
        assert response.json()["total_questions"] == 4

        created = next(r for r in client.get("/rounds").json() if r["name"] == "Babak Final")
        assert client.delete(f"/admin/rounds/{created['id']}", headers=ADMIN).status_code == 204
        assert client.delete(f"/admin/rounds/{created['id']}", headers=ADMIN).status_code == 404

    def test_round_validation(self, client):
        empty = client.post("/admin/rounds", json={"name": "Kosong", "question_counts": {}}, headers=ADMIN)
        assert empty.status_code == 422
        negative = client.post(
            "/admin/rounds", json={"name": "X", "question_counts": {"C1": -1}}, headers=ADMIN
        )
        assert negative.status_code == 422

    def test_create_question(self, client):
        response = client.post(
            "/admin/questions",
            json={
                "category": "C3",
                "type": "multiple_choice",
                "prompt": "Jurnal yang dibuat di akhir periode?",
                "options": ["Umum", "Penyesuaian", "Khusus", "Pembalik"],
                "correct_answer": "B",
            },
            headers=ADMIN,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["correct_answer"] == "B"
        assert body["points"] == 100

        questions = client.get("/admin/questions", headers=ADMIN).json()
        assert any(q["prompt"] == "Jurnal yang dibuat di akhir periode?" for q in questions)

    def test_invalid_question_is_rejected(self, client):
        response = client.post(
            "/admin/questions",
            json={"category": "C1", "type": "essay", "prompt": "Tanpa kunci"},
            headers=ADMIN,
        )
        assert response.status_code == 422

    def test_stats_and_clear(self, client):
        state = _begin(client)
        tile_id = state["tiles"][0]["id"]
        client.post(f"/questions/{tile_id}/select")
        client.post("/answer", json={"answer": True})
        client.post("/end")

        stats = client.get("/admin/stats", headers=ADMIN).json()
        assert stats == {"total_games": 1, "average_score": 100, "highest_score": 100, "top_player": "Gita"}

        assert client.delete("/admin/leaderboard", headers=ADMIN).status_code == 204
        assert client.get("/leaderboard").json() == []

    def test_update_pin(self, client):
        wrong = client.put("/admin/pin", json={"old_pin": "0000", "new_pin": "9999"}, headers=ADMIN)
        assert wrong.status_code == 403

        ok = client.put("/admin/pin", json={"old_pin": "1234", "new_pin": "9999"}, headers=ADMIN)
        assert ok.status_code == 200
        assert client.post("/admin/login", headers={"X-Admin-Pin": "9999"}).status_code == 200
        assert client.post("/admin/login", headers=ADMIN).status_code == 401

    def test_update_pin_rejects_short_pin(self, client):
        short = client.put("/admin/pin", json={"old_pin": "1234", "new_pin": "12"}, headers=ADMIN)
        assert short.status_code == 422
        assert client.post("/admin/login", headers=ADMIN).status_code == 200

    def test_import_and_export_question_bank(self, client):
        bank = "CATEGORY: C4\nTYPE: essay\nQ: Akun penyesuaian untuk beban dibayar di muka?\nANSWER: Beban\nTIMELIMIT: 0\n"
        response = client.post(
            "/admin/questions/import",
            content=bank.encode("utf-8"),
            headers={**ADMIN, "Content-Type": "text/plain"},
        )
        assert response.status_code == 201
        assert response.json()[0]["time_limit"] == 0

        exported = client.get("/admin/questions/export", headers=ADMIN)
        assert exported.status_code == 200
        assert exported.headers["content-type"].startswith("text/plain")
        assert "Akun penyesuaian untuk beban dibayar di muka?" in exported.text

    def test_import_rejects_invalid_bank(self, client):
        response = client.post(
            "/admin/questions/import",
            content=b"CATEGORY: C9\nTYPE: essay\nQ: x\nANSWER: y\n",
            headers={**ADMIN, "Content-Type": "text/plain"},
        )
        assert response.status_code == 422
        assert "CATEGORY" in response.json()["detail"]

    def test_import_requires_pin(self, client):
        assert client.post("/admin/questions/import", content=b"").status_code == 401
        assert client.get("/admin/questions/export").status_code == 401
