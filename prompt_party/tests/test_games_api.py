"""
Tests for game creation, joining, starting and fetching.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models.game import Game
from ..models.player import Player
from ..models.player_game import PlayerGame
from ..services import game_service


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok"}


class TestCreateGame:
    """Tests for POST /api/games."""

    def test_create_returns_lobby_snapshot(self, driver):
        resp = driver.create(room="ABCD", host="alice", name="Alice")

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["roomId"] == "ABCD"
        assert data["phase"] == "LOBBY"
        assert data["gameMode"] == "PROMPT_ANYTHING"
        assert data["currentRound"] == 0
        assert data["maxRounds"] == 3
        assert data["hostId"] == "alice"
        assert data["isComplete"] is False
        assert data["players"] == [{
            "id": "alice",
            "name": "Alice",
            "email": None,
            "isHost": True,
            "score": 0,
            "joinOrder": 0,
        }]

    def test_create_generates_room_and_guest_id(self, client):
        resp = client.post("/api/games", json={"playerName": "Guest"})

        assert resp.status_code == 200
        data = resp.get_json()
        assert len(data["roomId"]) == 6
        assert data["hostId"].startswith("guest-")

    def test_create_promptophone(self, driver):
        resp = driver.create(room="PHONE", mode="promptophone")
        assert resp.get_json()["gameMode"] == "PROMPTOPHONE"

    def test_missing_player_name(self, client):
        resp = client.post("/api/games", json={"roomId": "X"})

        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Player name is required", "code": "VALIDATION_ERROR"}

    def test_unknown_game_mode(self, driver):
        resp = driver.create(mode="CHARADES")
        assert resp.status_code == 400

    def test_invalid_max_rounds(self, driver):
        assert driver.create(room="R1", max_rounds=0).status_code == 400
        assert driver.create(room="R2", max_rounds="lots").status_code == 400

    def test_room_taken(self, driver):
        driver.create(room="TAKEN")
        resp = driver.create(room="TAKEN", host="other")

        assert resp.status_code == 400
        assert resp.get_json()["code"] == "ROOM_TAKEN"

    def test_failed_create_leaves_nothing_behind(self, driver):
        driver.create(room="TAKEN")
        driver.create(room="TAKEN", host="other", name="Other")

        assert db.session.execute(db.select(db.func.count(Game.id))).scalar_one() == 1


class TestGetGame:
    def test_unknown_room(self, driver):
        resp = driver.state("NOPE")

        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Game not found", "code": "NOT_FOUND"}

    def test_unknown_route(self, client):
        resp = client.get("/api/nowhere")
        assert resp.status_code == 404
        assert resp.get_json()["code"] == "NOT_FOUND"


class TestAddPlayer:
    """Tests for POST /api/games/<room>/players."""

    def test_join_appends_in_order(self, driver):
        snapshot = driver.lobby(players=("host", "p2", "p3"))

        assert [p["id"] for p in snapshot["players"]] == ["host", "p2", "p3"]
        assert [p["joinOrder"] for p in snapshot["players"]] == [0, 1, 2]
        assert [p["isHost"] for p in snapshot["players"]] == [True, False, False]

    def test_rejoin_is_idempotent(self, driver):
        driver.lobby(players=("host", "p2"))
        resp = driver.join("ROOM1", "p2")

        assert resp.status_code == 200
        assert len(resp.get_json()["players"]) == 2

    def test_name_required(self, client, driver):
        driver.create()
        resp = client.post("/api/games/ROOM1/players", json={"playerId": "p2"})

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Player name is required"

    def test_name_too_long(self, driver):
        driver.create()
        resp = driver.join("ROOM1", "p2", name="x" * 51)

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Player name must be 50 characters or fewer"

    def test_join_retries_when_order_is_taken(self, monkeypatch, driver):
        driver.lobby(players=("host", "p2"), mode="PROMPTOPHONE")
        real_next = game_service._next_join_order
        calls = []

        def stale_next(game):
            calls.append(game.id)
            # First read is stale: slot 1 already belongs to p2.
            return 1 if len(calls) == 1 else real_next(game)

        monkeypatch.setattr(game_service, "_next_join_order", stale_next)
        resp = driver.join("ROOM1", "p3")

        assert resp.status_code == 200
        assert len(calls) == 2
        players = resp.get_json()["players"]
        assert [p["id"] for p in players] == ["host", "p2", "p3"]
        assert [p["joinOrder"] for p in players] == [0, 1, 2]

        chains = driver.start("ROOM1", "host").get_json()["promptChains"]
        assert sorted(c["position"] for c in chains) == [0, 1, 2]

    def test_join_order_unique_per_game(self, driver):
        driver.lobby(players=("host", "p2"))
        game = db.session.execute(db.select(Game).where(Game.room_id == "ROOM1")).scalar_one()
        db.session.add(Player(id="p4", name="P4"))
        db.session.add(PlayerGame(player_id="p4", game_id=game.id, join_order=1))

        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

    def test_join_after_start_rejected(self, driver):
        driver.started(players=("host", "p2"))
        resp = driver.join("ROOM1", "late")

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Game has already started"

    def test_join_unknown_room(self, driver):
        assert driver.join("NOPE", "p2").status_code == 404


class TestStartGame:
    """Tests for POST /api/games/<room>/start."""

    def test_host_starts_prompt_anything(self, driver):
        driver.lobby(players=("host", "p2"))
        resp = driver.start("ROOM1", "host")

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["phase"] == "PROMPT"
        assert data["currentRound"] == 1
        assert data["currentWord"]
        assert data["exclusionWords"]
        assert data["roundStartTime"] is not None
        assert data["promptChains"] == []
        assert data["assignments"] == []

    def test_non_host_cannot_start(self, driver):
        driver.lobby(players=("host", "p2"))
        resp = driver.start("ROOM1", "p2")

        assert resp.status_code == 403
        assert resp.get_json()["error"] == "Only the host can start the game"

    def test_cannot_start_twice(self, driver):
        driver.started(players=("host", "p2"))
        resp = driver.start("ROOM1", "host")

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Game has already started"

    def test_player_count_frozen(self, app, driver):
        driver.started(players=("host", "p2", "p3"), mode="PROMPTOPHONE")

        game = db.session.execute(db.select(Game).where(Game.room_id == "ROOM1")).scalar_one()
        assert game.player_count == 3
        assert game.round_ceiling == 3
