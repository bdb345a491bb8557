"""
Pytest fixtures for Prompt Party tests.
"""

from datetime import timedelta

import pytest

from .. import create_app
from ..extensions import db
from ..models.game import Game
from ..utils.clock import utcnow


class FakeImageGenerator:
    """Returns deterministic URLs and records every prompt it was given."""

    def __init__(self):
        self.prompts = []
        self.fail = False

    def generate(self, prompt: str) -> str:
        from ..services.image_generator import ImageGenerationError

        if self.fail:
            raise ImageGenerationError("generator offline")
        self.prompts.append(prompt)
        return f"https://images.test/{len(self.prompts)}.png"


@pytest.fixture
def image_generator():
    """A fake generator shared by the app and the test."""
    return FakeImageGenerator()


@pytest.fixture
def app(image_generator):
    """Create a testing app backed by an in-memory database."""
    app = create_app("testing", image_generator=image_generator)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


class GameDriver:
    """Thin wrapper around the HTTP API used to set up game scenarios."""

    def __init__(self, client):
        self.client = client

    def create(self, room="ROOM1", host="host", name=None, mode=None, max_rounds=None):
        body = {"roomId": room, "playerId": host, "playerName": name or host.title()}
        if mode:
            body["gameMode"] = mode
        if max_rounds is not None:
            body["maxRounds"] = max_rounds
        return self.client.post("/api/games", json=body)

    def join(self, room, player_id, name=None):
        return self.client.post(
            f"/api/games/{room}/players", json={"playerId": player_id, "name": name or player_id.title()}
        )

    def start(self, room, player_id="host"):
        return self.client.post(f"/api/games/{room}/start", json={"playerId": player_id})

    def submit(self, room, player_id, prompt="a quiet blue pond at dawn"):
        return self.client.post(f"/api/games/{room}/prompts", json={"playerId": player_id, "prompt": prompt})

    def auto_submit(self, room, player_id, prompt="half finished sketch"):
        return self.client.post(f"/api/games/{room}/auto-submit", json={"playerId": player_id, "prompt": prompt})

    def generate(self, room, player_id, prompt=None):
        body = {"playerId": player_id}
        if prompt is not None:
            body["prompt"] = prompt
        return self.client.post(f"/api/games/{room}/generate-image", json=body)

    def vote(self, room, voter_id, image_id):
        return self.client.post(f"/api/games/{room}/votes", json={"voterId": voter_id, "imageId": image_id})

    def state(self, room):
        return self.client.get(f"/api/games/{room}")

    def lobby(self, room="ROOM1", players=("host", "p2", "p3"), mode=None, max_rounds=None):
        """Create a game hosted by ``players[0]`` and join the rest."""
        resp = self.create(room=room, host=players[0], mode=mode, max_rounds=max_rounds)
        assert resp.status_code == 200, resp.get_json()
        for pid in players[1:]:
            resp = self.join(room, pid)
            assert resp.status_code == 200, resp.get_json()
        return resp.get_json()

    def started(self, room="ROOM1", players=("host", "p2", "p3"), mode=None, max_rounds=None):
        """Create, fill and start a game; return the snapshot."""
        self.lobby(room, players, mode, max_rounds)
        resp = self.start(room, players[0])
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()


@pytest.fixture
def driver(client):
    """Scenario helper bound to the test client."""
    return GameDriver(client)


@pytest.fixture
def rewind_clock():
    """Move a game's phase start into the past so its deadline has passed."""

    def _rewind(room_id: str, seconds: int) -> None:
        game = db.session.execute(db.select(Game).where(Game.room_id == room_id)).scalar_one()
        game.round_start_time = utcnow() - timedelta(seconds=seconds)
        db.session.commit()

    return _rewind
