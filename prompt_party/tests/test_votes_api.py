"""
Tests for voting: casting, replacing, status and closing.
"""

import pytest

PLAYERS = ("host", "p2", "p3")


@pytest.fixture
def voting_game(driver):
    """A three-player Prompt Anything game in its voting phase.

    Returns a mapping of player id to that player's image id.
    """
    driver.started(players=PLAYERS)
    for pid in PLAYERS:
        resp = driver.generate("ROOM1", pid, prompt=f"sketch by {pid}")
        assert resp.status_code == 200, resp.get_json()
    snapshot = driver.state("ROOM1").get_json()
    assert snapshot["phase"] == "VOTING"
    return {img["playerId"]: img["id"] for img in snapshot["images"]}


def _scores(snapshot):
    return {p["id"]: p["score"] for p in snapshot["players"]}


class TestCastVote:
    """Tests for POST /api/games/<room>/votes."""

    def test_vote_is_recorded(self, driver, voting_game):
        resp = driver.vote("ROOM1", "host", voting_game["p2"])

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["phase"] == "VOTING"
        image = next(img for img in data["images"] if img["id"] == voting_game["p2"])
        assert [v["voterId"] for v in image["votes"]] == ["host"]

    def test_revote_replaces_previous_vote(self, driver, voting_game):
        driver.vote("ROOM1", "host", voting_game["p2"])
        data = driver.vote("ROOM1", "host", voting_game["p3"]).get_json()

        votes = [v for img in data["images"] for v in img["votes"]]
        assert len(votes) == 1
        assert votes[0]["imageId"] == voting_game["p3"]

    def test_last_vote_closes_voting_and_scores(self, driver, voting_game):
        driver.vote("ROOM1", "host", voting_game["p2"])
        driver.vote("ROOM1", "p2", voting_game["p3"])
        data = driver.vote("ROOM1", "p3", voting_game["p2"]).get_json()

        assert data["phase"] == "RESULTS"
        assert _scores(data) == {"host": 0, "p2": 2, "p3": 1}

    def test_missing_ids(self, client, voting_game):
        resp = client.post("/api/games/ROOM1/votes", json={"voterId": "host"})

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Image ID and voter ID are required"

    def test_non_member_voter(self, driver, voting_game):
        resp = driver.vote("ROOM1", "stranger", voting_game["p2"])

        assert resp.status_code == 403
        assert resp.get_json()["error"] == "Voter not in game"

    def test_unknown_image(self, driver, voting_game):
        resp = driver.vote("ROOM1", "host", 9999)

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Image not found in this round"

    def test_vote_outside_voting_phase(self, driver):
        driver.started(players=("host", "p2"))
        driver.submit("ROOM1", "p2")
        image_id = driver.state("ROOM1").get_json()["images"][0]["id"]
        resp = driver.vote("ROOM1", "host", image_id)

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Voting is not open"

    def test_vote_unknown_game(self, driver):
        assert driver.vote("NOPE", "host", 1).status_code == 404


class TestVotingStatus:
    """Tests for GET /api/games/<room>/votes/status."""

    def test_status_tracks_voter(self, client, driver, voting_game):
        driver.vote("ROOM1", "host", voting_game["p2"])

        data = client.get("/api/games/ROOM1/votes/status?voterId=host").get_json()
        assert data["hasVoted"] is True
        assert data["allPlayersVoted"] is False
        assert 0 < data["timeRemaining"] <= 30
        assert data["shouldEndRound"] is False

        data = client.get("/api/games/ROOM1/votes/status?voterId=p2").get_json()
        assert data["hasVoted"] is False

    def test_expired_voting_closes(self, client, driver, voting_game, rewind_clock):
        driver.vote("ROOM1", "host", voting_game["p2"])
        rewind_clock("ROOM1", 31)
        data = client.get("/api/games/ROOM1/votes/status?voterId=host").get_json()

        assert data["timeRemaining"] == 0
        assert data["shouldEndRound"] is True
        snapshot = driver.state("ROOM1").get_json()
        assert snapshot["phase"] == "RESULTS"
        assert _scores(snapshot)["p2"] == 1


class TestEndVoting:
    """Tests for POST /api/games/<room>/end-voting."""

    def test_end_voting_tallies_once(self, client, driver, voting_game):
        driver.vote("ROOM1", "host", voting_game["p2"])
        driver.vote("ROOM1", "p3", voting_game["p2"])

        first = client.post("/api/games/ROOM1/end-voting").get_json()
        second = client.post("/api/games/ROOM1/end-voting").get_json()

        assert first["phase"] == second["phase"] == "RESULTS"
        assert _scores(first) == _scores(second) == {"host": 0, "p2": 2, "p3": 0}

    def test_end_voting_outside_voting_is_noop(self, client, driver):
        driver.started(players=("host", "p2"))
        resp = client.post("/api/games/ROOM1/end-voting")

        assert resp.status_code == 200
        assert resp.get_json()["phase"] == "PROMPT"
