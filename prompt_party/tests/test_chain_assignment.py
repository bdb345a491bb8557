"""
Tests for Promptophone chain rotation and per-round targets.
"""

import pytest

from ..services.chain_service import chain_index_for


class TestChainIndex:
    """Tests for chain_index_for."""

    def test_round_one_is_own_chain(self):
        """Every player starts on the chain they originated."""
        assert [chain_index_for(i, 1, 4) for i in range(4)] == [0, 1, 2, 3]

    def test_rotation_wraps(self):
        """The last player wraps back to chain 0 in round 2."""
        assert chain_index_for(3, 2, 4) == 0
        assert chain_index_for(2, 4, 4) == 1

    @pytest.mark.parametrize("num_players", range(2, 9))
    def test_each_round_is_a_permutation(self, num_players):
        """No two players share a chain in the same round."""
        for current_round in range(1, num_players + 1):
            indices = {chain_index_for(i, current_round, num_players) for i in range(num_players)}
            assert indices == set(range(num_players))

    @pytest.mark.parametrize("num_players", range(2, 9))
    def test_every_player_touches_every_chain_once(self, num_players):
        """Over rounds 1..n each player visits each chain exactly once."""
        for player in range(num_players):
            visited = [chain_index_for(player, r, num_players) for r in range(1, num_players + 1)]
            assert sorted(visited) == list(range(num_players))

    def test_zero_players_rejected(self):
        with pytest.raises(ValueError):
            chain_index_for(0, 1, 0)


class TestChainsInGame:
    """Chain creation and targets through the HTTP API."""

    def test_start_creates_one_chain_per_player(self, driver):
        """Chains take the players' join order and distinct words."""
        snapshot = driver.started(mode="PROMPTOPHONE", players=("host", "p2", "p3"))

        chains = snapshot["promptChains"]
        assert [c["position"] for c in chains] == [0, 1, 2]
        assert [c["playerId"] for c in chains] == ["host", "p2", "p3"]
        assert len({c["originalWord"] for c in chains}) == 3
        assert snapshot["currentWord"] == chains[0]["originalWord"]
        assert snapshot["currentRound"] == 1

    def test_round_one_assignments_target_own_word(self, driver):
        snapshot = driver.started(mode="PROMPTOPHONE", players=("host", "p2"))

        by_player = {a["playerId"]: a for a in snapshot["assignments"]}
        words = {c["playerId"]: c["originalWord"] for c in snapshot["promptChains"]}
        assert by_player["host"]["target"] == words["host"]
        assert by_player["p2"]["target"] == words["p2"]
        assert not any(a["hasSubmitted"] for a in snapshot["assignments"])

    def test_round_two_targets_previous_image(self, driver):
        """After a full round, each player describes the image on their next chain."""
        driver.started(room="CHAIN", mode="PROMPTOPHONE", players=("host", "p2"))
        for pid in ("host", "p2"):
            assert driver.generate("CHAIN", pid, prompt=f"sketch by {pid}").status_code == 200

        snapshot = driver.state("CHAIN").get_json()
        assert snapshot["currentRound"] == 2
        assert snapshot["exclusionWords"] == []

        chain_images = {
            c["position"]: c["chain"][0]["imageUrl"] for c in snapshot["promptChains"]
        }
        by_player = {a["playerId"]: a for a in snapshot["assignments"]}
        # host (index 0) works on chain 1 in round 2, p2 on chain 0
        assert by_player["host"]["chainIndex"] == 1
        assert by_player["host"]["target"] == chain_images[1]
        assert by_player["p2"]["target"] == chain_images[0]
