"""Tests for match submission - validation, rating updates and match records."""

import pytest

from src.rating_engine.result_validator import ResultValidator
from src.scorekeeper import repository as repository_module
from src.scorekeeper.match_controller import MatchController, MatchValidationError


def _results(*pairs):
    return [{"player_name": name, "position": pos} for name, pos in pairs]


def _by_name(match):
    return {pr.player_name: pr for pr in match.player_results}


def _rating(repository, game, name):
    player = repository.get_player_by_name(name)
    return repository.get_player_rating(player.player_id, game.game_id)


def _fail_ratings_writes(monkeypatch):
    """Make every write of ratings.json raise, other collections still save."""
    real_write = repository_module.atomic_write_json

    def write(data, path):
        if path.name == "ratings.json":
            raise OSError("disk full")
        real_write(data, path)

    monkeypatch.setattr(repository_module, "atomic_write_json", write)


# ── Successful submissions ───────────────────────────────────────────


class TestSubmitMatch:
    def test_two_player_match(self, controller, repository, game):
        match = controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))

        results = _by_name(match)
        assert results["Alice"].previous_rating == 1500
        assert results["Alice"].new_rating == 1516
        assert results["Alice"].rating_change == 16
        assert results["Bob"].new_rating == 1484
        assert results["Bob"].rating_change == -16

        assert _rating(repository, game, "Alice").rating == 1516
        assert _rating(repository, game, "Bob").rating == 1484

    def test_match_record_stored(self, controller, repository, game):
        match = controller.submit_match(
            game.game_id, _results(("Alice", 1), ("Bob", 2)), notes="  Close one  "
        )
        stored = repository.get_matches_by_game(game.game_id)
        assert stored == [match]
        assert match.game_name == "Catan"
        assert match.notes == "Close one"

    def test_blank_notes_become_none(self, controller, game):
        match = controller.submit_match(
            game.game_id, _results(("Alice", 1), ("Bob", 2)), notes="   "
        )
        assert match.notes is None

    def test_creates_players_once(self, controller, repository, game):
        controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))
        controller.submit_match(game.game_id, _results(("alice", 2), ("BOB", 1)))
        names = sorted(p.name for p in repository.get_players())
        assert names == ["Alice", "Bob"]

    def test_second_match_uses_stored_ratings(self, controller, game):
        controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))
        match = controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))
        results = _by_name(match)
        assert results["Alice"].previous_rating == 1516
        assert results["Bob"].previous_rating == 1484
        # Favourite wins: smaller gain than the first match
        assert 0 < results["Alice"].rating_change < 16

    def test_win_loss_draw_counters(self, controller, repository, game):
        controller.submit_match(
            game.game_id, _results(("Alice", 1), ("Bob", 1), ("Carol", 3))
        )
        alice = _rating(repository, game, "Alice")
        carol = _rating(repository, game, "Carol")
        assert (alice.wins, alice.losses, alice.draws) == (1, 0, 1)
        assert (carol.wins, carol.losses, carol.draws) == (0, 2, 0)
        assert alice.games_played == 1

    def test_counters_accumulate(self, controller, repository, game):
        controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))
        controller.submit_match(game.game_id, _results(("Alice", 2), ("Bob", 1)))
        alice = _rating(repository, game, "Alice")
        assert alice.games_played == 2
        assert (alice.wins, alice.losses, alice.draws) == (1, 1, 0)

    def test_uses_game_default_rating(self, registry, controller):
        game = registry.create_game("Go", k_factor=20, default_rating=1200)
        match = controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))
        results = _by_name(match)
        assert results["Alice"].previous_rating == 1200
        assert results["Alice"].new_rating == 1210

    def test_ratings_are_per_game(self, registry, controller, repository, game):
        chess = registry.create_game("Chess")
        controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))
        match = controller.submit_match(chess.game_id, _results(("Alice", 2), ("Bob", 1)))
        assert _by_name(match)["Alice"].previous_rating == 1500
        assert _rating(repository, game, "Alice").rating == 1516
        assert _rating(repository, chess, "Alice").rating == 1484

    def test_results_follow_submission_order(self, controller, game):
        match = controller.submit_match(
            game.game_id, _results(("Carol", 3), ("Alice", 1), ("Bob", 2))
        )
        assert [pr.player_name for pr in match.player_results] == ["Carol", "Alice", "Bob"]


# ── Rejected submissions ─────────────────────────────────────────────


class TestRejectedSubmissions:
    def test_invalid_ranking_reports_all_errors(self, controller, repository, game):
        with pytest.raises(MatchValidationError) as exc_info:
            controller.submit_match(game.game_id, _results(("Alice", 0), ("Bob", 1), ("Carol", 2)))
        assert ResultValidator.START_POSITION_ERROR in exc_info.value.errors
        assert ResultValidator.POSITION_RANGE_ERROR in exc_info.value.errors
        assert repository.get_matches() == []
        assert repository.get_players() == []

    def test_invalid_player_name(self, controller, repository, game):
        with pytest.raises(MatchValidationError, match="Invalid player name"):
            controller.submit_match(game.game_id, _results(("Alice", 1), ("B!", 2)))
        assert repository.get_players() == []

    def test_unknown_game(self, controller):
        with pytest.raises(MatchValidationError, match="not found"):
            controller.submit_match("ghost", _results(("Alice", 1), ("Bob", 2)))

    def test_failed_ratings_write_leaves_store_unchanged(
        self, controller, repository, game, monkeypatch
    ):
        _fail_ratings_writes(monkeypatch)

        with pytest.raises(OSError):
            controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))

        assert repository.get_ratings() == []
        assert repository.get_matches() == []

    def test_failed_ratings_write_keeps_previous_ratings(
        self, controller, repository, game, monkeypatch
    ):
        controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))
        ratings_before = repository.get_ratings()
        matches_before = repository.get_matches()

        _fail_ratings_writes(monkeypatch)
        with pytest.raises(OSError):
            controller.submit_match(
                game.game_id, _results(("Alice", 2), ("Bob", 1), ("Carol", 3))
            )

        assert repository.get_ratings() == ratings_before
        assert repository.get_matches() == matches_before

    def test_error_message_joins_errors(self):
        err = MatchValidationError(["one", "two"])
        assert str(err) == "one; two"
        assert err.errors == ["one", "two"]


# ── History ──────────────────────────────────────────────────────────


class TestMatchHistory:
    def test_newest_first(self, controller, repository, game):
        first = controller.submit_match(game.game_id, _results(("Alice", 1), ("Bob", 2)))
        second = controller.submit_match(game.game_id, _results(("Alice", 2), ("Bob", 1)))
        history = MatchController(repository).get_match_history(game.game_id)
        assert [m.match_id for m in history] == [second.match_id, first.match_id]

    def test_empty_history(self, controller, game):
        assert controller.get_match_history(game.game_id) == []
