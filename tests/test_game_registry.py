"""Tests for game registration and settings validation."""

import pytest


class TestCreateGame:
    def test_creates_and_persists(self, registry, repository):
        game = registry.create_game("Catan", k_factor=24, default_rating=1200)
        assert game.name == "Catan"
        assert game.k_factor == 24
        assert game.default_rating == 1200
        assert repository.get_game(game.game_id) == game

    def test_defaults(self, registry):
        game = registry.create_game("Chess")
        assert game.k_factor == 32
        assert game.default_rating == 1500
        assert game.description is None

    def test_trims_name_and_description(self, registry):
        game = registry.create_game("  Go  ", description="  Board game  ")
        assert game.name == "Go"
        assert game.description == "Board game"

    def test_blank_description_stored_as_none(self, registry):
        assert registry.create_game("Go", description="   ").description is None

    @pytest.mark.parametrize("name", ["", "   ", "A", "x" * 51])
    def test_rejects_bad_name(self, registry, name):
        with pytest.raises(ValueError, match="Game name"):
            registry.create_game(name)

    def test_rejects_long_description(self, registry):
        with pytest.raises(ValueError, match="Description"):
            registry.create_game("Chess", description="x" * 201)

    @pytest.mark.parametrize("k_factor", [0, 0.5, 101, -10])
    def test_rejects_bad_k_factor(self, registry, k_factor):
        with pytest.raises(ValueError, match="K-factor"):
            registry.create_game("Chess", k_factor=k_factor)

    @pytest.mark.parametrize("rating", [99, 3001, 0])
    def test_rejects_bad_default_rating(self, registry, rating):
        with pytest.raises(ValueError, match="Default rating"):
            registry.create_game("Chess", default_rating=rating)

    def test_bounds_are_inclusive(self, registry):
        game = registry.create_game("Edge", k_factor=100, default_rating=3000)
        assert game.k_factor == 100
        low = registry.create_game("Low", k_factor=1, default_rating=100)
        assert low.default_rating == 100

    def test_nothing_stored_on_failure(self, registry, repository):
        with pytest.raises(ValueError):
            registry.create_game("Chess", k_factor=500)
        assert repository.get_games() == []


class TestUpdateGame:
    def test_updates_fields(self, registry, game):
        updated = registry.update_game(game.game_id, k_factor=16, name=" Catan+ ")
        assert updated.k_factor == 16
        assert updated.name == "Catan+"

    def test_validates_updates(self, registry, game):
        with pytest.raises(ValueError):
            registry.update_game(game.game_id, default_rating=50)
        assert registry.find_game(game.game_id).default_rating == 1500

    def test_missing_game(self, registry):
        assert registry.update_game("nope", k_factor=16) is None


class TestLookupAndSummary:
    def test_find_by_id(self, registry, game):
        assert registry.find_game(game.game_id) == game

    def test_find_by_name_case_insensitive(self, registry, game):
        assert registry.find_game("catan") == game

    def test_find_missing(self, registry, game):
        assert registry.find_game("Chess") is None

    def test_list_games(self, registry, game):
        other = registry.create_game("Chess")
        assert registry.list_games() == [game, other]

    def test_summary_counts(self, registry, controller, game):
        controller.submit_match(
            game.game_id,
            [
                {"player_name": "Alice", "position": 1},
                {"player_name": "Bob", "position": 2},
            ],
        )
        assert registry.get_game_summary(game.game_id) == {"matches": 1, "players": 2}

    def test_delete(self, registry, game):
        assert registry.delete_game(game.game_id) is True
        assert registry.list_games() == []
