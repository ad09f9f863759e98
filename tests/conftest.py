"""Shared fixtures for the scorekeeper test suite."""

import pytest

from src.scorekeeper.game_registry import GameRegistry
from src.scorekeeper.match_controller import MatchController
from src.scorekeeper.repository import Repository


@pytest.fixture
def tmp_storage(tmp_path):
    """Provide a temporary directory for the JSON collections."""
    return tmp_path / "scorekeeper"


@pytest.fixture
def repository(tmp_storage):
    return Repository(storage_dir=tmp_storage)


@pytest.fixture
def registry(repository):
    return GameRegistry(repository)


@pytest.fixture
def controller(repository):
    return MatchController(repository)


@pytest.fixture
def game(registry):
    """A registered game with K=32 and a 1500 starting rating."""
    return registry.create_game("Catan", k_factor=32, default_rating=1500)

