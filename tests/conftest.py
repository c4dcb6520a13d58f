"""Shared fixtures for Nancymon tests."""

import random

import pytest
from typer.testing import CliRunner

from nancymon.core.combatant import Opponent, PlayerCombatant
from nancymon.core.moves import Move
from nancymon.data.catalog import create_opponent, default_player
from nancymon.data.game_state import Inventory, MemoryCollection
from nancymon.utils.config import BattleConfig


class ScriptedRandom(random.Random):
    """Random source that replays scripted draws.

    random() (and therefore uniform() and choices()) pops the next
    scripted value, then falls back to `default`. 0.5 means "no variance"
    for damage and fails every chance of 0.5 or less. choice() always
    returns the first element.
    """

    def __init__(self, values=(), default=0.5):
        super().__init__(0)
        self.values = list(values)
        self.default = default
        self.draws = 0

    def random(self):
        self.draws += 1
        if self.values:
            return self.values.pop(0)
        return self.default

    def choice(self, seq):
        return seq[0]


# Randomness fixtures
@pytest.fixture
def scripted():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def seeded_rng():
    """A reproducible random source."""
    return random.Random(1234)


# Combatant fixtures
@pytest.fixture
def poke_move():
    """A plain 20-power move with no side effects."""
    return Move(id="poke", name="Poke", power=20)


@pytest.fixture
def sample_player(poke_move):
    """A level 5 player with a single plain move."""
    return PlayerCombatant(
        id="tester",
        name="Tester",
        max_resource=100,
        level=5,
        xp_to_next_level=500,
        moves=[poke_move],
    )


@pytest.fixture
def sample_opponent():
    """A 50-stress opponent with an 8-power attack."""
    return Opponent(
        id="dummy",
        name="Dummy Stress",
        max_resource=50,
        attack_power=8,
        attack_name="Nagging",
        attack_description="Dummy Stress nags you!",
        resource_reward=10,
        xp_reward=30,
    )


@pytest.fixture
def love():
    """The default player Memory."""
    return default_player()


@pytest.fixture
def work_stress():
    """Work Stress from the catalog."""
    return create_opponent("workStress")


# State fixtures
@pytest.fixture
def inventory():
    """Inventory with the starter items."""
    return Inventory.with_starter_items()


@pytest.fixture
def collection():
    """Empty memory collection."""
    return MemoryCollection()


@pytest.fixture
def battle_config():
    """Fresh default config, safe to modify."""
    return BattleConfig()


# CLI fixtures
@pytest.fixture
def cli_runner():
    """Typer CLI runner."""
    return CliRunner()
