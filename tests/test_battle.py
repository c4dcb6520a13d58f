"""Tests for the battle state machine."""

import logging

import pytest

from nancymon.core.battle import (
    AwaitedSignal,
    Battle,
    BattleOutcome,
    BattlePhase,
    MenuOption,
)
from nancymon.core.combatant import PlayerCombatant
from nancymon.core.events import BattleEventType
from nancymon.core.moves import Move, MoveCategory, TimingResult
from nancymon.core.status import StatusKind
from nancymon.data.catalog import MEMORIES
from nancymon.data.game_state import Inventory, MemoryCollection


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_menu(battle: Battle) -> Battle:
    """Start the battle and advance into the first player menu."""
    assert battle.start()
    assert battle.advance()
    assert battle.awaiting == AwaitedSignal.MENU_CHOICE
    return battle


def _use_move(battle: Battle, index: int = 0, timing: TimingResult | None = TimingResult.GOOD) -> None:
    assert battle.choose(MenuOption.COMFORT)
    assert battle.select_move(index)
    assert battle.submit_timing_result(timing)


def _messages(battle: Battle) -> list[str]:
    return [event.message for event in battle.events]


def _event_types(battle: Battle) -> list[BattleEventType]:
    return [event.event_type for event in battle.events]


class BrokenInventory:
    """Reports stock but refuses to hand anything out."""

    def item_count(self, item_id):
        return 1 if item_id == "chocolate" else 0

    def consume_item(self, item_id):
        return False


# ---------------------------------------------------------------------------
# Flow
# ---------------------------------------------------------------------------


class TestIntro:
    """Tests for the opening of a battle."""

    def test_start(self, sample_player, sample_opponent, scripted):
        battle = Battle(sample_player, sample_opponent, rng=scripted())
        assert battle.phase == BattlePhase.INTRO
        assert battle.start() is True
        assert battle.awaiting == AwaitedSignal.ADVANCE
        assert battle.next_phase == BattlePhase.PLAYER_TURN
        assert "A wild Dummy Stress appeared! 😰" in _messages(battle)

    def test_start_twice_rejected(self, sample_player, sample_opponent, scripted):
        battle = Battle(sample_player, sample_opponent, rng=scripted())
        battle.start()
        assert battle.start() is False

    def test_advance_into_menu(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        assert battle.phase == BattlePhase.PLAYER_TURN
        assert battle.next_phase is None
        assert _messages(battle)[-1] == "What will you do?"

    def test_works_on_copies(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        _use_move(battle)
        assert battle.opponent.current_resource < 50
        assert sample_opponent.current_resource == 50
        assert battle.player is not sample_player


class TestMenus:
    """Tests for menu navigation and invalid input."""

    def test_comfort_and_cancel(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        assert battle.choose(MenuOption.COMFORT)
        assert battle.phase == BattlePhase.PLAYER_SELECTING_MOVE
        assert battle.awaiting == AwaitedSignal.MOVE_SELECTION

        assert battle.cancel()
        assert battle.phase == BattlePhase.PLAYER_TURN
        assert battle.awaiting == AwaitedSignal.MENU_CHOICE

    def test_cancel_outside_submenu(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        assert battle.cancel() is False

    def test_move_index_out_of_range(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        battle.choose(MenuOption.COMFORT)

        assert battle.select_move(5) is False
        assert battle.select_move(-1) is False
        assert battle.phase == BattlePhase.PLAYER_SELECTING_MOVE
        assert _messages(battle)[-1] == "Choose a move!"

    def test_wrong_phase_logs_and_reprompts(self, sample_player, sample_opponent, scripted, caplog):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        before = battle.opponent.current_resource

        with caplog.at_level(logging.WARNING):
            assert battle.advance() is False
            assert battle.submit_timing_result(TimingResult.PERFECT) is False
            assert battle.acknowledge() is False

        assert "Rejected" in caplog.text
        assert battle.phase == BattlePhase.PLAYER_TURN
        assert battle.opponent.current_resource == before
        assert _messages(battle)[-1] == "What will you do?"

    def test_select_move_before_start(self, sample_player, sample_opponent, scripted):
        battle = Battle(sample_player, sample_opponent, rng=scripted())
        assert battle.select_move(0) is False
        assert battle.phase == BattlePhase.INTRO


class TestPlayerMove:
    """Tests for the comfort path."""

    def test_good_timing_scenario(self, sample_player, sample_opponent, seeded_rng):
        for _ in range(100):
            battle = _to_menu(Battle(sample_player, sample_opponent, rng=seeded_rng))
            _use_move(battle, timing=TimingResult.GOOD)
            assert 21 <= battle.opponent.current_resource <= 31
            assert battle.phase == BattlePhase.PLAYER_ACTION
            assert battle.awaiting == AwaitedSignal.ADVANCE
            assert battle.next_phase == BattlePhase.ENEMY_TURN

    def test_missing_timing_counts_as_miss(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.5])))
        _use_move(battle, timing=None)
        assert battle.last_action.timing == TimingResult.MISS
        assert battle.opponent.current_resource == 34

    def test_run_timing_check(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.5])))
        battle.choose(MenuOption.COMFORT)
        battle.select_move(0)

        assert battle.run_timing_check(lambda: TimingResult.PERFECT)
        assert battle.last_action.is_critical is True
        assert battle.opponent.current_resource == 20

    def test_run_timing_check_wrong_phase(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        assert battle.run_timing_check(lambda: TimingResult.PERFECT) is False


class TestEnemyTurn:
    """Tests for the opponent's turn."""

    def test_attack_then_back_to_player(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.5, 0.5])))
        _use_move(battle)

        assert battle.advance()
        assert battle.phase == BattlePhase.ENEMY_ACTION
        assert battle.player.current_resource == 92
        assert battle.next_phase == BattlePhase.PLAYER_TURN

        assert battle.advance()
        assert battle.phase == BattlePhase.PLAYER_TURN
        assert battle.awaiting == AwaitedSignal.MENU_CHOICE

    def test_laughing_opponent_skips(self, sample_player, sample_opponent, scripted):
        sample_opponent.apply_status(StatusKind.LAUGHING)
        # flee fails, then the laughing draw succeeds
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.9, 0.1])))
        battle.choose(MenuOption.RUN)
        battle.advance()

        assert battle.player.current_resource == 100
        assert battle.phase == BattlePhase.ENEMY_TURN
        assert battle.awaiting == AwaitedSignal.ADVANCE
        assert battle.next_phase == BattlePhase.PLAYER_TURN

    def test_confused_opponent_hugs_player(self, sample_player, sample_opponent, scripted):
        sample_player.current_resource = 50
        sample_opponent.apply_status(StatusKind.CONFUSED)
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.9, 0.1])))
        battle.choose(MenuOption.RUN)
        battle.advance()

        assert battle.player.current_resource == 60
        assert battle.phase == BattlePhase.ENEMY_ACTION
        assert battle.next_phase == BattlePhase.PLAYER_TURN
        assert battle.last_action is None

    def test_confused_opponent_attacks_on_failed_draw(self, sample_player, sample_opponent, scripted):
        sample_opponent.apply_status(StatusKind.CONFUSED)
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.9, 0.6, 0.5])))
        battle.choose(MenuOption.RUN)
        battle.advance()

        assert battle.player.current_resource == 92

    def test_skipped_player_turn(self, sample_player, sample_opponent, scripted):
        sample_player.apply_status(StatusKind.DISTRACTED, duration=3)
        battle = Battle(sample_player, sample_opponent, rng=scripted([0.1]))
        battle.start()
        battle.advance()

        assert battle.phase == BattlePhase.PLAYER_TURN
        assert battle.awaiting == AwaitedSignal.ADVANCE
        assert battle.next_phase == BattlePhase.ENEMY_TURN
        assert battle.choose(MenuOption.COMFORT) is False


class TestRun:
    """Tests for fleeing."""

    def test_failed_run_goes_straight_to_enemy(self, sample_player, sample_opponent, scripted, battle_config):
        battle_config.flee_chance = 0.0
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted(), cfg=battle_config))

        assert battle.choose(MenuOption.RUN)
        assert battle.phase == BattlePhase.ENEMY_TURN
        assert battle.player.current_resource == 100
        assert battle.awaiting == AwaitedSignal.ADVANCE

    def test_run_success(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.69])))
        battle.choose(MenuOption.RUN)

        assert battle.phase == BattlePhase.RUN_AWAY
        assert battle.advance()
        assert battle.is_over
        assert battle.result.outcome == BattleOutcome.RUN
        assert battle.result.player.current_resource == 100

    def test_abort_after_run_keeps_run(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.0])))
        battle.choose(MenuOption.RUN)
        assert battle.phase == BattlePhase.RUN_AWAY

        assert battle.abort()
        assert battle.is_over
        assert battle.result.outcome == BattleOutcome.RUN

    def test_run_threshold(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.7])))
        battle.choose(MenuOption.RUN)
        assert battle.phase == BattlePhase.ENEMY_TURN


class TestItems:
    """Tests for the items path."""

    def test_available_items_only_battle_usable(self, sample_player, sample_opponent, inventory, scripted):
        battle = Battle(sample_player, sample_opponent, inventory=inventory, rng=scripted())
        assert [item.id for item in battle.available_items()] == ["chocolate", "flower"]

    def test_no_inventory_no_items(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        assert battle.available_items() == []
        assert battle.choose(MenuOption.ITEMS) is False
        assert battle.phase == BattlePhase.PLAYER_TURN

    def test_use_heal_item(self, sample_player, sample_opponent, scripted):
        sample_player.current_resource = 40
        inventory = Inventory(items={"chocolate": 1})
        battle = _to_menu(Battle(sample_player, sample_opponent, inventory=inventory, rng=scripted()))

        assert battle.choose(MenuOption.ITEMS)
        assert battle.select_item(0)
        assert battle.player.current_resource == 70
        assert inventory.item_count("chocolate") == 0
        assert battle.phase == BattlePhase.PLAYER_ACTION
        assert battle.next_phase == BattlePhase.ENEMY_TURN

    def test_comfort_item_can_win(self, sample_player, scripted, sample_opponent):
        sample_opponent.current_resource = 20
        inventory = Inventory(items={"flower": 1})
        battle = _to_menu(Battle(sample_player, sample_opponent, inventory=inventory, rng=scripted()))
        battle.choose(MenuOption.ITEMS)
        battle.select_item(0)
        assert battle.next_phase == BattlePhase.VICTORY

    def test_item_index_out_of_range(self, sample_player, sample_opponent, inventory, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, inventory=inventory, rng=scripted()))
        battle.choose(MenuOption.ITEMS)
        assert battle.select_item(2) is False
        assert battle.phase == BattlePhase.PLAYER_SELECTING_ITEM
        assert inventory.item_count("chocolate") == 3

    def test_failed_consume_is_noop(self, sample_player, sample_opponent, scripted):
        sample_player.current_resource = 40
        battle = _to_menu(Battle(sample_player, sample_opponent, inventory=BrokenInventory(), rng=scripted()))
        battle.choose(MenuOption.ITEMS)

        assert battle.select_item(0) is False
        assert battle.player.current_resource == 40
        assert battle.phase == BattlePhase.PLAYER_SELECTING_ITEM


class TestVictory:
    """Tests for winning and rewards."""

    @pytest.fixture
    def weak_opponent(self, sample_opponent):
        sample_opponent.max_resource = 10
        sample_opponent.current_resource = 10
        return sample_opponent

    def test_victory_with_drop(self, sample_player, weak_opponent, collection, scripted):
        sample_player.current_resource = 80
        battle = _to_menu(Battle(sample_player, weak_opponent, collection=collection, rng=scripted([0.5])))
        _use_move(battle)
        assert battle.next_phase == BattlePhase.VICTORY

        battle.advance()
        assert battle.phase == BattlePhase.VICTORY
        assert battle.player.current_resource == 90
        assert battle.player.xp == 30
        assert battle.next_phase == BattlePhase.MEMORY_DROP

        battle.advance()
        assert battle.phase == BattlePhase.MEMORY_DROP
        assert battle.awaiting == AwaitedSignal.ACKNOWLEDGE
        assert battle.advance() is False
        assert BattleEventType.DROP_FOUND in _event_types(battle)

        assert battle.acknowledge()
        result = battle.result
        assert result.outcome == BattleOutcome.VICTORY
        assert result.drop_id == "paris_trip"
        assert collection.is_collected("paris_trip")
        assert result.player.xp == 30

    def test_abort_during_drop_keeps_victory(self, sample_player, weak_opponent, collection, scripted):
        battle = _to_menu(Battle(sample_player, weak_opponent, collection=collection, rng=scripted([0.5])))
        _use_move(battle)
        battle.advance()
        battle.advance()
        assert battle.phase == BattlePhase.MEMORY_DROP

        assert battle.abort()
        assert battle.result.outcome == BattleOutcome.VICTORY
        assert battle.result.drop_id == "paris_trip"
        assert battle.result.player.xp == 30
        assert battle.events[-1].outcome == "victory"

    def test_rewards_granted_once(self, sample_player, weak_opponent, scripted):
        battle = _to_menu(Battle(sample_player, weak_opponent, rng=scripted([0.5])))
        _use_move(battle)
        battle.advance()
        battle.advance()

        assert battle.is_over
        assert battle.advance() is False
        assert battle.result.player.xp == 30

    def test_no_collection_no_drop(self, sample_player, weak_opponent, scripted):
        battle = _to_menu(Battle(sample_player, weak_opponent, rng=scripted([0.5])))
        _use_move(battle)
        battle.advance()
        assert battle.next_phase == BattlePhase.END
        battle.advance()
        assert battle.result.drop_id is None

    def test_default_xp_reward(self, sample_player, weak_opponent, scripted):
        weak_opponent.xp_reward = 0
        battle = _to_menu(Battle(sample_player, weak_opponent, rng=scripted([0.5])))
        _use_move(battle)
        battle.advance()
        assert battle.player.xp == 30

    def test_level_up_on_victory(self, sample_player, weak_opponent, scripted):
        sample_player.xp = 480
        battle = _to_menu(Battle(sample_player, weak_opponent, rng=scripted([0.5])))
        _use_move(battle)
        battle.advance()
        battle.advance()

        result = battle.result
        assert result.level_up.new_level == 6
        assert result.player.level == 6
        assert result.player.xp == 10
        assert result.player.current_resource == 110
        assert BattleEventType.LEVEL_UP in _event_types(battle)

    def test_last_memory_collected(self, sample_player, weak_opponent, scripted):
        ids = list(MEMORIES)
        collection = MemoryCollection(collected=ids[:-1])
        battle = _to_menu(Battle(sample_player, weak_opponent, collection=collection, rng=scripted([0.5])))
        _use_move(battle)
        battle.advance()
        battle.advance()
        battle.acknowledge()

        assert battle.result.drop_id == ids[-1]
        assert battle.result.all_collected is True
        assert collection.finale_unlocked is True
        assert BattleEventType.ALL_COLLECTED in _event_types(battle)

    def test_full_collection_ends_without_drop(self, sample_player, weak_opponent, scripted):
        collection = MemoryCollection(collected=list(MEMORIES))
        battle = _to_menu(Battle(sample_player, weak_opponent, collection=collection, rng=scripted([0.5])))
        _use_move(battle)
        battle.advance()
        assert battle.next_phase == BattlePhase.END
        battle.advance()
        assert battle.result.drop_id is None
        assert battle.result.all_collected is True


class TestDefeat:
    """Tests for losing."""

    def _lose(self, player, opponent, scripted, cfg):
        cfg.flee_chance = 0.0
        battle = _to_menu(Battle(player, opponent, rng=scripted(), cfg=cfg))
        battle.choose(MenuOption.RUN)
        battle.advance()
        return battle

    def test_defeat_restores_half(self, sample_player, sample_opponent, scripted, battle_config):
        sample_player.current_resource = 5
        battle = self._lose(sample_player, sample_opponent, scripted, battle_config)

        assert battle.player.current_resource == 0
        assert battle.next_phase == BattlePhase.DEFEAT

        battle.advance()
        assert battle.phase == BattlePhase.DEFEAT
        assert battle.player.current_resource == 50

        battle.advance()
        assert battle.result.outcome == BattleOutcome.DEFEAT
        assert battle.result.player.current_resource == 50

    def test_defeat_odd_max(self, sample_opponent, scripted, battle_config):
        player = PlayerCombatant(id="p", name="P", max_resource=99, current_resource=3,
                                 moves=[Move(id="m", name="M", power=5, category=MoveCategory.COMFORT)])
        battle = self._lose(player, sample_opponent, scripted, battle_config)
        battle.advance()
        assert battle.player.current_resource == 49


class TestEnding:
    """Tests for END, abort and the event stream."""

    def test_statuses_cleared_at_end(self, sample_player, sample_opponent, scripted):
        words = Move(id="words", name="Words", power=10, category=MoveCategory.HEAL, self_status=StatusKind.PROUD)
        sample_player.moves = [words]
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.5])))
        _use_move(battle)
        assert battle.player.has_status(StatusKind.PROUD)

        assert battle.abort()
        assert battle.result.player.active_statuses == []

    def test_abort_keeps_damage(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted([0.5, 0.5])))
        _use_move(battle)
        battle.advance()

        assert battle.abort()
        assert battle.phase == BattlePhase.END
        assert battle.awaiting == AwaitedSignal.NOTHING
        assert battle.result.outcome == BattleOutcome.ABORTED
        assert battle.result.player.current_resource == 92
        assert battle.abort() is False

    def test_return_context(self, sample_player, sample_opponent, scripted):
        battle = Battle(sample_player, sample_opponent, rng=scripted(), return_context={"x": 3, "y": 4})
        battle.abort()
        assert battle.result.return_context == {"x": 3, "y": 4}

    def test_battle_ended_event(self, sample_player, sample_opponent, scripted):
        battle = _to_menu(Battle(sample_player, sample_opponent, rng=scripted()))
        battle.abort()
        last = battle.events[-1]
        assert last.event_type == BattleEventType.BATTLE_ENDED
        assert last.outcome == "aborted"

    def test_drain_events(self, sample_player, sample_opponent, scripted):
        battle = Battle(sample_player, sample_opponent, rng=scripted())
        battle.start()
        first = battle.drain_events()
        assert len(first) == 2
        assert battle.drain_events() == []

        battle.advance()
        assert battle.drain_events()[-1].message == "What will you do?"
        assert len(battle.events) == 3
