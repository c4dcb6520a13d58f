"""Turn-based battle state machine.

Runs one encounter between the player's Memory and a stress opponent:
    intro -> player turn -> (move + timing | item | run) -> enemy turn -> ...
    -> victory (rewards, memory drop) | defeat | run away -> end

The machine never blocks. Each step appends events and then waits in its
current phase for an external signal: ``advance()`` from the pacing layer,
a menu choice, a selection, a timing result or an acknowledgement. The
signal it waits for is exposed as ``awaiting``.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel

from nancymon.core.combatant import Opponent, PlayerCombatant
from nancymon.core.events import BattleEvent, BattleEventType, Side, narration
from nancymon.core.moves import ActionResult, Item, TimingResult, resolve_action, resolve_item
from nancymon.core.progression import LevelUpResult, apply_xp
from nancymon.core.rewards import CollectionStore, RewardSelector
from nancymon.core.status import StatusKind, tick_statuses
from nancymon.data.catalog import ITEMS, MEMORIES, VICTORY_MESSAGES
from nancymon.utils.config import BattleConfig, config
from nancymon.utils.helpers import get_rng

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BattlePhase(str, Enum):
    """Where the battle currently is."""

    INTRO = "intro"
    PLAYER_TURN = "player_turn"  # Main menu
    PLAYER_SELECTING_MOVE = "player_selecting_move"
    PLAYER_SELECTING_ITEM = "player_selecting_item"
    TIMING_CHECK = "timing_check"
    PLAYER_ACTION = "player_action"
    ENEMY_TURN = "enemy_turn"
    ENEMY_ACTION = "enemy_action"
    VICTORY = "victory"
    MEMORY_DROP = "memory_drop"
    DEFEAT = "defeat"
    RUN_AWAY = "run_away"
    END = "end"


class AwaitedSignal(str, Enum):
    """The external signal the battle is waiting for."""

    ADVANCE = "advance"
    MENU_CHOICE = "menu_choice"
    MOVE_SELECTION = "move_selection"
    ITEM_SELECTION = "item_selection"
    TIMING_RESULT = "timing_result"
    ACKNOWLEDGE = "acknowledge"
    NOTHING = "nothing"


class MenuOption(str, Enum):
    """Main battle menu entries."""

    COMFORT = "comfort"
    ITEMS = "items"
    RUN = "run"


class BattleOutcome(str, Enum):
    """How a battle ended."""

    VICTORY = "victory"
    DEFEAT = "defeat"
    RUN = "run"
    ABORTED = "aborted"  # Cancelled by the caller


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

class InventoryStore(Protocol):
    """Read/write contract of the item inventory."""

    def consume_item(self, item_id: str) -> bool: ...

    def item_count(self, item_id: str) -> int: ...


class TimingCheck(Protocol):
    """A time-bounded skill check. Must return MISS on timeout."""

    def __call__(self) -> TimingResult: ...


class BattleResult(BaseModel):
    """What the caller gets back when the battle reaches END."""

    player: PlayerCombatant
    return_context: Any = None
    outcome: BattleOutcome
    drop_id: str | None = None
    level_up: LevelUpResult | None = None
    all_collected: bool = False


_REPROMPTS = {
    BattlePhase.PLAYER_TURN: "What will you do?",
    BattlePhase.PLAYER_SELECTING_MOVE: "Choose a move!",
    BattlePhase.PLAYER_SELECTING_ITEM: "Choose an item!",
    BattlePhase.TIMING_CHECK: "Hit the sweet spot!",
    BattlePhase.MEMORY_DROP: "Take a moment with your memory...",
}


# ---------------------------------------------------------------------------
# Battle
# ---------------------------------------------------------------------------

class Battle:
    """One encounter between the player and a stress opponent."""

    def __init__(
        self,
        player: PlayerCombatant,
        opponent: Opponent,
        inventory: InventoryStore | None = None,
        collection: CollectionStore | None = None,
        memory_ids: list[str] | None = None,
        items: dict[str, Item] | None = None,
        rng: random.Random | None = None,
        cfg: BattleConfig | None = None,
        return_context: Any = None,
    ):
        """Initialize a battle.

        Args:
            player: The player's Memory. Copied; the caller's record is untouched.
            opponent: The stress enemy. Copied as well.
            inventory: Item store consulted and consumed from by the items menu.
            collection: Collected-memories store. Without one there are no drops.
            memory_ids: Droppable memory ids. Defaults to the memory catalog.
            items: Item definitions by id. Defaults to the item catalog.
            rng: Randomness source for every draw in the battle.
            cfg: Balance configuration.
            return_context: Opaque value handed back in the result.
        """
        self.player = player.model_copy(deep=True)
        self.opponent = opponent.model_copy(deep=True)
        self.inventory = inventory
        self.collection = collection
        self.memory_ids = list(memory_ids) if memory_ids is not None else list(MEMORIES)
        self.items = items if items is not None else ITEMS
        self.rng = get_rng(rng)
        self.cfg = cfg or config
        self.return_context = return_context

        self.phase = BattlePhase.INTRO
        self.awaiting = AwaitedSignal.NOTHING
        self.next_phase: BattlePhase | None = None

        self.events: list[BattleEvent] = []
        self._delivered = 0

        self.pending_move_index: int | None = None
        self.last_action: ActionResult | None = None
        self.outcome: BattleOutcome | None = None
        self.drop_id: str | None = None
        self.level_up: LevelUpResult | None = None
        self.all_collected = False
        self.result: BattleResult | None = None
        self._started = False
        self._rewarded = False

    # -- public state ------------------------------------------------------

    @property
    def is_over(self) -> bool:
        return self.phase == BattlePhase.END

    def drain_events(self) -> list[BattleEvent]:
        """Return events not yet handed out by a previous drain."""
        pending = self.events[self._delivered:]
        self._delivered = len(self.events)
        return pending

    def available_items(self) -> list[Item]:
        """Battle-usable items the inventory currently holds, in catalog order."""
        if self.inventory is None:
            return []
        return [
            item for item in self.items.values()
            if item.usable_in_battle and self.inventory.item_count(item.id) > 0
        ]

    # -- signals -----------------------------------------------------------

    def start(self) -> bool:
        """Show the intro and wait for the first advance."""
        if self._started:
            return self._reject("start")
        self._started = True
        self._emit(narration(f"A wild {self.opponent.name} appeared! 😰"))
        self._emit(narration(f"It's overwhelming you with {self.opponent.attack_name.lower()}..."))
        self._wait_for_advance(BattlePhase.PLAYER_TURN)
        return True

    def advance(self) -> bool:
        """Proceed into the queued next phase."""
        if self.awaiting != AwaitedSignal.ADVANCE or self.next_phase is None:
            return self._reject("advance")
        target = self.next_phase
        self.next_phase = None
        logger.debug("Advance: %s -> %s", self.phase.value, target.value)

        if target == BattlePhase.PLAYER_TURN:
            self._begin_player_turn()
        elif target == BattlePhase.ENEMY_TURN:
            self._run_enemy_turn()
        elif target == BattlePhase.VICTORY:
            self._resolve_victory()
        elif target == BattlePhase.MEMORY_DROP:
            self._show_memory_drop()
        elif target == BattlePhase.DEFEAT:
            self._resolve_defeat()
        elif target == BattlePhase.END:
            self._finish()
        return True

    def choose(self, option: MenuOption) -> bool:
        """Pick an entry of the main menu."""
        if self.awaiting != AwaitedSignal.MENU_CHOICE:
            return self._reject(f"choose {option.value}")

        if option == MenuOption.COMFORT:
            if not self.player.moves:
                return self._reject("choose comfort without moves")
            self.phase = BattlePhase.PLAYER_SELECTING_MOVE
            self.awaiting = AwaitedSignal.MOVE_SELECTION
            return True

        if option == MenuOption.ITEMS:
            if not self.available_items():
                self._emit(narration("You don't have any items to use!"))
                return self._reject("choose items with an empty bag")
            self.phase = BattlePhase.PLAYER_SELECTING_ITEM
            self.awaiting = AwaitedSignal.ITEM_SELECTION
            return True

        self._attempt_run()
        return True

    def cancel(self) -> bool:
        """Back out of a selection sub-menu."""
        if self.phase not in (BattlePhase.PLAYER_SELECTING_MOVE, BattlePhase.PLAYER_SELECTING_ITEM):
            return self._reject("cancel")
        self._show_menu()
        return True

    def select_move(self, index: int) -> bool:
        """Pick a move; the timing check follows."""
        if self.awaiting != AwaitedSignal.MOVE_SELECTION:
            return self._reject("select_move")
        if not 0 <= index < len(self.player.moves):
            return self._reject(f"select_move index {index}")

        self.pending_move_index = index
        self.phase = BattlePhase.TIMING_CHECK
        self.awaiting = AwaitedSignal.TIMING_RESULT
        self._emit(narration("Get ready... hit the sweet spot! 🎵"))
        return True

    def submit_timing_result(self, result: TimingResult | None) -> bool:
        """Resolve the pending move with the timing outcome. None counts as MISS."""
        if self.awaiting != AwaitedSignal.TIMING_RESULT or self.pending_move_index is None:
            return self._reject("submit_timing_result")
        if result is None:
            result = TimingResult.MISS

        move = self.player.moves[self.pending_move_index]
        self.pending_move_index = None
        self.phase = BattlePhase.PLAYER_ACTION

        self._emit(narration(f"{self.player.name} used {move.name}! {move.emoji}".strip()))
        self.last_action = resolve_action(
            self.player, self.opponent, move, timing=result, rng=self.rng, cfg=self.cfg,
        )
        self._emit_all(self.last_action.events)
        self._check_termination(BattlePhase.ENEMY_TURN)
        return True

    def run_timing_check(self, check: TimingCheck) -> bool:
        """Run a timing collaborator synchronously and submit what it returns."""
        if self.awaiting != AwaitedSignal.TIMING_RESULT:
            return self._reject("run_timing_check")
        return self.submit_timing_result(check())

    def select_item(self, index: int) -> bool:
        """Use one unit of an item from available_items()."""
        if self.awaiting != AwaitedSignal.ITEM_SELECTION:
            return self._reject("select_item")
        items = self.available_items()
        if not 0 <= index < len(items):
            return self._reject(f"select_item index {index}")

        item = items[index]
        if not self.inventory.consume_item(item.id):
            logger.debug("Inventory refused to consume %s", item.id)
            return False

        self.phase = BattlePhase.PLAYER_ACTION
        self._emit_all(resolve_item(self.player, self.opponent, item).events)
        self._check_termination(BattlePhase.ENEMY_TURN)
        return True

    def acknowledge(self) -> bool:
        """Dismiss the memory drop and end the battle."""
        if self.awaiting != AwaitedSignal.ACKNOWLEDGE:
            return self._reject("acknowledge")
        self._finish()
        return True

    def abort(self) -> bool:
        """Cancel the battle as it stands. Nothing is rolled back.

        An outcome already decided (a run, or a victory whose rewards were
        granted) is kept; only an undecided battle ends as aborted.
        """
        if self.is_over:
            return False
        logger.info("Battle against %s aborted in %s", self.opponent.name, self.phase.value)
        if self.outcome is None:
            self.outcome = BattleOutcome.ABORTED
        self._finish()
        return True

    # -- turn steps --------------------------------------------------------

    def _begin_player_turn(self) -> None:
        self.phase = BattlePhase.PLAYER_TURN
        tick = tick_statuses(self.player, rng=self.rng, cfg=self.cfg)
        self._emit_all(tick.events)
        if tick.skip:
            self._wait_for_advance(BattlePhase.ENEMY_TURN)
            return
        self._show_menu()

    def _show_menu(self) -> None:
        self.phase = BattlePhase.PLAYER_TURN
        self.awaiting = AwaitedSignal.MENU_CHOICE
        self.next_phase = None
        self._emit(narration("What will you do?"))

    def _attempt_run(self) -> None:
        if self.rng.random() < self.cfg.flee_chance:
            self.phase = BattlePhase.RUN_AWAY
            self.outcome = BattleOutcome.RUN
            self._emit(narration("You decided to take a breather... 🏃"))
            self._emit(narration("Sometimes walking away is self-care! 💕"))
            self._wait_for_advance(BattlePhase.END)
            return

        # The opponent acts on the next advance
        self.phase = BattlePhase.ENEMY_TURN
        self._emit(narration(f"{self.opponent.name} won't let you leave that easily!"))
        self._wait_for_advance(BattlePhase.ENEMY_TURN)

    def _run_enemy_turn(self) -> None:
        self.phase = BattlePhase.ENEMY_TURN
        tick = tick_statuses(self.opponent, rng=self.rng, cfg=self.cfg)
        self._emit_all(tick.events)
        if tick.skip:
            self._wait_for_advance(BattlePhase.PLAYER_TURN)
            return

        self.phase = BattlePhase.ENEMY_ACTION
        if self.opponent.has_status(StatusKind.CONFUSED) and self.rng.random() < self.cfg.confusion_chance:
            healed = self.player.restore(self.cfg.confusion_benefit)
            self._emit(narration(f"{self.opponent.name} is confused... and hugs you instead! 🤗"))
            self._emit(BattleEvent(
                event_type=BattleEventType.HEAL,
                target=Side.PLAYER,
                amount=healed,
                message=f"You feel better! (+{healed} Vibe)",
            ))
            self._wait_for_advance(BattlePhase.PLAYER_TURN)
            return

        attack = self.opponent.attack_move
        self._emit(narration(f"{self.opponent.name} used {attack.name}!"))
        self.last_action = resolve_action(self.opponent, self.player, attack, rng=self.rng, cfg=self.cfg)
        self._emit_all(self.last_action.events)
        self._check_termination(BattlePhase.PLAYER_TURN)

    def _check_termination(self, otherwise: BattlePhase) -> None:
        if self.opponent.current_resource <= 0:
            self._wait_for_advance(BattlePhase.VICTORY)
        elif self.player.current_resource <= 0:
            self._wait_for_advance(BattlePhase.DEFEAT)
        else:
            self._wait_for_advance(otherwise)

    # -- terminal phases ---------------------------------------------------

    def _resolve_victory(self) -> None:
        self.phase = BattlePhase.VICTORY
        self.outcome = BattleOutcome.VICTORY
        if self._rewarded:
            self._wait_for_advance(BattlePhase.END)
            return
        self._rewarded = True

        self._emit(narration(f"{self.opponent.name} has calmed down! 🌟"))
        self._emit(narration(self.rng.choice(VICTORY_MESSAGES)))

        restored = self.player.restore(self.opponent.resource_reward)
        if restored > 0:
            self._emit(BattleEvent(
                event_type=BattleEventType.HEAL,
                target=Side.PLAYER,
                amount=restored,
                message=f"+{restored} Vibe restored!",
            ))

        xp = self.opponent.xp_reward or self.cfg.default_xp_reward
        self._emit(narration(f"Gained {xp} XP!"))
        self.level_up = apply_xp(self.player, xp, self.cfg)
        if self.level_up is not None:
            self._emit(BattleEvent(
                event_type=BattleEventType.LEVEL_UP,
                target=Side.PLAYER,
                level=self.level_up.new_level,
                amount=self.level_up.max_resource_gained,
                message=f"{self.player.name} grew to level {self.level_up.new_level}! 🎉",
            ))

        if self.collection is not None:
            drop = RewardSelector(self.collection, self.memory_ids, self.rng).roll()
            self.drop_id = drop.drop_id
            self.all_collected = drop.all_collected

        self._wait_for_advance(BattlePhase.MEMORY_DROP if self.drop_id else BattlePhase.END)

    def _show_memory_drop(self) -> None:
        self.phase = BattlePhase.MEMORY_DROP
        memory = MEMORIES.get(self.drop_id)
        name = memory.name if memory else self.drop_id
        emoji = memory.emoji if memory else "✨"
        self._emit(BattleEvent(
            event_type=BattleEventType.DROP_FOUND,
            drop_id=self.drop_id,
            message=f"{emoji} You found a memory: {name}!",
        ))
        if self.all_collected:
            self._emit(BattleEvent(
                event_type=BattleEventType.ALL_COLLECTED,
                message="You've collected every memory! Something special awaits... 💖",
            ))
        self.awaiting = AwaitedSignal.ACKNOWLEDGE
        self.next_phase = BattlePhase.END

    def _resolve_defeat(self) -> None:
        self.phase = BattlePhase.DEFEAT
        self.outcome = BattleOutcome.DEFEAT
        self._emit(narration("You feel overwhelmed... 😢"))
        self._emit(narration("But remember: it's okay to struggle."))
        self._emit(narration("Take a deep breath and try again! 💕"))
        self.player.current_resource = self.player.max_resource // 2
        self._wait_for_advance(BattlePhase.END)

    def _finish(self) -> None:
        self.phase = BattlePhase.END
        self.awaiting = AwaitedSignal.NOTHING
        self.next_phase = None
        self.pending_move_index = None
        self.player.clear_statuses()

        self._emit(BattleEvent(
            event_type=BattleEventType.BATTLE_ENDED,
            outcome=self.outcome.value,
        ))
        self.result = BattleResult(
            player=self.player,
            return_context=self.return_context,
            outcome=self.outcome,
            drop_id=self.drop_id,
            level_up=self.level_up,
            all_collected=self.all_collected,
        )
        logger.debug("Battle ended: %s", self.outcome.value)

    # -- plumbing ----------------------------------------------------------

    def _wait_for_advance(self, next_phase: BattlePhase) -> None:
        self.awaiting = AwaitedSignal.ADVANCE
        self.next_phase = next_phase

    def _emit(self, event: BattleEvent) -> None:
        self.events.append(event)

    def _emit_all(self, events: list[BattleEvent]) -> None:
        self.events.extend(events)

    def _reject(self, action: str) -> bool:
        logger.warning("Rejected %s in phase %s", action, self.phase.value)
        prompt = _REPROMPTS.get(self.phase)
        if prompt:
            self._emit(narration(prompt))
        return False
