"""Move and item models, and single-action resolution."""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from nancymon.core.events import BattleEvent, BattleEventType, Side, narration
from nancymon.core.status import StatusKind, get_definition
from nancymon.utils.config import BattleConfig, config
from nancymon.utils.helpers import get_rng, round_half_up, scale_floor

if TYPE_CHECKING:
    from nancymon.core.combatant import Combatant

logger = logging.getLogger(__name__)


class MoveCategory(str, Enum):
    """Move classification."""

    COMFORT = "comfort"
    HEAL = "heal"  # Also restores the actor a little
    SPECIAL = "special"


class ItemCategory(str, Enum):
    """Item classification. Only the first three are usable in battle."""

    HEAL = "heal"
    COMFORT = "comfort"
    SPECIAL = "special"
    SEED = "seed"
    RESOURCE = "resource"


BATTLE_ITEM_CATEGORIES = {ItemCategory.HEAL, ItemCategory.COMFORT, ItemCategory.SPECIAL}


class TimingResult(str, Enum):
    """Outcome of the timing-skill check."""

    PERFECT = "PERFECT"
    GOOD = "GOOD"
    MISS = "MISS"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class Move(BaseModel):
    """A comforting action the player can pick in battle."""

    id: str
    name: str
    power: int = Field(gt=0)
    category: MoveCategory = MoveCategory.COMFORT
    description: str = ""  # Flavour text; "{enemy}" is replaced by the target name
    emoji: str = ""
    status_effect: StatusKind | None = None  # Applied to the target on a successful roll
    status_chance: float | None = Field(default=None, ge=0.0, le=1.0)
    self_status: StatusKind | None = None  # Always applied to the actor


class Item(BaseModel):
    """A consumable item definition."""

    id: str
    name: str
    category: ItemCategory
    value: int = 0  # Effectiveness amount
    description: str = ""
    emoji: str = ""
    plant_id: str | None = None  # Seeds only

    @property
    def usable_in_battle(self) -> bool:
        return self.category in BATTLE_ITEM_CATEGORIES and self.value > 0


class ActionResult(BaseModel):
    """Outcome of resolving one move."""

    move_id: str
    amount: int  # Computed magnitude after all multipliers
    dealt: int  # Actually removed from the target (pool floors at 0)
    is_critical: bool = False
    timing: TimingResult | None = None
    inspired: bool = False
    tired: bool = False
    applied_statuses: list[StatusKind] = Field(default_factory=list)
    self_heal: int = 0
    events: list[BattleEvent] = Field(default_factory=list)


class ItemResult(BaseModel):
    """Outcome of using one item."""

    item_id: str
    healed: int = 0
    reduced: int = 0
    events: list[BattleEvent] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Amount calculation
# ---------------------------------------------------------------------------

_TIMING_TEXT = {
    TimingResult.PERFECT: "💖 PERFECT! (1.5x Power!)",
    TimingResult.GOOD: "✨ Nice! (1.2x Power)",
    TimingResult.MISS: "💦 Missed the rhythm... (0.8x Power)",
}


def timing_multiplier(timing: TimingResult, cfg: BattleConfig | None = None) -> float:
    cfg = cfg or config
    if timing == TimingResult.PERFECT:
        return cfg.perfect_multiplier
    if timing == TimingResult.GOOD:
        return cfg.good_multiplier
    return cfg.miss_multiplier


def calculate_damage(
    power: int,
    rng: random.Random | None = None,
    cfg: BattleConfig | None = None,
    scale: float = 1.0,
) -> int:
    """Base amount with +/- variance and an optional scale, rounded once.

    With the default 20% variance the result lies in
    [round(0.8 * power * scale), round(1.2 * power * scale)].
    """
    cfg = cfg or config
    variance = cfg.damage_variance
    multiplier = 1 + get_rng(rng).uniform(-variance, variance)
    return round_half_up(power * multiplier * scale)


def _status_event(combatant: Combatant, kind: StatusKind, is_new: bool) -> BattleEvent:
    definition = get_definition(kind)
    if is_new:
        message = f"{combatant.subject} became {definition.name.lower()}! {definition.emoji}"
    else:
        message = f"{combatant.subject_is} still {definition.name.lower()}!"
    return BattleEvent(
        event_type=BattleEventType.STATUS_APPLIED,
        target=combatant.side,
        status=kind.value,
        refreshed=not is_new,
        message=message,
    )


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_action(
    actor: Combatant,
    target: Combatant,
    move: Move,
    timing: TimingResult | None = None,
    rng: random.Random | None = None,
    cfg: BattleConfig | None = None,
) -> ActionResult:
    """Resolve one move from actor against target.

    Mutation: updates both combatants in-place (pools and statuses).
    The move is assumed valid; selection is checked by the caller.
    """
    rng = get_rng(rng)
    cfg = cfg or config
    events: list[BattleEvent] = []

    # Timing check (player moves only), applied before rounding
    is_critical = False
    scale = 1.0
    if timing is not None:
        scale = timing_multiplier(timing, cfg)
        is_critical = timing == TimingResult.PERFECT
        events.append(narration(_TIMING_TEXT[timing]))

    amount = calculate_damage(move.power, rng, cfg, scale)

    # Actor status modifiers
    inspired = actor.has_status(StatusKind.INSPIRED)
    if inspired:
        amount = scale_floor(amount, cfg.inspired_multiplier)
        events.append(narration("✨ Inspired! Double power!"))
        if cfg.inspired_single_use:
            actor.remove_status(StatusKind.INSPIRED)
    tired = actor.has_status(StatusKind.TIRED)
    if tired:
        amount = scale_floor(amount, cfg.tired_multiplier)

    if move.description:
        events.append(narration(f"{move.emoji} {move.description.format(enemy=target.name)}".strip()))

    dealt = target.take_damage(amount)
    if target.side == Side.PLAYER:
        message = f"Your vibe dropped by {amount}... 😢"
    else:
        message = f"{target.name}'s stress decreased by {amount}!"
    events.append(BattleEvent(
        event_type=BattleEventType.DAMAGE,
        target=target.side,
        amount=amount,
        critical=is_critical,
        message=message,
    ))

    # Status effects
    applied: list[StatusKind] = []
    if move.status_effect is not None:
        chance = move.status_chance if move.status_chance is not None else cfg.default_status_chance
        if rng.random() < chance:
            is_new = target.apply_status(move.status_effect, cfg.status_duration)
            applied.append(move.status_effect)
            events.append(_status_event(target, move.status_effect, is_new))
    if move.self_status is not None:
        is_new = actor.apply_status(move.self_status, cfg.status_duration)
        applied.append(move.self_status)
        events.append(_status_event(actor, move.self_status, is_new))

    # Heal moves restore the actor a little
    self_heal = 0
    if move.category == MoveCategory.HEAL:
        self_heal = actor.restore(round_half_up(amount * cfg.heal_move_ratio))
        events.append(BattleEvent(
            event_type=BattleEventType.HEAL,
            target=actor.side,
            amount=self_heal,
            message=f"You feel a warm glow... (+{self_heal} Vibe) 💕",
        ))

    logger.debug(
        "%s used %s on %s: amount=%d dealt=%d timing=%s",
        actor.name, move.id, target.name, amount, dealt, timing.value if timing else None,
    )

    return ActionResult(
        move_id=move.id,
        amount=amount,
        dealt=dealt,
        is_critical=is_critical,
        timing=timing,
        inspired=inspired,
        tired=tired,
        applied_statuses=applied,
        self_heal=self_heal,
        events=events,
    )


def resolve_item(
    user: Combatant,
    opponent: Combatant,
    item: Item,
) -> ItemResult:
    """Apply an item's effect.

    heal/special restore the user; comfort/special calm the opponent.
    A special item does both.
    """
    result = ItemResult(item_id=item.id)
    result.events.append(narration(f"You used {item.emoji} {item.name}!".replace("  ", " ")))

    if item.category in (ItemCategory.HEAL, ItemCategory.SPECIAL):
        result.healed = user.restore(item.value)
        result.events.append(BattleEvent(
            event_type=BattleEventType.HEAL,
            target=user.side,
            amount=result.healed,
            message=f"You feel refreshed! (+{result.healed} Vibe)",
        ))

    if item.category in (ItemCategory.COMFORT, ItemCategory.SPECIAL):
        result.reduced = opponent.take_damage(item.value)
        result.events.append(BattleEvent(
            event_type=BattleEventType.DAMAGE,
            target=opponent.side,
            amount=item.value,
            message=f"{opponent.name} seems calmed by it. (-{item.value} Stress)",
        ))

    return result
