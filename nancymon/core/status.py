"""Status effect registry and turn-start status processing."""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from nancymon.core.events import BattleEvent, BattleEventType, narration
from nancymon.utils.config import BattleConfig, config
from nancymon.utils.helpers import get_rng

if TYPE_CHECKING:
    from nancymon.core.combatant import Combatant

logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    """All status effects a combatant can carry."""

    BLUSHING = "BLUSHING"
    LAUGHING = "LAUGHING"
    CONFUSED = "CONFUSED"
    INSPIRED = "INSPIRED"
    TIRED = "TIRED"
    DISTRACTED = "DISTRACTED"
    PROUD = "PROUD"


class StatusBehavior(str, Enum):
    """How a status kind acts on the battle."""

    DEFENSE_BOOST = "defense_boost"  # Passive, no turn effect
    SKIP_CHANCE = "skip_chance"
    SELF_HARM_CHANCE = "self_harm_chance"
    POWER_MULTIPLIER = "power_multiplier"
    PASSIVE_HEAL = "passive_heal"


class StatusDefinition(BaseModel):
    """Static catalog entry for a status kind."""

    kind: StatusKind
    name: str
    emoji: str
    description: str
    behavior: StatusBehavior
    skip_message: str = ""


class ActiveStatus(BaseModel):
    """A status currently attached to a combatant."""

    kind: StatusKind
    remaining_turns: int = Field(default=2, ge=0)


STATUS_DEFINITIONS: dict[StatusKind, StatusDefinition] = {
    StatusKind.BLUSHING: StatusDefinition(
        kind=StatusKind.BLUSHING,
        name="Blushing",
        emoji="☺️",
        description="Vibe Defense increased!",
        behavior=StatusBehavior.DEFENSE_BOOST,
    ),
    StatusKind.LAUGHING: StatusDefinition(
        kind=StatusKind.LAUGHING,
        name="Laughing",
        emoji="😂",
        description="Too busy laughing to attack! (Skip turn chance)",
        behavior=StatusBehavior.SKIP_CHANCE,
        skip_message="{subject} laughing too hard to move! 😂",
    ),
    StatusKind.CONFUSED: StatusDefinition(
        kind=StatusKind.CONFUSED,
        name="Confused",
        emoji="😵‍💫",
        description="Might help you instead of hurting! (50% chance)",
        behavior=StatusBehavior.SELF_HARM_CHANCE,
    ),
    StatusKind.INSPIRED: StatusDefinition(
        kind=StatusKind.INSPIRED,
        name="Inspired",
        emoji="✨",
        description="Next move deals double comfort!",
        behavior=StatusBehavior.POWER_MULTIPLIER,
    ),
    StatusKind.TIRED: StatusDefinition(
        kind=StatusKind.TIRED,
        name="Tired",
        emoji="💤",
        description="Attack power reduced.",
        behavior=StatusBehavior.POWER_MULTIPLIER,
    ),
    StatusKind.DISTRACTED: StatusDefinition(
        kind=StatusKind.DISTRACTED,
        name="Distracted",
        emoji="👀",
        description="High chance to miss turn.",
        behavior=StatusBehavior.SKIP_CHANCE,
        skip_message="{subject} distracted looking at a butterfly... 🦋",
    ),
    StatusKind.PROUD: StatusDefinition(
        kind=StatusKind.PROUD,
        name="Proud",
        emoji="😎",
        description="Feeling great! Passive Vibe healing.",
        behavior=StatusBehavior.PASSIVE_HEAL,
    ),
}


def get_definition(kind: StatusKind) -> StatusDefinition:
    return STATUS_DEFINITIONS[kind]


def power_multiplier(kind: StatusKind, cfg: BattleConfig | None = None) -> float:
    """Return the power multiplier a POWER_MULTIPLIER status applies."""
    cfg = cfg or config
    if kind == StatusKind.INSPIRED:
        return cfg.inspired_multiplier
    if kind == StatusKind.TIRED:
        return cfg.tired_multiplier
    return 1.0


class StatusTick(BaseModel):
    """Outcome of processing statuses at the start of a turn."""

    skip: bool = False
    events: list[BattleEvent] = Field(default_factory=list)


def tick_statuses(
    combatant: Combatant,
    rng: random.Random | None = None,
    cfg: BattleConfig | None = None,
) -> StatusTick:
    """Process a combatant's statuses at the start of its turn.

    Order matters:
        1. every status loses one turn; those reaching zero are removed
        2. each active skip-chance status draws once; a hit skips the turn
        3. passive-heal statuses restore a fixed amount

    Mutation: updates the combatant in-place.
    """
    rng = get_rng(rng)
    cfg = cfg or config
    tick = StatusTick()

    # 1. Duration decay
    for status in list(combatant.active_statuses):
        status.remaining_turns -= 1
        if status.remaining_turns <= 0:
            combatant.active_statuses.remove(status)
            definition = get_definition(status.kind)
            tick.events.append(BattleEvent(
                event_type=BattleEventType.STATUS_EXPIRED,
                target=combatant.side,
                status=status.kind.value,
                message=f"{combatant.subject_is} no longer {definition.name.lower()}.",
            ))

    # 2. Skip check, one draw per skip status in registry order
    for kind, definition in STATUS_DEFINITIONS.items():
        if definition.behavior != StatusBehavior.SKIP_CHANCE or not combatant.has_status(kind):
            continue
        chance = cfg.skip_chances.get(kind.value, 0.0)
        if rng.random() < chance:
            logger.debug("%s skips the turn (%s)", combatant.name, kind.value)
            tick.skip = True
            tick.events.append(narration(definition.skip_message.format(subject=combatant.subject_is)))
            return tick

    # 3. Passive heal
    for status in combatant.active_statuses:
        if get_definition(status.kind).behavior != StatusBehavior.PASSIVE_HEAL:
            continue
        healed = combatant.restore(cfg.passive_heal_amount)
        tick.events.append(BattleEvent(
            event_type=BattleEventType.HEAL,
            target=combatant.side,
            amount=healed,
            status=status.kind.value,
            message=f"Feeling {get_definition(status.kind).name.lower()} gave "
                    f"{combatant.object_pronoun} energy! (+{healed} Vibe)",
        ))

    return tick
