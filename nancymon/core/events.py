"""Battle event stream consumed by presentation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Side(str, Enum):
    """Which side of the battle an event concerns."""

    PLAYER = "player"
    OPPONENT = "opponent"


class BattleEventType(str, Enum):
    """Kinds of events emitted during a battle."""

    NARRATION = "narration"
    DAMAGE = "damage"
    HEAL = "heal"
    STATUS_APPLIED = "status_applied"
    STATUS_EXPIRED = "status_expired"
    LEVEL_UP = "level_up"
    DROP_FOUND = "drop_found"
    ALL_COLLECTED = "all_collected"
    BATTLE_ENDED = "battle_ended"


class BattleEvent(BaseModel):
    """A single thing that happened, in order.

    Presentation renders each event and sends an "advance" signal back
    when it is ready for the battle to continue.
    """

    event_type: BattleEventType
    target: Side | None = None
    amount: int = 0
    critical: bool = False
    status: str | None = None  # StatusKind value
    refreshed: bool = False  # status_applied on an already active status
    level: int | None = None
    drop_id: str | None = None
    outcome: str | None = None  # BattleOutcome value
    message: str = ""


def narration(text: str) -> BattleEvent:
    return BattleEvent(event_type=BattleEventType.NARRATION, message=text)
