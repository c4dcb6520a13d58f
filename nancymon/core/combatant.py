"""Combatant models: the player's Memory and the stress opponents."""

from __future__ import annotations

from pydantic import BaseModel, Field

from nancymon.core.events import Side
from nancymon.core.moves import Move, MoveCategory
from nancymon.core.status import ActiveStatus, StatusKind
from nancymon.utils.config import config
from nancymon.utils.helpers import clamp, xp_threshold


class Combatant(BaseModel):
    """Shared record for anything that fights.

    The resource pool is "vibe" for the player and "stress" for
    opponents; either way it stays within [0, max_resource].
    """

    id: str
    name: str
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    xp_to_next_level: int = 0  # 0 means "derive from level"
    max_resource: int = Field(gt=0)
    current_resource: int | None = None  # Defaults to full
    moves: list[Move] = Field(default_factory=list)
    active_statuses: list[ActiveStatus] = Field(default_factory=list)

    def model_post_init(self, __context) -> None:
        """Fill derived defaults and clamp the pool."""
        if self.current_resource is None:
            self.current_resource = self.max_resource
        self.current_resource = clamp(self.current_resource, 0, self.max_resource)
        if self.xp_to_next_level <= 0:
            self.xp_to_next_level = xp_threshold(self.level, config.xp_per_level)

    # -- display helpers ---------------------------------------------------

    @property
    def side(self) -> Side | None:
        """Which side of the battle this record fights on, if any."""
        return None

    @property
    def subject(self) -> str:
        return self.name

    @property
    def subject_is(self) -> str:
        return f"{self.name} is"

    @property
    def object_pronoun(self) -> str:
        return self.name

    @property
    def resource_percent(self) -> float:
        return (self.current_resource / self.max_resource) * 100

    @property
    def is_depleted(self) -> bool:
        return self.current_resource <= 0

    # -- pool mutation -----------------------------------------------------

    def take_damage(self, amount: int) -> int:
        """Reduce the pool, return the amount actually removed. Floors at 0."""
        actual = max(0, min(amount, self.current_resource))
        self.current_resource -= actual
        return actual

    def restore(self, amount: int) -> int:
        """Restore the pool, return the amount actually restored. Caps at max."""
        actual = max(0, min(amount, self.max_resource - self.current_resource))
        self.current_resource += actual
        return actual

    # -- statuses ----------------------------------------------------------

    def get_status(self, kind: StatusKind) -> ActiveStatus | None:
        for status in self.active_statuses:
            if status.kind == kind:
                return status
        return None

    def has_status(self, kind: StatusKind) -> bool:
        return self.get_status(kind) is not None

    def apply_status(self, kind: StatusKind, duration: int = 2) -> bool:
        """Attach a status or refresh it.

        Returns True if the status is new, False if an existing entry
        had its duration reset.
        """
        existing = self.get_status(kind)
        if existing is not None:
            existing.remaining_turns = duration
            return False
        self.active_statuses.append(ActiveStatus(kind=kind, remaining_turns=duration))
        return True

    def remove_status(self, kind: StatusKind) -> bool:
        existing = self.get_status(kind)
        if existing is None:
            return False
        self.active_statuses.remove(existing)
        return True

    def clear_statuses(self) -> None:
        self.active_statuses = []


class PlayerCombatant(Combatant):
    """The player's companion Memory, with moves and progression."""

    description: str = ""

    @property
    def side(self) -> Side:
        return Side.PLAYER

    @property
    def subject(self) -> str:
        return "You"

    @property
    def subject_is(self) -> str:
        return "You are"

    @property
    def object_pronoun(self) -> str:
        return "you"


class Opponent(Combatant):
    """A stress enemy with one fixed attack and fixed rewards."""

    attack_power: int = Field(gt=0)
    attack_name: str
    attack_description: str = ""
    resource_reward: int = 0  # Vibe restored to the player on victory
    xp_reward: int = 0

    @property
    def side(self) -> Side:
        return Side.OPPONENT

    @property
    def attack_move(self) -> Move:
        """The fixed attack expressed as a move for the resolver."""
        return Move(
            id=f"{self.id}_attack",
            name=self.attack_name,
            power=self.attack_power,
            category=MoveCategory.COMFORT,
            description=self.attack_description,
        )
