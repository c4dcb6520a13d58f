"""Experience and level-up rules."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from nancymon.core.combatant import Combatant
from nancymon.utils.config import BattleConfig, config
from nancymon.utils.helpers import xp_threshold

logger = logging.getLogger(__name__)


class LevelUpResult(BaseModel):
    """What changed when an XP grant crossed one or more thresholds."""

    old_level: int
    new_level: int
    levels_gained: int
    max_resource_gained: int


def apply_xp(
    combatant: Combatant,
    amount: int,
    cfg: BattleConfig | None = None,
) -> LevelUpResult | None:
    """Grant XP and level up as many times as the total allows.

    Each level-up subtracts the current threshold, raises max_resource by
    the configured step, refills the pool and recomputes the threshold as
    level * xp_per_level. Overflow carries into the next level.

    Mutation: updates the combatant in-place.

    Returns:
        LevelUpResult if at least one level was gained, else None.
    """
    cfg = cfg or config
    if amount <= 0:
        return None

    combatant.xp += amount
    old_level = combatant.level
    old_max = combatant.max_resource

    while combatant.xp >= combatant.xp_to_next_level:
        combatant.xp -= combatant.xp_to_next_level
        combatant.level += 1
        combatant.max_resource += cfg.level_up_resource_step
        combatant.current_resource = combatant.max_resource
        combatant.xp_to_next_level = xp_threshold(combatant.level, cfg.xp_per_level)

    if combatant.level == old_level:
        return None

    logger.debug("%s reached level %d (xp %d/%d)",
                 combatant.name, combatant.level, combatant.xp, combatant.xp_to_next_level)
    return LevelUpResult(
        old_level=old_level,
        new_level=combatant.level,
        levels_gained=combatant.level - old_level,
        max_resource_gained=combatant.max_resource - old_max,
    )
