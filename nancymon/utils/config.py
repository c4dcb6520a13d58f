"""Configuration management for Nancymon battles."""

from pydantic import BaseModel


class BattleConfig(BaseModel):
    """Battle balance configuration."""

    # Damage calculation
    damage_variance: float = 0.2  # +/-20% around move power
    perfect_multiplier: float = 1.5
    good_multiplier: float = 1.2
    miss_multiplier: float = 0.8
    heal_move_ratio: float = 0.3  # Share of dealt amount restored by heal moves

    # Status effects
    status_duration: int = 2  # Turns granted on apply and on refresh
    default_status_chance: float = 0.5
    inspired_multiplier: float = 2.0
    inspired_single_use: bool = True  # INSPIRED is spent by the boosted move
    tired_multiplier: float = 0.7
    skip_chances: dict = {
        "LAUGHING": 0.5,
        "DISTRACTED": 0.3,
    }
    confusion_chance: float = 0.5
    confusion_benefit: int = 10  # Vibe restored when a confused foe hugs you
    passive_heal_amount: int = 5

    # Flow
    flee_chance: float = 0.7

    # Progression
    level_up_resource_step: int = 10
    xp_per_level: int = 100  # xp_to_next_level = level * xp_per_level
    default_xp_reward: int = 30

    # Timing check (sweet-spot bar)
    timing_window_seconds: float = 3.0
    timing_bar_half_width: float = 140.0
    timing_perfect_zone: float = 20.0
    timing_good_zone: float = 60.0
    timing_cursor_speed: float = 3.0


# Global config instance
config = BattleConfig()
