"""Static game data: moves, stress enemies, items and memories."""

from __future__ import annotations

import logging
import random

from pydantic import BaseModel

from nancymon.core.combatant import Opponent, PlayerCombatant
from nancymon.core.moves import Item, ItemCategory, Move, MoveCategory
from nancymon.core.status import StatusKind
from nancymon.utils.helpers import weighted_random_choice

logger = logging.getLogger(__name__)


class Memory(BaseModel):
    """A collectible memory dropped after a won battle."""

    id: str
    name: str
    description: str
    emoji: str = "✨"


# ---------------------------------------------------------------------------
# Moves
# ---------------------------------------------------------------------------

MOVES: dict[str, Move] = {
    "hug": Move(
        id="hug",
        name="Warm Hug",
        power=15,
        description="You gave {enemy} a warm, comforting hug!",
        emoji="🤗",
        category=MoveCategory.COMFORT,
        status_effect=StatusKind.BLUSHING,
        status_chance=0.3,
    ),
    "joke": Move(
        id="joke",
        name="Inside Joke",
        power=20,
        description="You shared a silly joke! {enemy} can't help but smile.",
        emoji="😄",
        category=MoveCategory.COMFORT,
        status_effect=StatusKind.LAUGHING,
        status_chance=0.4,
    ),
    "kiss": Move(
        id="kiss",
        name="Sweet Kiss",
        power=30,
        description="A gentle kiss melts away the tension...",
        emoji="💋",
        category=MoveCategory.COMFORT,
        self_status=StatusKind.INSPIRED,
    ),
    "words": Move(
        id="words",
        name="Gentle Words",
        power=10,
        description="You whispered sweet, encouraging words.",
        emoji="💕",
        category=MoveCategory.HEAL,
        self_status=StatusKind.PROUD,
    ),
    "cuddle": Move(
        id="cuddle",
        name="Cozy Cuddle",
        power=25,
        description="You snuggled up close, creating a safe space.",
        emoji="🥰",
        category=MoveCategory.COMFORT,
    ),
    "dance": Move(
        id="dance",
        name="Silly Dance",
        power=18,
        description="You broke into a goofy dance! The mood lightens.",
        emoji="💃",
        category=MoveCategory.SPECIAL,
        status_effect=StatusKind.CONFUSED,
        status_chance=0.6,
    ),
}

DEFAULT_MOVE_ID = "hug"


# ---------------------------------------------------------------------------
# Stress enemies
# ---------------------------------------------------------------------------

STRESS_ENEMIES: dict[str, Opponent] = {
    "workStress": Opponent(
        id="workStress",
        name="Work Stress",
        max_resource=50,
        attack_power=8,
        attack_name="Deadline Pressure",
        attack_description="Work Stress reminds you of pending deadlines!",
        level=3,
        resource_reward=10,
        xp_reward=30,
    ),
    "anxietyCloud": Opponent(
        id="anxietyCloud",
        name="Anxiety Cloud",
        max_resource=70,
        attack_power=12,
        attack_name="Overthinking",
        attack_description="Anxiety Cloud fills your mind with worries!",
        level=5,
        resource_reward=15,
        xp_reward=50,
    ),
    "loneliness": Opponent(
        id="loneliness",
        name="Loneliness",
        max_resource=100,
        attack_power=15,
        attack_name="Isolation",
        attack_description="Loneliness makes the world feel distant...",
        level=8,
        resource_reward=25,
        xp_reward=80,
    ),
    "mondayBlues": Opponent(
        id="mondayBlues",
        name="Monday Blues",
        max_resource=40,
        attack_power=6,
        attack_name="Alarm Clock",
        attack_description="Monday Blues hits you with early morning dread!",
        level=2,
        resource_reward=8,
        xp_reward=20,
    ),
    "socialDrain": Opponent(
        id="socialDrain",
        name="Social Drain",
        max_resource=60,
        attack_power=10,
        attack_name="Awkward Silence",
        attack_description="Social Drain makes everything feel exhausting!",
        level=4,
        resource_reward=12,
        xp_reward=40,
    ),
}

DEFAULT_ENEMY_ID = "workStress"

# Wild encounter weights, tilted towards easier enemies
ENCOUNTER_WEIGHTS = {
    "workStress": 0.35,
    "anxietyCloud": 0.25,
    "loneliness": 0.1,
    "mondayBlues": 0.2,
    "socialDrain": 0.1,
}


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

ITEMS: dict[str, Item] = {
    "chocolate": Item(
        id="chocolate", name="Dark Chocolate", category=ItemCategory.HEAL, value=30,
        description="A rich treat that restores Vibe.", emoji="🍫",
    ),
    "coffee": Item(
        id="coffee", name="Espresso", category=ItemCategory.HEAL, value=50,
        description="Strong coffee to wake up your senses.", emoji="☕",
    ),
    "flower": Item(
        id="flower", name="Wildflower", category=ItemCategory.COMFORT, value=20,
        description="A simple flower that brings a smile.", emoji="🌼",
    ),
    "loveLetter": Item(
        id="loveLetter", name="Love Note", category=ItemCategory.COMFORT, value=40,
        description="A handwritten note reminding you you are loved.", emoji="💌",
    ),
    "plushie": Item(
        id="plushie", name="Tiny Plushie", category=ItemCategory.COMFORT, value=30,
        description="Soft and huggable. Reduces stress instantly.", emoji="🧸",
    ),
    # Seeds
    "seed_rose": Item(
        id="seed_rose", name="Rose Seeds", category=ItemCategory.SEED,
        description="Plant these to grow beautiful red roses.", emoji="🌰", plant_id="rose",
    ),
    "seed_sunflower": Item(
        id="seed_sunflower", name="Sunflower Seeds", category=ItemCategory.SEED,
        description="Grow tall sunflowers that face the light.", emoji="🌰", plant_id="sunflower",
    ),
    "seed_coffee": Item(
        id="seed_coffee", name="Raw Coffee Bean", category=ItemCategory.SEED,
        description="Can be planted to grow a coffee shrub.", emoji="🫘", plant_id="coffee_bean",
    ),
    "seed_love_berry": Item(
        id="seed_love_berry", name="Love Berry Seed", category=ItemCategory.SEED,
        description="Plants a magical berry that grows with love.", emoji="🌰", plant_id="love_berry",
    ),
    # Produce
    "flower_rose": Item(
        id="flower_rose", name="Fresh Rose", category=ItemCategory.COMFORT, value=25,
        description="A romantic flower with a sweet scent.", emoji="🌹",
    ),
    "flower_sunflower": Item(
        id="flower_sunflower", name="Sunflower", category=ItemCategory.COMFORT, value=20,
        description="Bright and cheerful.", emoji="🌻",
    ),
    "coffee_beans": Item(
        id="coffee_beans", name="Roasted Beans", category=ItemCategory.RESOURCE, value=10,
        description="Freshly harvested coffee beans.", emoji="🫘",
    ),
    "love_berry": Item(
        id="love_berry", name="Love Berry", category=ItemCategory.HEAL, value=50,
        description="A sweet fruit that glows with affection.", emoji="🍓",
    ),
}

STARTER_ITEMS = {
    "chocolate": 3,
    "flower": 2,
    "seed_rose": 2,
    "seed_sunflower": 2,
}


# ---------------------------------------------------------------------------
# Memories
# ---------------------------------------------------------------------------

MEMORIES: dict[str, Memory] = {
    "paris_trip": Memory(
        id="paris_trip", name="Paris Trip", emoji="🗼",
        description="Our first trip together. The Eiffel Tower sparkled just for us.",
    ),
    "first_kiss": Memory(
        id="first_kiss", name="First Kiss", emoji="💋",
        description="That magical moment when time stopped and our hearts aligned.",
    ),
    "pizza_night": Memory(
        id="pizza_night", name="Pizza Night", emoji="🍕",
        description="Burnt pizza, wrong toppings, but the best dinner ever because we were together.",
    ),
    "stargazing": Memory(
        id="stargazing", name="Stargazing", emoji="⭐",
        description="Lying on the grass, counting stars, making wishes that already came true.",
    ),
    "rainy_day": Memory(
        id="rainy_day", name="Rainy Day", emoji="🌧️",
        description="Dancing in the rain without an umbrella. Your laughter was my sunshine.",
    ),
    "movie_marathon": Memory(
        id="movie_marathon", name="Movie Marathon", emoji="🎬",
        description="Three movies, two pizzas, one blanket. Perfect Saturday.",
    ),
}

VICTORY_MESSAGES = [
    "We won!",
    "Nothing can stop us when we're together.",
]


# ---------------------------------------------------------------------------
# Lookups and factories
# ---------------------------------------------------------------------------

def get_move(move_id: str) -> Move:
    """Look up a move, falling back to the default hug."""
    move = MOVES.get(move_id)
    if move is None:
        logger.warning("Unknown move %r, using %s", move_id, DEFAULT_MOVE_ID)
        move = MOVES[DEFAULT_MOVE_ID]
    return move.model_copy(deep=True)


def get_item(item_id: str) -> Item | None:
    return ITEMS.get(item_id)


def get_memory(memory_id: str) -> Memory | None:
    return MEMORIES.get(memory_id)


def create_opponent(enemy_id: str) -> Opponent:
    """Fresh opponent instance at full stress.

    Unknown ids fall back to Work Stress.
    """
    template = STRESS_ENEMIES.get(enemy_id)
    if template is None:
        logger.warning("Unknown enemy %r, using %s", enemy_id, DEFAULT_ENEMY_ID)
        template = STRESS_ENEMIES[DEFAULT_ENEMY_ID]
    opponent = template.model_copy(deep=True)
    opponent.current_resource = opponent.max_resource
    opponent.active_statuses = []
    return opponent


def get_random_opponent(rng: random.Random | None = None) -> Opponent:
    """Pick a wild encounter using ENCOUNTER_WEIGHTS."""
    return create_opponent(weighted_random_choice(ENCOUNTER_WEIGHTS, rng))


def default_player() -> PlayerCombatant:
    """The starting Memory: Love, level 5, four moves."""
    return PlayerCombatant(
        id="loveHeart",
        name="Love",
        description="The power of love and connection.",
        max_resource=100,
        level=5,
        xp=0,
        xp_to_next_level=500,
        moves=[get_move(move_id) for move_id in ("hug", "joke", "kiss", "words")],
    )
