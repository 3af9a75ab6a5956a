"""Constants for the shared LoveGarden simulation.

These are the default tuning tables. Resolvers never read them directly at
call time; `config.GardenConfig.default()` snapshots them into immutable
config objects that get passed around instead.
"""

from __future__ import annotations

# Plant categories
CATEGORY_FLOWER: str = "flower"
CATEGORY_LARGE_PLANT: str = "largePlant"
CATEGORY_TREE: str = "tree"

# Flower type id -> category
PLANT_CATEGORIES = {
    "rose": CATEGORY_FLOWER,
    "tulip": CATEGORY_FLOWER,
    "morning_glory": CATEGORY_FLOWER,
    "orchid": CATEGORY_FLOWER,
    "strawberry": CATEGORY_FLOWER,
    "pumpkin": CATEGORY_LARGE_PLANT,
    "watermelon": CATEGORY_LARGE_PLANT,
    "apple_tree": CATEGORY_TREE,
}

# Sapling -> mature, in minutes
MATURATION_MINUTES = {
    CATEGORY_FLOWER: 30,
    CATEGORY_LARGE_PLANT: 6 * 60,
    CATEGORY_TREE: 12 * 60,
}

# Growth scale applied on top of the depth scale
SAPLING_GROWTH_SCALE: float = 0.7
MATURE_GROWTH_SCALE: float = 1.0

# Garden-wide health thresholds (hours since last successful interaction)
WILTING_AFTER_HOURS: float = 12.0
WILTED_AFTER_HOURS: float = 24.0

# Garden plane
SCREEN_WIDTH: float = 390.0
MAX_DEPTH: float = 50.0
HORIZON_Y: float = 50.0
DEFAULT_DEPTH: float = 25.0

# Depth transform
FRONT_SCALE: float = 0.9
BACK_SCALE: float = 0.7
Z_ORDER_FACTOR: float = 4.0

# Per-type display scale (multiplies the depth scale for committed flowers)
FLOWER_DISPLAY_SCALES = {
    "morning_glory": 1.2,
}

# Collision radius of the mature footprint, in pixels
FLOWER_COLLISION_RADIUS = {
    "rose": 22.5,
    "tulip": 22.5,
    "morning_glory": 25.0,
    "orchid": 22.5,
    "strawberry": 22.5,
    "pumpkin": 35.0,
    "watermelon": 35.0,
    "apple_tree": 60.0,
}
DEFAULT_FLOWER_RADIUS: float = 22.5

CATEGORY_RADIUS_MULTIPLIERS = {
    CATEGORY_FLOWER: 1.0,
    CATEGORY_LARGE_PLANT: 1.0,
    CATEGORY_TREE: 0.6,
}

# Only list types that differ from their category multiplier, e.g. "pumpkin": 0.9
RADIUS_OVERRIDES: dict = {}

SAPLING_RADIUS_FACTOR: float = 0.7

DECOR_COLLISION_RADIUS = {
    "birdbath": 20.0,
    "garden_gnome": 20.0,
    "pink_flamingo": 15.0,
    "pond": 40.0,
    "telescope": 25.0,
    "campfire": 25.0,
    "lawnchair": 25.0,
}
DEFAULT_DECOR_RADIUS: float = 50.0

# Sapling footprint, used to keep auto-placed saplings on screen
SAPLING_BASE_WIDTH: float = 48.0
SAPLING_SIZE_FACTORS = {
    CATEGORY_FLOWER: 1.0,
    CATEGORY_LARGE_PLANT: 1.3,
    CATEGORY_TREE: 1.7,
}

# Watering ritual
WATER_COOLDOWN_HOURS: float = 6.0
WATER_COST: int = 1
REVIVE_COST_COINS: int = 10
STREAK_REWARD_EVERY_DAYS: int = 3
STREAK_REWARD_COINS: int = 5
STREAK_REWARD_WATER: int = 0
HARMONY_BONUS_COINS: int = 1
MAX_WATER: int = 3
DAILY_WATER_EARNED: int = 1
DAY_TIMEZONE: str = "UTC"

# Shop prices (in coins)
PLANT_COSTS = {
    "rose": 3,
    "tulip": 5,
    "morning_glory": 7,
    "orchid": 10,
    "pumpkin": 14,
    "watermelon": 12,
    "strawberry": 9,
    "apple_tree": 20,
}

DECOR_COSTS = {
    "birdbath": 20,
    "garden_gnome": 15,
    "pink_flamingo": 22,
    "pond": 20,
    "telescope": 25,
    "campfire": 22,
    "lawnchair": 18,
}

LANDMARK_COSTS = {
    "mountain": 30,
    "windmill": 30,
    "cooling_tower": 30,
}

REFUND_RATE: float = 0.6

FLOWER_VARIANTS = ("v1", "v2", "v3")
