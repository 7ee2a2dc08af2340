"""Defaults shared across the farmgrid engine."""

# --- Grid ---
GAME_SIZE = 7
CELL_BYTES = 6
CELL_SIZE = 64  # pixels per cell edge
MAX_LEVEL = 255
MAX_GRID_SIZE = 256  # row/col indices are stored as single bytes

# --- Growth ---
MAX_PLANT_GROWTH = 5
WEED_SPAWN_CHANCE = 0.07

# --- Weather policy ---
SUNNY_CHANCE = 0.5
RAIN_SUN_CHANCE = 0.2
SUNNY_DRY_CHANCE = 0.9
MIN_WEATHER_DEGREE = 1
MAX_WEATHER_DEGREE = 6

# --- Persistence keys ---
STATES_KEY = "states"
SAVED_GAMES_KEY = "savedGames"

# flower [name] [color] [sunReq] [waterReq] [vibeReq]
# weed [name] [color]
DEFAULT_PLANT_DSL = """flower Sunflower yellow 3 2 0
flower Rose pink 2 3 0
flower Daffodil #FFD700 3 2 0
flower Lily #FFFFFF 2 3 0
flower Marigold #FFA500 4 2 0
flower Fuchsia #FF00FF 3 3 0
weed crabgrass green"""

DEFAULT_SCENARIO = {
    "events": [
        {"day": 2, "name": "WeedGrowth", "row": 1, "col": 5},
        {"day": 4, "name": "WeedGrowth", "row": 5, "col": 1},
        {"day": 6, "name": "WeedGrowth", "row": 3, "col": 4},
    ],
    "startingConditions": [0, 3],
    "victoryConditions": [1, 1, 0, 0, 0, 0],
}
