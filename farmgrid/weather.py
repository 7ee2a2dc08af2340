"""Daily weather roll and its effect on soil and plants.

The probabilities here are game policy: a rainy day lets full sunlight
through 20% of the time, and a sunny day dries the soil 90% of the time.
"""

import logging
from enum import IntEnum

from farmgrid.cells import load_cell, store_cell
from farmgrid.constants import (
    MAX_LEVEL,
    MAX_PLANT_GROWTH,
    MAX_WEATHER_DEGREE,
    MIN_WEATHER_DEGREE,
    RAIN_SUN_CHANCE,
    SUNNY_CHANCE,
    SUNNY_DRY_CHANCE,
)

logger = logging.getLogger(__name__)


class Weather(IntEnum):
    SUNNY = 0
    RAINY = 1


def roll_weather(rng):
    """Draw tomorrow's ``(condition, degree)``: 50/50 sun or rain, degree uniform in 1..6."""
    condition = Weather.SUNNY if rng.random() < SUNNY_CHANCE else Weather.RAINY
    degree = int(rng.integers(MIN_WEATHER_DEGREE, MAX_WEATHER_DEGREE + 1))
    logger.debug("Weather rolled: %s, degree %d", condition.name.lower(), degree)
    return condition, degree


def apply_weather(cell, condition, degree, rng):
    """Return ``cell`` with water and sun levels updated for one day of weather."""
    water, sun = cell.water_level, cell.sun_level
    if condition == Weather.RAINY:
        water = min(MAX_LEVEL, water + degree)
        sun = degree if rng.random() < RAIN_SUN_CHANCE else degree // 2
    elif condition == Weather.SUNNY:
        if rng.random() < SUNNY_DRY_CHANCE:
            water = 1
        sun = degree
    return cell._replace(water_level=water, sun_level=sun)


def simulate_weather(grid, size, condition, degree, rng):
    """Apply one day of weather to every cell of ``grid``."""
    for row in range(size):
        for col in range(size):
            cell = load_cell(grid, size, row, col)
            store_cell(grid, size, apply_weather(cell, condition, degree, rng))


def simulate_growth(grid, size, row, col, catalog, max_growth=MAX_PLANT_GROWTH):
    """Advance growth of the plant at ``(row, col)`` by at most one tick.

    Empty soil and weeds never grow. Growth saturates at ``max_growth``;
    a harvest-ready plant is left unchanged.
    """
    cell = load_cell(grid, size, row, col)
    plant = catalog.get(cell.plant_id)
    if plant is None or catalog.is_weed(cell.plant_id):
        return cell

    if cell.sun_level >= plant.sun_requisite and cell.water_level >= plant.water_requisite:
        if cell.growth_level < max_growth:
            cell = cell._replace(growth_level=cell.growth_level + 1)
            store_cell(grid, size, cell)
            logger.debug(
                "%s in cell (%d, %d) is growing! Growth level: %d",
                plant.name, row, col, cell.growth_level,
            )
        else:
            logger.debug("%s in cell (%d, %d) is ready for harvest", plant.name, row, col)
    return cell


def is_harvest_ready(cell, max_growth=MAX_PLANT_GROWTH):
    return cell.plant_id != 0 and cell.growth_level >= max_growth
