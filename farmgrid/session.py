"""The game-state engine: one live farm plus its history.

A ``GameSession`` owns the grid buffer, day counter, weather, harvest
counters, undo/redo history, saved games and the farmer. Adapters call
its intent methods (``move``, ``interact``, ``advance_day``, ``undo``,
``redo``, ``save``, ``load``, ``reset_all``) and listen for notifications:

    session.subscribe(lambda session, event: ...)

``event`` is ``"state_changed"`` after any change to live state,
``"saves_changed"`` after a manual save, and ``"reset"`` after the whole
game was wiped.
"""

import logging
from datetime import datetime

import numpy as np

from farmgrid.catalog import PlantCatalog
from farmgrid.cells import empty_cell, grid_from_bytes, load_cell, new_grid, store_cell
from farmgrid.constants import (
    CELL_SIZE,
    GAME_SIZE,
    MAX_PLANT_GROWTH,
    MAX_WEATHER_DEGREE,
    MIN_WEATHER_DEGREE,
    WEED_SPAWN_CHANCE,
)
from farmgrid.farmer import Farmer
from farmgrid.history import History
from farmgrid.scenario import Scenario
from farmgrid.snapshot import GameSnapshot
from farmgrid.weather import Weather, roll_weather, simulate_growth, simulate_weather

logger = logging.getLogger(__name__)

STATE_CHANGED = "state_changed"
SAVES_CHANGED = "saves_changed"
RESET = "reset"

# interact() outcomes
PLANTED = "planted"
REJECTED = "rejected"
REAPED = "reaped"
HARVESTED = "harvested"
DECLINED = "declined"


def _checked_weather(weather):
    """Normalise a ``(condition, degree)`` override or raise ``ValueError``."""
    try:
        condition, degree = weather
        condition, degree = Weather(int(condition)), int(degree)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"Invalid weather override {weather!r}: {e}") from None
    if not (MIN_WEATHER_DEGREE <= degree <= MAX_WEATHER_DEGREE):
        raise ValueError(
            f"Weather degree must be in {MIN_WEATHER_DEGREE}..{MAX_WEATHER_DEGREE}, got {degree}"
        )
    return condition, degree


class GameSession:
    def __init__(
        self,
        size=GAME_SIZE,
        catalog=None,
        scenario=None,
        rng=None,
        max_growth=MAX_PLANT_GROWTH,
        cell_size=CELL_SIZE,
    ):
        self.size = size
        self.catalog = catalog if catalog is not None else PlantCatalog.default()
        self.scenario = scenario if scenario is not None else Scenario.default()
        self.scenario.validate(size)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_growth = max_growth
        self.cell_size = cell_size

        self._listeners = []
        self.saved_games = {}
        self.farmer = Farmer(size=size, cell_size=cell_size)
        self.history = History()
        self._victory_announced = False
        self._reset_live_state()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new_game(cls, **kwargs):
        """A fresh play-through: random weeds, scenario weather, initial snapshot."""
        session = cls(**kwargs)
        session._start_fresh()
        return session

    @classmethod
    def from_states(cls, states, saved_games=None, **kwargs):
        """Resume a play-through from its history; the last state becomes live."""
        session = cls(**kwargs)
        session.history.replace(states)
        session.saved_games = {
            name: [s.copy() for s in snapshots] for name, snapshots in (saved_games or {}).items()
        }
        session._apply(session.history.current)
        session._sync_scenario()
        return session

    def _reset_live_state(self):
        self.grid = new_grid(self.size)
        self.day = 0
        self.weather_condition, self.weather_degree = self.scenario.get_starting_conditions()
        self.harvest_counts = [0] * len(self.catalog.flowers)

    def _start_fresh(self):
        self._reset_live_state()
        weed_id = self.catalog.default_weed_id
        if weed_id is not None:
            for row in range(self.size):
                for col in range(self.size):
                    if self.rng.random() < WEED_SPAWN_CHANCE:
                        store_cell(self.grid, self.size, empty_cell(row, col)._replace(plant_id=weed_id))
        simulate_weather(
            self.grid, self.size, self.weather_condition, self.weather_degree, self.rng
        )
        self.history = History()
        self.history.push(self.snapshot())
        self.scenario.rewind(self.day)
        self._victory_announced = False
        self._sync_scenario()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener):
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener):
        self._listeners.remove(listener)

    def _notify(self, event):
        for listener in list(self._listeners):
            listener(self, event)

    def _state_changed(self):
        self._sync_scenario()
        self._notify(STATE_CHANGED)

    def _sync_scenario(self):
        self.scenario.update_current_conditions(self.day, self.harvest_counts)
        if self.victory and not self._victory_announced:
            logger.info("Scenario complete on day %d", self.day)
            self._victory_announced = True
        elif not self.victory:
            self._victory_announced = False

    @property
    def victory(self):
        return self.scenario.victory_conditions_met()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self):
        return GameSnapshot.capture(
            self.grid, self.day, self.weather_condition, self.weather_degree, self.harvest_counts
        )

    def _apply(self, snapshot):
        self.grid = grid_from_bytes(snapshot.grid, self.size)
        self.day = snapshot.day
        self.weather_condition = snapshot.weather_condition
        self.weather_degree = snapshot.weather_degree
        self.harvest_counts = list(snapshot.harvest_counts)
        self.scenario.rewind(self.day)

    def apply_state(self, snapshot):
        """Replace live state with a copy of ``snapshot`` and notify."""
        self._apply(snapshot)
        self._state_changed()

    def _record(self):
        self.history.record(self.snapshot())
        self._state_changed()

    # ------------------------------------------------------------------
    # Cells
    # ------------------------------------------------------------------

    def get_cell(self, row, col):
        return load_cell(self.grid, self.size, row, col)

    def current_cell(self):
        return self.get_cell(*self.farmer.cell_position)

    def spawn_weed(self, row, col):
        weed_id = self.catalog.default_weed_id
        if weed_id is None:
            logger.warning("No weed in the catalog; nothing spawned at (%d, %d)", row, col)
            return
        store_cell(self.grid, self.size, empty_cell(row, col)._replace(plant_id=weed_id))

    def describe_cell(self, row, col):
        cell = self.get_cell(row, col)
        plant = self.catalog.get(cell.plant_id)
        if plant is None:
            return f"Cell [{row},{col}], no plant"
        return (
            f"Cell [{row},{col}]. Plant type: {plant.name}. Water: {cell.water_level}. "
            f"Sun: {cell.sun_level}. Growth: {cell.growth_level}"
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def move(self, direction):
        return self.farmer.move(direction)

    def interact(self, plant_name=None, confirm=True):
        """Plant on empty soil or reap an occupied cell under the farmer.

        ``confirm`` is a bool or a callable taking the cell; returning a
        falsy value abandons the reap with no side effects.
        """
        cell = self.current_cell()
        if cell.plant_id == 0:
            return self.plant(cell.row, cell.col, plant_name)
        confirmed = confirm(cell) if callable(confirm) else confirm
        if not confirmed:
            return DECLINED
        return self.reap(cell.row, cell.col)

    def plant(self, row, col, plant_name):
        cell = self.get_cell(row, col)
        if cell.plant_id != 0:
            logger.warning("Cell (%d, %d) is already occupied", row, col)
            return REJECTED
        plant_id = self.catalog.id_for(plant_name)
        if plant_id is None or self.catalog.is_weed(plant_id):
            logger.warning("Invalid plant selection: %r", plant_name)
            return REJECTED

        store_cell(self.grid, self.size, empty_cell(row, col)._replace(plant_id=plant_id))
        logger.info("Planted %s in cell (%d, %d)", self.catalog.get(plant_id).name, row, col)
        self._record()
        return PLANTED

    def reap(self, row, col):
        cell = self.get_cell(row, col)
        plant = self.catalog.get(cell.plant_id)
        if plant is None:
            logger.warning("Nothing to reap in cell (%d, %d)", row, col)
            return REJECTED

        outcome = REAPED
        if self.catalog.is_flower(cell.plant_id) and cell.growth_level >= self.max_growth:
            index = self.catalog.flower_index(cell.plant_id)
            self.harvest_counts[index] += 1
            self.farmer.collect(plant)
            outcome = HARVESTED
            logger.info(
                "Harvested %s! %d in inventory", plant.name, self.harvest_counts[index]
            )

        logger.info("Reaped the %s plant in cell (%d, %d)", plant.name, row, col)
        store_cell(self.grid, self.size, empty_cell(row, col))
        self._record()
        return outcome

    def advance_day(self, weather=None):
        """Roll weather (or use the ``(condition, degree)`` override) and grow the farm."""
        if weather is None:
            condition, degree = roll_weather(self.rng)
        else:
            condition, degree = _checked_weather(weather)

        self.history.clear_redo()
        self.day += 1
        self.weather_condition, self.weather_degree = condition, degree
        logger.info(
            "New day %d: weather %s, severity %d",
            self.day, self.weather_condition.name.lower(), self.weather_degree,
        )

        simulate_weather(
            self.grid, self.size, self.weather_condition, self.weather_degree, self.rng
        )
        for row in range(self.size):
            for col in range(self.size):
                simulate_growth(self.grid, self.size, row, col, self.catalog, self.max_growth)

        self.scenario.update_current_conditions(self.day, self.harvest_counts)
        self.scenario.check_events(self)
        self._record()

    def undo(self):
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self.apply_state(snapshot)
        return True

    def redo(self):
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self.apply_state(snapshot)
        return True

    def save(self, name=None):
        """Store the current history under ``name`` and return the name used."""
        if not name:
            name = f"saved_{datetime.now():%Y-%m-%d_%H-%M-%S}"
        self.saved_games[name] = self.history.export()
        logger.info("Game saved as %r", name)
        self._notify(SAVES_CHANGED)
        return name

    def saved_game_names(self):
        return list(self.saved_games)

    def load(self, name):
        if name not in self.saved_games:
            logger.warning("No saved game named %r", name)
            return False
        self.history.replace(self.saved_games[name])
        logger.info("Loaded saved game %r", name)
        self.apply_state(self.history.current.copy())
        return True

    def reset_all(self, confirm=True):
        """Wipe saves and history and start over; ``confirm`` may be a callable."""
        confirmed = confirm() if callable(confirm) else confirm
        if not confirmed:
            return False
        self.saved_games.clear()
        self.farmer = Farmer(size=self.size, cell_size=self.cell_size)
        self._start_fresh()
        logger.info("All game data deleted; new game started")
        self._notify(RESET)
        return True
