"""Scripted events and victory goals for a play-through.

A scenario is loaded once from a JSON document::

    {"events": [{"day": 2, "name": "WeedGrowth", "row": 1, "col": 5}],
     "startingConditions": [0, 3],
     "victoryConditions": [1, 1, 0, 0, 0, 0]}

Events may also be written as ``[day, name, row, col]`` arrays.
"""

import json
import logging
from dataclasses import dataclass

from farmgrid.constants import DEFAULT_SCENARIO, MAX_WEATHER_DEGREE, MIN_WEATHER_DEGREE
from farmgrid.weather import Weather

logger = logging.getLogger(__name__)


@dataclass
class ScheduledEvent:
    day: int
    name: str
    row: int
    col: int
    completed: bool = False


def _weed_growth(session, row, col):
    session.spawn_weed(row, col)


EVENT_EFFECTS = {
    "WeedGrowth": _weed_growth,
}


def _parse_event(raw):
    if isinstance(raw, dict):
        day, name, row, col = raw["day"], raw["name"], raw["row"], raw["col"]
    else:
        day, name, row, col = raw
    day, row, col = int(day), int(row), int(col)
    if day < 0 or row < 0 or col < 0:
        raise ValueError(f"Scenario event fields must be non-negative: {raw!r}")
    return ScheduledEvent(day, str(name), row, col)


class Scenario:
    """Event timeline plus a conjunctive harvest goal.

    The scenario mirrors the current day and harvest counts; callers feed
    it through ``update_current_conditions`` rather than assigning fields.
    """

    def __init__(self, events=(), starting_conditions=(Weather.SUNNY, 3), victory_goal=()):
        self.events = sorted(events, key=lambda e: e.day)
        condition, degree = starting_conditions
        if not (MIN_WEATHER_DEGREE <= degree <= MAX_WEATHER_DEGREE):
            raise ValueError(f"Starting weather degree out of range: {degree}")
        self._starting_conditions = (Weather(condition), int(degree))
        self._victory_goal = tuple(int(g) for g in victory_goal)
        if any(g < 0 for g in self._victory_goal):
            raise ValueError("Victory goals must be non-negative")
        self._current_day = 0
        self._current_harvest = ()

    @classmethod
    def from_dict(cls, data):
        try:
            events = [_parse_event(e) for e in data.get("events", [])]
            starting = data.get("startingConditions", [Weather.SUNNY, 3])
            goal = data.get("victoryConditions", [])
            return cls(events, (int(starting[0]), int(starting[1])), goal)
        except (KeyError, TypeError, IndexError) as e:
            raise ValueError(f"Malformed scenario configuration: {e}") from e

    @classmethod
    def from_json(cls, text):
        return cls.from_dict(json.loads(text))

    @classmethod
    def from_file(cls, path):
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def default(cls):
        return cls.from_dict(DEFAULT_SCENARIO)

    def get_starting_conditions(self):
        return self._starting_conditions

    def get_victory_conditions(self):
        return self._victory_goal

    @property
    def current_day(self):
        return self._current_day

    def update_current_conditions(self, day, harvested):
        self._current_day = day
        self._current_harvest = tuple(harvested)

    def validate(self, size):
        """Reject events that would land outside a ``size`` x ``size`` grid."""
        for event in self.events:
            if event.row >= size or event.col >= size:
                raise ValueError(
                    f"Scenario event {event.name} on day {event.day} targets "
                    f"({event.row}, {event.col}) outside a {size}x{size} grid"
                )

    def check_events(self, session):
        """Fire every pending event scheduled for the current day, once."""
        fired = []
        for event in self.events:
            if event.day != self._current_day or event.completed:
                continue
            effect = EVENT_EFFECTS.get(event.name)
            if effect is None:
                logger.warning("Unknown scenario event %r on day %d", event.name, event.day)
            else:
                logger.info(
                    "Activating event %s at (%d, %d)", event.name, event.row, event.col
                )
                effect(session, event.row, event.col)
                fired.append(event)
            event.completed = True
        return fired

    def rewind(self, day):
        """Re-derive completion flags after the live day jumped (undo, redo, load)."""
        for event in self.events:
            event.completed = event.day <= day

    def victory_conditions_met(self):
        """True when every goal entry is reached by the matching harvest count."""
        for i, goal in enumerate(self._victory_goal):
            have = self._current_harvest[i] if i < len(self._current_harvest) else 0
            if have < goal:
                return False
        return True

    def progress(self):
        """``(goal, current)`` pairs, one per goal entry."""
        return [
            (goal, self._current_harvest[i] if i < len(self._current_harvest) else 0)
            for i, goal in enumerate(self._victory_goal)
        ]
