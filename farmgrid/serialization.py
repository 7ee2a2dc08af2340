"""Text encoding of snapshots for the key-value store.

A snapshot record looks like::

    {"grid": "<base64>", "time": 3, "currentWeather": [0, 4],
     "harvestedPlants": [1, 0, 0, 0, 0, 0]}

The ``states`` key holds a JSON array of records (the autosave history);
``savedGames`` holds a JSON array of ``[name, [record, ...]]`` pairs.
"""

import base64
import binascii
import json

from farmgrid.constants import CELL_BYTES, MAX_WEATHER_DEGREE, MIN_WEATHER_DEGREE
from farmgrid.snapshot import GameSnapshot
from farmgrid.weather import Weather


class CorruptSaveError(ValueError):
    """Persisted data that cannot be turned back into snapshots."""


def encode_grid(data):
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_grid(text):
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, AttributeError) as e:
        raise CorruptSaveError(f"Grid is not valid base64: {e}") from e


def snapshot_to_record(snapshot):
    return {
        "grid": encode_grid(snapshot.grid),
        "time": snapshot.day,
        "currentWeather": [int(snapshot.weather_condition), snapshot.weather_degree],
        "harvestedPlants": list(snapshot.harvest_counts),
    }


def record_to_snapshot(record, size=None, flower_count=None):
    """Decode one record, checking the grid length and counter width when given."""
    try:
        grid = decode_grid(record["grid"])
        day = int(record["time"])
        condition, degree = record["currentWeather"]
        counts = [int(c) for c in record["harvestedPlants"]]
        snapshot = GameSnapshot(grid, day, Weather(int(condition)), int(degree), counts)
    except CorruptSaveError:
        raise
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise CorruptSaveError(f"Malformed snapshot record: {e}") from e

    if not (MIN_WEATHER_DEGREE <= snapshot.weather_degree <= MAX_WEATHER_DEGREE):
        raise CorruptSaveError(f"Weather degree out of range: {snapshot.weather_degree}")
    if size is not None and len(grid) != size * size * CELL_BYTES:
        raise CorruptSaveError(
            f"Grid has {len(grid)} bytes, expected {size * size * CELL_BYTES}"
        )
    if flower_count is not None and len(counts) != flower_count:
        raise CorruptSaveError(
            f"Record has {len(counts)} harvest counters, expected {flower_count}"
        )
    return snapshot


def encode_states(states):
    return json.dumps([snapshot_to_record(s) for s in states])


def decode_states(text, size=None, flower_count=None):
    try:
        records = json.loads(text)
    except (TypeError, ValueError) as e:
        raise CorruptSaveError(f"States record is not valid JSON: {e}") from e
    if not isinstance(records, list) or not records:
        raise CorruptSaveError("States record must be a non-empty array")
    return [record_to_snapshot(r, size, flower_count) for r in records]


def encode_saved_games(saved_games):
    return json.dumps(
        [[name, [snapshot_to_record(s) for s in states]] for name, states in saved_games.items()]
    )


def decode_saved_games(text, size=None, flower_count=None):
    try:
        pairs = json.loads(text)
    except (TypeError, ValueError) as e:
        raise CorruptSaveError(f"Saved games record is not valid JSON: {e}") from e
    if not isinstance(pairs, list):
        raise CorruptSaveError("Saved games record must be an array")

    saved = {}
    for pair in pairs:
        if not isinstance(pair, list) or len(pair) != 2 or not isinstance(pair[1], list):
            raise CorruptSaveError(f"Malformed saved game entry: {pair!r}")
        name, records = pair
        if not records:
            raise CorruptSaveError(f"Saved game {name!r} has no states")
        saved[str(name)] = [record_to_snapshot(r, size, flower_count) for r in records]
    return saved
