import json

import pytest

from farmgrid.serialization import (
    CorruptSaveError,
    decode_grid,
    decode_saved_games,
    decode_states,
    encode_grid,
    encode_saved_games,
    encode_states,
    record_to_snapshot,
    snapshot_to_record,
)
from farmgrid.snapshot import GameSnapshot
from farmgrid.weather import Weather

GRID_LEN = 2 * 2 * 6


@pytest.mark.parametrize(
    "data",
    [
        bytes(range(256)),
        bytes(GRID_LEN),
        b"\xff" * GRID_LEN,
        b"",
        bytes(reversed(range(256))) * 3,
    ],
)
def test_grid_text_encoding_is_lossless(data):
    text = encode_grid(data)
    assert text.isascii()
    assert decode_grid(text) == data


def test_snapshot_record_shape():
    snapshot = GameSnapshot(bytes(GRID_LEN), 4, Weather.RAINY, 6, (2, 0))
    record = snapshot_to_record(snapshot)
    assert record == {
        "grid": encode_grid(bytes(GRID_LEN)),
        "time": 4,
        "currentWeather": [1, 6],
        "harvestedPlants": [2, 0],
    }
    assert record_to_snapshot(record, size=2, flower_count=2) == snapshot


def test_states_survive_json():
    states = [
        GameSnapshot(bytes(GRID_LEN), 0, Weather.SUNNY, 3, (0, 0)),
        GameSnapshot(b"\xff" * GRID_LEN, 1, Weather.RAINY, 1, (1, 0)),
    ]
    assert decode_states(encode_states(states), size=2, flower_count=2) == states


def test_saved_games_survive_json():
    saved = {
        "first": [GameSnapshot(bytes(GRID_LEN), 0, Weather.SUNNY, 3, (0, 0))],
        "second": [
            GameSnapshot(bytes(GRID_LEN), 0, Weather.SUNNY, 3, (0, 0)),
            GameSnapshot(bytes(range(GRID_LEN)), 2, Weather.RAINY, 2, (0, 1)),
        ],
    }
    text = encode_saved_games(saved)
    assert json.loads(text)[0][0] == "first"
    assert decode_saved_games(text, size=2) == saved


def good_record(**overrides):
    record = {
        "grid": encode_grid(bytes(GRID_LEN)),
        "time": 1,
        "currentWeather": [0, 3],
        "harvestedPlants": [0, 0],
    }
    record.update(overrides)
    return record


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "{}",
        "[]",
        json.dumps([good_record(grid="***")]),
        json.dumps([good_record(grid=encode_grid(bytes(GRID_LEN - 1)))]),
        json.dumps([good_record(time=-1)]),
        json.dumps([good_record(currentWeather=[2, 3])]),
        json.dumps([good_record(currentWeather=[0, 9])]),
        json.dumps([good_record(currentWeather=[0])]),
        json.dumps([good_record(harvestedPlants=[0])]),
        json.dumps([{"grid": encode_grid(bytes(GRID_LEN))}]),
        json.dumps(["record"]),
        json.dumps([good_record()]).replace('"time": 1,', '"time": Infinity,'),
    ],
)
def test_corrupt_states_are_reported(text):
    with pytest.raises(CorruptSaveError):
        decode_states(text, size=2, flower_count=2)


@pytest.mark.parametrize(
    "text",
    [
        "nope",
        json.dumps({"a": []}),
        json.dumps([["a"]]),
        json.dumps([["a", []]]),
        json.dumps([["a", [good_record(time="x")]]]),
    ],
)
def test_corrupt_saved_games_are_reported(text):
    with pytest.raises(CorruptSaveError):
        decode_saved_games(text, size=2, flower_count=2)
