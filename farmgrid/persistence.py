"""Key-value persistence shell around a ``GameSession``.

The session never touches storage itself. An ``Autosaver`` subscribed to
the session rewrites the ``states`` record after every state change and
the ``savedGames`` record after every manual save. ``restore_session``
rebuilds a session from a store, falling back to a fresh game when the
stored data is missing or unreadable.
"""

import json
import logging
import os

from farmgrid.catalog import PlantCatalog
from farmgrid.constants import GAME_SIZE, SAVED_GAMES_KEY, STATES_KEY
from farmgrid.serialization import (
    CorruptSaveError,
    decode_saved_games,
    decode_states,
    encode_saved_games,
    encode_states,
)
from farmgrid.session import RESET, SAVES_CHANGED, STATE_CHANGED, GameSession

logger = logging.getLogger(__name__)


class MemoryStore:
    """In-process string store with the get/set/remove surface of browser storage."""

    def __init__(self, data=None):
        self.data = dict(data or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def remove(self, key):
        self.data.pop(key, None)


class JsonFileStore(MemoryStore):
    """String store kept in a single JSON object on disk."""

    def __init__(self, path):
        self.path = path
        super().__init__(self._read())

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            # An unreadable file behaves like an empty store.
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(loaded, dict):
            logger.warning("Ignoring store %s: top level is not an object", self.path)
            return {}
        return {k: v for k, v in loaded.items() if isinstance(v, str)}

    def _write(self):
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)
        os.replace(tmp, self.path)

    def set(self, key, value):
        super().set(key, value)
        self._write()

    def remove(self, key):
        super().remove(key)
        self._write()


class Autosaver:
    """Session listener that mirrors history and saved games into a store."""

    def __init__(self, store):
        self.store = store

    def __call__(self, session, event):
        if event == STATE_CHANGED:
            self.store.set(STATES_KEY, encode_states(session.history.states))
        elif event == SAVES_CHANGED:
            self.store.set(SAVED_GAMES_KEY, encode_saved_games(session.saved_games))
        elif event == RESET:
            self.store.remove(STATES_KEY)
            self.store.remove(SAVED_GAMES_KEY)


def _load_saved_games(store, size, flower_count):
    text = store.get(SAVED_GAMES_KEY)
    if not text:
        return {}
    try:
        return decode_saved_games(text, size, flower_count)
    except CorruptSaveError as e:
        logger.warning("Discarding corrupt saved games: %s", e)
        return {}


def _load_states(store, size, flower_count):
    text = store.get(STATES_KEY)
    if not text:
        return None
    try:
        return decode_states(text, size, flower_count)
    except CorruptSaveError as e:
        logger.warning("Discarding corrupt autosave: %s", e)
        return None


def restore_session(store, **session_kwargs):
    """Resume the autosaved play-through in ``store`` or start a new one."""
    if session_kwargs.get("catalog") is None:
        session_kwargs["catalog"] = PlantCatalog.default()
    size = session_kwargs.get("size", GAME_SIZE)
    flower_count = len(session_kwargs["catalog"].flowers)

    saved_games = _load_saved_games(store, size, flower_count)
    states = _load_states(store, size, flower_count)
    if states is None:
        logger.info("No autosave found; starting a new game")
        session = GameSession.new_game(**session_kwargs)
        session.saved_games = saved_games
        return session

    logger.info("Resuming autosave at day %d", states[-1].day)
    return GameSession.from_states(states, saved_games=saved_games, **session_kwargs)


def open_session(store, **session_kwargs):
    """``restore_session`` plus an ``Autosaver`` subscribed to the result."""
    session = restore_session(store, **session_kwargs)
    session.subscribe(Autosaver(store))
    return session
