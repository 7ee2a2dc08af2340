"""Immutable captures of the live game state."""

from dataclasses import dataclass

from farmgrid.weather import Weather


@dataclass(frozen=True)
class GameSnapshot:
    """Grid bytes, day counter, weather and harvest counts at one moment.

    ``grid`` is stored as ``bytes`` and ``harvest_counts`` as a tuple, so a
    snapshot can never share a mutable buffer with the live state or with
    another snapshot.
    """

    grid: bytes
    day: int
    weather_condition: Weather
    weather_degree: int
    harvest_counts: tuple

    def __post_init__(self):
        # Normalise whatever buffer-like objects the caller handed in.
        object.__setattr__(self, "grid", bytes(self.grid))
        object.__setattr__(self, "weather_condition", Weather(self.weather_condition))
        object.__setattr__(self, "harvest_counts", tuple(int(c) for c in self.harvest_counts))
        if self.day < 0:
            raise ValueError(f"Day counter must be non-negative, got {self.day}")

    @classmethod
    def capture(cls, grid, day, weather_condition, weather_degree, harvest_counts):
        """Snapshot a live numpy grid buffer and counters."""
        return cls(grid.tobytes(), day, weather_condition, weather_degree, harvest_counts)

    def copy(self):
        return GameSnapshot(
            bytes(self.grid),
            self.day,
            self.weather_condition,
            self.weather_degree,
            tuple(self.harvest_counts),
        )
