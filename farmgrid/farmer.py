"""The player's avatar: a pixel position on a wrapping grid and a satchel."""

from farmgrid.constants import CELL_SIZE, GAME_SIZE

DIRECTIONS = ("N", "E", "S", "W")
_ALIASES = {"up": "N", "right": "E", "down": "S", "left": "W"}


class Farmer:
    """Avatar that walks one cell at a time and wraps around the grid edges.

    Position is kept in pixels; the current cell is derived by floor
    division with ``cell_size``.
    """

    def __init__(self, x=None, y=None, size=GAME_SIZE, cell_size=CELL_SIZE, plants=None):
        self.size = size
        self.cell_size = cell_size
        # Start in the middle of the field
        self.x = size * cell_size / 2 if x is None else x
        self.y = size * cell_size / 2 if y is None else y
        self.plants = [] if plants is None else plants

    @property
    def row(self):
        return int(self.y // self.cell_size)

    @property
    def col(self):
        return int(self.x // self.cell_size)

    @property
    def cell_position(self):
        return self.row, self.col

    def move(self, direction):
        """Shift by one cell-width; stepping off an edge lands on the opposite edge."""
        direction = _ALIASES.get(str(direction).lower(), str(direction).upper())
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction {direction!r}")
        step = self.cell_size
        wrap = (self.size - 1) * step

        if direction == "N":
            self.y += -step if self.row > 0 else wrap
        elif direction == "S":
            self.y += step if self.row < self.size - 1 else -wrap
        elif direction == "E":
            self.x += step if self.col < self.size - 1 else -wrap
        elif direction == "W":
            self.x += -step if self.col > 0 else wrap
        return self.cell_position

    def collect(self, plant):
        self.plants.append(plant)
