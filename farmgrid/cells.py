"""Packed cell records and the flat grid buffer that holds them.

Every cell is six unsigned bytes, laid out row-major in a single
``numpy.uint8`` buffer of ``size * size * CELL_BYTES`` bytes::

    offset + 0   plant id (0 = empty soil)
    offset + 1   row index
    offset + 2   column index
    offset + 3   water level
    offset + 4   sun level
    offset + 5   growth level

``store_cell`` and ``load_cell`` are the only functions that touch the raw
bytes; everything else goes through them.
"""

from collections import namedtuple

import numpy as np

from farmgrid.constants import CELL_BYTES, MAX_GRID_SIZE, MAX_LEVEL

Cell = namedtuple(
    "Cell", ["plant_id", "row", "col", "water_level", "sun_level", "growth_level"]
)


def empty_cell(row, col):
    """Return a cleared cell for ``(row, col)``."""
    return Cell(0, row, col, 0, 0, 0)


def _offset(size, row, col):
    if not (0 <= row < size and 0 <= col < size):
        raise IndexError(f"Cell ({row}, {col}) out of bounds for {size}x{size} grid")
    return (row * size + col) * CELL_BYTES


def new_grid(size):
    """Allocate a zeroed grid buffer for a ``size`` x ``size`` farm.

    The coordinate bytes of every record are filled in so each record is
    self-describing from the start.
    """
    if not (0 < size <= MAX_GRID_SIZE):
        raise ValueError(f"Grid size must be between 1 and {MAX_GRID_SIZE}, got {size}")
    buffer = np.zeros(size * size * CELL_BYTES, dtype=np.uint8)
    for row in range(size):
        for col in range(size):
            store_cell(buffer, size, empty_cell(row, col))
    return buffer


def grid_from_bytes(data, size):
    """Build a writable grid buffer from raw bytes, copying them."""
    expected = size * size * CELL_BYTES
    if len(data) != expected:
        raise ValueError(
            f"Grid buffer has {len(data)} bytes, expected {expected} for size {size}"
        )
    return np.frombuffer(bytes(data), dtype=np.uint8).copy()


def store_cell(buffer, size, cell):
    """Write ``cell`` into ``buffer`` at its own ``(row, col)`` position."""
    offset = _offset(size, cell.row, cell.col)
    for value in cell:
        if not (0 <= value <= MAX_LEVEL):
            raise ValueError(f"Cell field out of byte range: {cell}")
    buffer[offset:offset + CELL_BYTES] = cell


def load_cell(buffer, size, row, col):
    """Read the record stored at ``(row, col)``."""
    offset = _offset(size, row, col)
    return Cell(*(int(v) for v in buffer[offset:offset + CELL_BYTES]))


def iter_cells(buffer, size):
    """Yield every cell in row-major order."""
    for row in range(size):
        for col in range(size):
            yield load_cell(buffer, size, row, col)
