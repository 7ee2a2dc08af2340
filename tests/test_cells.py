import numpy as np
import pytest

from farmgrid.cells import (
    Cell,
    empty_cell,
    grid_from_bytes,
    iter_cells,
    load_cell,
    new_grid,
    store_cell,
)
from farmgrid.constants import CELL_BYTES


@pytest.mark.parametrize(
    "cell",
    [
        Cell(0, 0, 0, 0, 0, 0),
        Cell(1, 3, 3, 2, 3, 5),
        Cell(255, 6, 6, 255, 255, 255),
        Cell(7, 6, 0, 128, 1, 0),
    ],
)
def test_store_then_load_returns_same_cell(cell):
    grid = new_grid(7)
    store_cell(grid, 7, cell)
    assert load_cell(grid, 7, cell.row, cell.col) == cell


def test_largest_grid_stores_corner_cell():
    grid = new_grid(256)
    cell = Cell(255, 255, 255, 255, 255, 255)
    store_cell(grid, 256, cell)
    assert load_cell(grid, 256, 255, 255) == cell
    assert grid.nbytes == 256 * 256 * CELL_BYTES


def test_record_layout_is_row_major():
    grid = new_grid(3)
    store_cell(grid, 3, Cell(4, 1, 2, 10, 20, 3))
    offset = (1 * 3 + 2) * CELL_BYTES
    assert grid[offset:offset + CELL_BYTES].tolist() == [4, 1, 2, 10, 20, 3]


def test_store_only_touches_its_own_record():
    grid = new_grid(4)
    before = grid.copy()
    store_cell(grid, 4, Cell(2, 2, 1, 9, 9, 9))
    changed = np.flatnonzero(grid != before)
    start = (2 * 4 + 1) * CELL_BYTES
    assert set(changed.tolist()) <= set(range(start, start + CELL_BYTES))


def test_new_grid_records_describe_their_coordinates():
    grid = new_grid(5)
    for cell in iter_cells(grid, 5):
        assert cell == empty_cell(cell.row, cell.col)
    assert grid.dtype == np.uint8
    assert len(grid) == 5 * 5 * CELL_BYTES


@pytest.mark.parametrize("row,col", [(7, 0), (0, 7), (-1, 0), (0, -1)])
def test_out_of_range_coordinates_raise_index_error(row, col):
    grid = new_grid(7)
    with pytest.raises(IndexError):
        load_cell(grid, 7, row, col)
    with pytest.raises(IndexError):
        store_cell(grid, 7, Cell(0, row, col, 0, 0, 0))


def test_field_outside_byte_range_is_rejected():
    grid = new_grid(7)
    with pytest.raises(ValueError):
        store_cell(grid, 7, Cell(0, 1, 1, 256, 0, 0))


@pytest.mark.parametrize("size", [0, 257])
def test_grid_size_limits(size):
    with pytest.raises(ValueError):
        new_grid(size)


def test_grid_from_bytes_copies_and_checks_length():
    data = bytes(range(6)) * 4
    grid = grid_from_bytes(data, 2)
    grid[0] = 99
    assert data[0] == 0

    with pytest.raises(ValueError):
        grid_from_bytes(data[:-1], 2)
