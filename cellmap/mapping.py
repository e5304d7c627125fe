"""Mapping of cell ids to their refinement level, size and location.

Cells are numbered from 1. All cells of refinement level 0 come first,
ordered by x, then y, then z. They are followed by all possible cells of
refinement level 1, and so on. Indices of a cell are measured in units
of the smallest possible cell in the grid. They are counted from the
starting corner of the grid, at the corner of the cell nearest to it.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterable

__all__ = [
    "ERROR_CELL",
    "ERROR_INDEX",
    "Indices",
    "NeighborhoodItem",
    "MappingError",
    "Mapping",
]

#: Indicates a non-existing cell.
ERROR_CELL = 0

#: Indicates a non-existing index.
ERROR_INDEX = 0xFFFFFFFFFFFFFFFF

#: Indices of a cell in x, y and z direction.
Indices = tuple[int, int, int]

#: Offset of one neighbor relative to a cell, in cells of the same size.
NeighborhoodItem = tuple[int, int, int]

_UINT64_LIMIT = 1 << 64
_LENGTH_FORMAT = struct.Struct("=3Q")
_LEVEL_FORMAT = struct.Struct("=i")
_ERROR_INDICES: Indices = (ERROR_INDEX, ERROR_INDEX, ERROR_INDEX)
_NO_CELLS = (ERROR_CELL,) * 8


class MappingError(ValueError):
    """Raised when a mapping cannot be given the requested state."""


def _validate_length(length: Iterable[int]) -> tuple[int, int, int]:
    values = tuple(length)
    if len(values) != 3:
        raise MappingError(f"grid length needs 3 values, got {len(values)}")
    for value in values:
        if not isinstance(value, int) or isinstance(value, bool):
            raise MappingError(f"grid length must be integers, got {values!r}")
        if value < 1 or value >= _UINT64_LIMIT:
            raise MappingError(f"invalid grid length {values!r}")
    return values  # type: ignore[return-value]


class Mapping:
    """Maps cell ids to their refinement level, size and location."""

    def __init__(self, length: Iterable[int] | None = None) -> None:
        self._length: tuple[int, int, int] = (1, 1, 1)
        self._max_refinement_level = 0
        self._last_cell = 1
        if length is not None:
            self.set_length(length)

    def __repr__(self) -> str:
        return (
            f"Mapping(length={self._length!r}, "
            f"max_refinement_level={self._max_refinement_level})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return (
            self._length == other._length
            and self._max_refinement_level == other._max_refinement_level
        )

    @property
    def length(self) -> tuple[int, int, int]:
        """Length of the grid in cells of refinement level 0."""
        return self._length

    @property
    def _level_0_cells(self) -> int:
        x, y, z = self._length
        return x * y * z

    def _update_last_cell(self) -> None:
        total = self._level_0_cells
        self._last_cell = sum(
            total << (3 * level) for level in range(self._max_refinement_level + 1)
        )

    def set_length(self, length: Iterable[int]) -> None:
        """Set the grid length in level 0 cells; raise MappingError if invalid."""
        self._length = _validate_length(length)
        self._update_last_cell()

    def get_maximum_refinement_level(self) -> int:
        """Return the maximum refinement level of cells (0 means unrefined)."""
        return self._max_refinement_level

    def set_maximum_refinement_level(self, level: int) -> None:
        """Set the maximum refinement level, raising MappingError if too large."""
        if level < 0 or level > self.get_maximum_possible_refinement_level():
            raise MappingError(f"invalid maximum refinement level {level}")
        self._max_refinement_level = level
        self._update_last_cell()

    def get_maximum_possible_refinement_level(self) -> int:
        """Return the largest refinement level whose cell ids fit in 64 bits."""
        total = float(self._level_0_cells)
        limit = float(_UINT64_LIMIT - 1)
        level = 0
        current_last = 0.0
        while current_last <= limit:
            current_last += total * 8.0**level
            level += 1
        return level - 2

    def get_last_cell(self) -> int:
        """Return the last valid cell id."""
        return self._last_cell

    def get_cell_from_indices(self, indices: Iterable[int], refinement_level: int) -> int:
        """Return the cell of given level at given indices, or ERROR_CELL."""
        max_level = self._max_refinement_level
        index_values = tuple(indices)
        if len(index_values) != 3:
            return ERROR_CELL
        for index, size in zip(index_values, self._length):
            if index < 0 or index >= size << max_level:
                return ERROR_CELL
        if refinement_level < 0 or refinement_level > max_level:
            return ERROR_CELL

        total = self._level_0_cells
        cell = 1 + sum(total << (3 * level) for level in range(refinement_level))

        shift = max_level - refinement_level
        x, y, z = (index >> shift for index in index_values)
        level_length_x = self._length[0] << refinement_level
        level_length_y = self._length[1] << refinement_level
        return cell + x + y * level_length_x + z * level_length_x * level_length_y

    def get_indices(self, cell: int) -> Indices:
        """Return the indices of a cell, or ERROR_INDEX triple if invalid."""
        refinement_level = self.get_refinement_level(cell)
        if refinement_level < 0:
            return _ERROR_INDICES

        total = self._level_0_cells
        cell -= sum(total << (3 * level) for level in range(refinement_level))
        cell -= 1

        scale = 1 << (self._max_refinement_level - refinement_level)
        length_x = self._length[0] << refinement_level
        length_y = self._length[1] << refinement_level
        return (
            (cell % length_x) * scale,
            ((cell // length_x) % length_y) * scale,
            (cell // (length_x * length_y)) * scale,
        )

    def get_refinement_level(self, cell: int) -> int:
        """Return the refinement level of a cell, or -1 if it is invalid."""
        if cell <= ERROR_CELL or cell > self._last_cell:
            return -1
        total = self._level_0_cells
        current_last = 0
        for level in range(self._max_refinement_level + 1):
            current_last += total << (3 * level)
            if cell <= current_last:
                return level
        return -1

    def get_cell_length_in_indices(self, cell: int) -> int:
        """Return the size of a cell in indices, or ERROR_INDEX if invalid."""
        refinement_level = self.get_refinement_level(cell)
        if refinement_level < 0:
            return ERROR_INDEX
        return 1 << (self._max_refinement_level - refinement_level)

    def get_child(self, cell: int) -> int:
        """Return the first child of a cell, the cell itself at maximum level."""
        refinement_level = self.get_refinement_level(cell)
        if refinement_level < 0:
            return ERROR_CELL
        if refinement_level >= self._max_refinement_level:
            return cell
        return self.get_cell_from_indices(self.get_indices(cell), refinement_level + 1)

    def get_parent(self, cell: int) -> int:
        """Return the parent of a cell, the cell itself at level 0."""
        refinement_level = self.get_refinement_level(cell)
        if refinement_level < 0:
            return ERROR_CELL
        if refinement_level == 0:
            return cell
        return self.get_cell_from_indices(self.get_indices(cell), refinement_level - 1)

    def get_all_children(self, cell: int) -> tuple[int, ...]:
        """Return the 8 children of a cell, x fastest, or 8 ERROR_CELLs."""
        refinement_level = self.get_refinement_level(cell)
        if refinement_level < 0 or refinement_level >= self._max_refinement_level:
            return _NO_CELLS

        x, y, z = self.get_indices(cell)
        child_level = refinement_level + 1
        offset = 1 << (self._max_refinement_level - child_level)
        steps = (0, offset)
        return tuple(
            self.get_cell_from_indices((x + dx, y + dy, z + dz), child_level)
            for dz in steps
            for dy in steps
            for dx in steps
        )

    def get_siblings(self, cell: int) -> tuple[int, ...]:
        """Return a cell and its siblings; only the cell itself at level 0."""
        refinement_level = self.get_refinement_level(cell)
        if refinement_level < 0:
            return _NO_CELLS
        if refinement_level == 0:
            return (cell,) + _NO_CELLS[1:]
        return self.get_all_children(self.get_parent(cell))

    def get_level_0_parent(self, cell: int) -> int:
        """Return the refinement level 0 ancestor of a cell."""
        refinement_level = self.get_refinement_level(cell)
        if refinement_level < 0:
            return ERROR_CELL
        if refinement_level == 0:
            return cell
        return self.get_cell_from_indices(self.get_indices(cell), 0)

    def data_size(self) -> int:
        """Return the number of bytes used by the stored mapping."""
        return _LENGTH_FORMAT.size + _LEVEL_FORMAT.size

    def read(self, stream: BinaryIO) -> None:
        """Read grid length and maximum refinement level from a binary stream."""
        raw_length = stream.read(_LENGTH_FORMAT.size)
        if len(raw_length) != _LENGTH_FORMAT.size:
            raise MappingError("couldn't read length data")
        self.set_length(_LENGTH_FORMAT.unpack(raw_length))

        raw_level = stream.read(_LEVEL_FORMAT.size)
        if len(raw_level) != _LEVEL_FORMAT.size:
            raise MappingError("couldn't read maximum refinement level")
        (level,) = _LEVEL_FORMAT.unpack(raw_level)
        self.set_maximum_refinement_level(level)

    def write(self, stream: BinaryIO) -> None:
        """Write grid length and maximum refinement level to a binary stream."""
        stream.write(_LENGTH_FORMAT.pack(*self._length))
        stream.write(_LEVEL_FORMAT.pack(self._max_refinement_level))