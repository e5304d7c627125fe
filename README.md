# cellmap

`cellmap` numbers the cells of a three-dimensional, adaptively refined
Cartesian grid and converts between cell ids and their logical position
and size.

A grid has some number of unrefined (level 0) cells in each dimension.
Each refinement level splits a cell into 8 children. Cell ids start at 1:
first come all level 0 cells, then all possible level 1 cells, and so on,
up to the grid's maximum refinement level. Within a level, cells are
ordered by x first, then y, then z. Id `0` (`ERROR_CELL`) means "no cell".

Indices are given in units of the smallest possible cell. A cell's indices
are those of its corner nearest the start of the grid.

## Installation

```
pip install cellmap
```

## Usage

```python
from cellmap.mapping import Mapping

mapping = Mapping((2, 1, 1))          # 2 x 1 x 1 level 0 cells
mapping.set_maximum_refinement_level(1)

mapping.get_last_cell()               # 18
mapping.get_refinement_level(5)       # 1
mapping.get_indices(2)                # (2, 0, 0)
mapping.get_parent(5)                 # 2
mapping.get_level_0_parent(5)         # 2
mapping.get_child(1)                  # 3
mapping.get_all_children(1)           # (3, 4, 7, 8, 11, 12, 15, 16)
mapping.get_siblings(4)               # same eight cells
mapping.get_cell_length_in_indices(1) # 2
mapping.get_cell_from_indices((2, 0, 0), 0)  # 2
```

`Mapping()` with no argument is a grid of one level 0 cell with maximum
refinement level 0. `mapping.length` gives the grid length in level 0 cells,
and `get_maximum_possible_refinement_level()` the largest level whose cell
ids still fit in 64 bits.

A level 0 cell is its own parent, and a cell at the maximum refinement
level is its own child. `get_siblings` of a level 0 cell returns the cell
followed by seven `ERROR_CELL`s.

Lookups of cells or indices that fall outside the grid return error values
instead of raising: `ERROR_CELL` (`0`) for a cell, `-1` for a refinement
level, `ERROR_INDEX` (`0xFFFFFFFFFFFFFFFF`) for a cell length, a triple of
`ERROR_INDEX` for indices, and eight `ERROR_CELL`s for children or siblings.
Setting an invalid grid length, or a maximum refinement level that is
negative or beyond what 64-bit cell ids can hold, raises `MappingError`
(a subclass of `ValueError`).

### Saving and loading

The grid's length and maximum refinement level can be written to and read
from a binary stream: three unsigned 64-bit lengths followed by a 32-bit
signed refinement level, in native byte order.

```python
import io

buffer = io.BytesIO()
mapping.write(buffer)
buffer.seek(0)

restored = Mapping()
restored.read(buffer)
assert restored == mapping
assert mapping.data_size() == 28
```

`read` raises `MappingError` if the stream is truncated or holds values
the grid cannot accept.

## What it does not do

`cellmap` only handles cell numbering. It keeps no cell data, does not
track which cells currently exist or are refined, has no geometry
(physical coordinates), neighbor search or parallel distribution, and
provides no command-line tool.

## Running the tests

```
pip install "cellmap[test]"
pytest
```