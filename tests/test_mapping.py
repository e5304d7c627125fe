import io
import struct

import pytest

from cellmap.mapping import ERROR_CELL, ERROR_INDEX, Mapping, MappingError


def make(length, level):
    mapping = Mapping(length)
    mapping.set_maximum_refinement_level(level)
    return mapping


def all_cells(mapping):
    return range(1, mapping.get_last_cell() + 1)


def test_default_mapping():
    mapping = Mapping()
    assert mapping.length == (1, 1, 1)
    assert mapping.get_maximum_refinement_level() == 0
    assert mapping.get_last_cell() == 1


def test_documented_indices_example():
    mapping = make((2, 1, 1), 1)
    assert mapping.get_indices(2) == (2, 0, 0)
    assert mapping.get_indices(8) == (1, 1, 0)
    assert mapping.get_last_cell() == 18


def test_children_of_level_0_cells():
    mapping = Mapping((2, 1, 1))
    mapping.set_maximum_refinement_level(mapping.get_maximum_possible_refinement_level())
    assert mapping.get_all_children(2) == (5, 6, 9, 10, 13, 14, 17, 18)
    assert mapping.get_all_children(1) == (3, 4, 7, 8, 11, 12, 15, 16)
    assert mapping.get_all_children(3) == (19, 20, 27, 28, 51, 52, 59, 60)


def test_parent_and_siblings():
    mapping = make((2, 1, 1), 3)
    children = mapping.get_all_children(2)
    for child in children:
        assert mapping.get_parent(child) == 2
        assert mapping.get_siblings(child) == children
        assert mapping.get_level_0_parent(child) == 2
    assert mapping.get_level_0_parent(51) == 1
    assert mapping.get_siblings(1) == (1,) + (ERROR_CELL,) * 7
    assert mapping.get_parent(1) == 1


def test_child_is_first_of_all_children():
    mapping = make((3, 2, 2), 2)
    for cell in all_cells(mapping):
        children = mapping.get_all_children(cell)
        if mapping.get_refinement_level(cell) < 2:
            assert mapping.get_child(cell) == children[0]
        else:
            assert mapping.get_child(cell) == cell
            assert children == (ERROR_CELL,) * 8


def test_indices_round_trip():
    mapping = make((3, 2, 2), 2)
    for cell in all_cells(mapping):
        level = mapping.get_refinement_level(cell)
        assert 0 <= level <= 2
        assert mapping.get_cell_from_indices(mapping.get_indices(cell), level) == cell


def test_cell_length_halves_with_each_level():
    mapping = make((2, 2, 1), 3)
    for cell in all_cells(mapping):
        length = mapping.get_cell_length_in_indices(cell)
        if mapping.get_refinement_level(cell) > 0:
            assert mapping.get_cell_length_in_indices(mapping.get_parent(cell)) == 2 * length
        else:
            assert length == 1 << mapping.get_maximum_refinement_level()


def test_invalid_cells():
    mapping = make((2, 1, 1), 1)
    last = mapping.get_last_cell()
    for cell in (ERROR_CELL, last + 1):
        assert mapping.get_refinement_level(cell) == -1
        assert mapping.get_indices(cell) == (ERROR_INDEX,) * 3
        assert mapping.get_cell_length_in_indices(cell) == ERROR_INDEX
        assert mapping.get_parent(cell) == ERROR_CELL
        assert mapping.get_child(cell) == ERROR_CELL
        assert mapping.get_level_0_parent(cell) == ERROR_CELL
        assert mapping.get_siblings(cell) == (ERROR_CELL,) * 8
        assert mapping.get_all_children(cell) == (ERROR_CELL,) * 8


def test_cell_from_invalid_indices():
    mapping = make((2, 1, 1), 1)
    assert mapping.get_cell_from_indices((4, 0, 0), 0) == ERROR_CELL
    assert mapping.get_cell_from_indices((0, 2, 0), 0) == ERROR_CELL
    assert mapping.get_cell_from_indices((0, 0, 0), -1) == ERROR_CELL
    assert mapping.get_cell_from_indices((0, 0, 0), 2) == ERROR_CELL
    assert mapping.get_cell_from_indices((3, 1, 1), 1) == mapping.get_last_cell()


def test_maximum_refinement_level_limits():
    mapping = Mapping((100, 200, 300))
    possible = mapping.get_maximum_possible_refinement_level()
    mapping.set_maximum_refinement_level(possible)
    assert mapping.get_maximum_refinement_level() == possible
    assert mapping.get_last_cell() < 2**64
    with pytest.raises(MappingError):
        mapping.set_maximum_refinement_level(possible + 1)
    assert mapping.get_maximum_refinement_level() == possible


@pytest.mark.parametrize("length", [(0, 1, 1), (1, 1), (1, 2, 3, 4), (1, -2, 1)])
def test_invalid_length(length):
    with pytest.raises(MappingError):
        Mapping(length)


def test_set_length_updates_last_cell():
    mapping = Mapping()
    mapping.set_length((2, 1, 1))
    mapping.set_maximum_refinement_level(1)
    assert mapping.get_last_cell() == 18
    mapping.set_length((1, 1, 1))
    assert mapping.get_last_cell() == 9


def test_write_read_round_trip():
    original = make((4, 5, 6), 2)
    buffer = io.BytesIO()
    original.write(buffer)
    assert original.data_size() == 28
    assert buffer.getvalue() == struct.pack("=3Qi", 4, 5, 6, 2)

    buffer.seek(0)
    restored = Mapping()
    restored.read(buffer)
    assert restored == original
    assert restored.get_last_cell() == original.get_last_cell()


def test_read_short_data():
    with pytest.raises(MappingError):
        Mapping().read(io.BytesIO(struct.pack("=2Q", 1, 1)))
    with pytest.raises(MappingError):
        Mapping().read(io.BytesIO(struct.pack("=3Q", 1, 1, 1)))


def test_read_invalid_level():
    data = struct.pack("=3Qi", 1, 1, 1, 1000)
    with pytest.raises(MappingError):
        Mapping().read(io.BytesIO(data))