"""
Tests for laying segments onto the chain.
"""
from tinyswap.ir import Circuit
from tinyswap.routing.placement import _overlap_fraction, place_segments, return_new_mapping


# =============================================================================
# Overlap
# =============================================================================

def test_overlap_counts_free_slots():
    previous = [3, None, 4, 7]
    assert _overlap_fraction(previous, 0, [3, 4]) == 1.0
    assert _overlap_fraction(previous, 1, [3, 4]) == 1.0
    assert _overlap_fraction(previous, 2, [3, 4]) == 0.5
    assert _overlap_fraction(previous, 3, [3, 4]) == 0.0


# =============================================================================
# Placement
# =============================================================================

def test_first_mapping_packs_from_the_left():
    mapping = place_segments(4, [[2, 0, 1]], {0, 1, 2, 3}, None)
    assert mapping == {2: 0, 0: 1, 1: 2, 3: 3}


def test_lone_qubits_in_sorted_order():
    mapping = place_segments(5, [], {9, 4, 6}, None)
    assert mapping == {4: 0, 6: 1, 9: 2}


def test_moves_only_what_is_needed():
    mapping = place_segments(3, [[0, 2]], {0, 1, 2}, {0: 0, 1: 1, 2: 2})
    assert mapping == {0: 0, 2: 1, 1: 2}


def test_unchanged_when_already_placed():
    previous = {0: 2, 1: 3, 2: 0, 3: 1}
    mapping = place_segments(4, [[0, 1]], {0, 1, 2, 3}, previous)
    assert mapping == previous


def test_segment_order_is_kept():
    mapping = place_segments(6, [[5, 1, 3]], {1, 3, 5}, None)
    assert mapping[1] == mapping[5] + 1
    assert mapping[3] == mapping[1] + 1


def test_result_is_injective_and_in_range():
    segments = [[0, 4], [1, 2], [6, 3]]
    mapping = place_segments(8, segments, {0, 1, 2, 3, 4, 5, 6}, {q: 7 - q for q in range(7)})
    assert set(mapping) == {0, 1, 2, 3, 4, 5, 6}
    assert len(set(mapping.values())) == 7
    assert all(0 <= p < 8 for p in mapping.values())
    for segment in segments:
        positions = [mapping[q] for q in segment]
        assert positions == list(range(positions[0], positions[0] + len(segment)))


# =============================================================================
# return_new_mapping
# =============================================================================

def test_return_new_mapping_makes_pairs_adjacent():
    c = Circuit().allocate(0, 1, 2, 3, 4).cx(0, 4).cz(1, 3)
    mapping = return_new_mapping(5, False, set(), c.commands, None)
    assert abs(mapping[0] - mapping[4]) == 1
    assert abs(mapping[1] - mapping[3]) == 1
    assert set(mapping) == {0, 1, 2, 3, 4}
