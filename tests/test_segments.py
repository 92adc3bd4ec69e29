"""
Tests for segment building: which logical qubits must become chain neighbours.
"""
import pytest

from tinyswap.errors import InvalidCommandError
from tinyswap.ir import Circuit, Command, Gate, deallocate
from tinyswap.routing.segments import SegmentArena, _process_two_qubit_gate, compute_segments


def segments_of(n: int, circuit: Circuit, cyclic: bool = False, allocated=()):
    return compute_segments(n, cyclic, set(allocated), circuit.commands)


# =============================================================================
# Basic grouping
# =============================================================================

def test_single_pair():
    segments, allocated = segments_of(3, Circuit().allocate(0, 1, 2).cx(0, 2))
    assert segments == [[0, 2]]
    assert allocated == {0, 1, 2}


def test_single_qubit_gates_ignored():
    segments, _ = segments_of(3, Circuit().allocate(0, 1, 2).h(0).x(2).rz(1, 0.5))
    assert segments == []


def test_attach_to_both_ends():
    c = Circuit().allocate(0, 1, 2, 3).cz(0, 1).cz(2, 0).cz(1, 3)
    segments, _ = segments_of(4, c)
    assert segments == [[2, 0, 1, 3]]


def test_repeated_pair_is_noop():
    c = Circuit().allocate(0, 1, 2).cz(0, 1).cz(1, 0).cz(0, 1).cz(1, 2)
    segments, _ = segments_of(3, c)
    assert segments == [[0, 1, 2]]


def test_previously_allocated_qubits_count():
    segments, allocated = segments_of(4, Circuit().cz(5, 7), allocated={5, 7})
    assert segments == [[5, 7]]
    assert allocated == {5, 7}


# =============================================================================
# Merging two segments
# =============================================================================

@pytest.mark.parametrize("q0, q1, expected", [
    (1, 2, [0, 1, 2, 3]),   # right end + left end
    (1, 3, [0, 1, 3, 2]),   # right end + right end
    (0, 2, [1, 0, 2, 3]),   # left end + left end
    (0, 3, [2, 3, 0, 1]),   # left end + right end
])
def test_merge_cases(q0, q1, expected):
    c = Circuit().allocate(0, 1, 2, 3).cz(0, 1).cz(2, 3).cz(q0, q1)
    segments, _ = segments_of(4, c)
    assert segments == [expected]


def test_merge_keeps_creation_order_of_other_segments():
    c = Circuit().allocate(0, 1, 2, 3, 4, 5).cz(0, 1).cz(4, 5).cz(2, 3).cz(0, 3)
    segments, _ = segments_of(6, c)
    assert segments == [[4, 5], [2, 3, 0, 1]]


def test_arena_tombstones():
    arena = SegmentArena()
    a = arena.new([0, 1])
    b = arena.new([2, 3])
    arena.absorb(b, a)
    assert arena.segments[a] is None
    assert arena.live() == [[2, 3, 0, 1]]
    assert arena.end_of(1) == (b, False)
    assert arena.end_of(2) == (b, True)
    assert arena.end_of(9) == (None, False)


# =============================================================================
# Evictions
# =============================================================================

def test_interior_qubit_evicts_both():
    active = {0, 1, 2, 3}
    arena = SegmentArena()
    neighbours = {q: set() for q in active}
    for a, b in [(0, 1), (1, 2), (1, 3)]:
        _process_two_qubit_gate(4, False, a, b, active, arena, neighbours)
    assert arena.live() == [[0, 1, 2]]
    assert active == {0, 2}


def test_inactive_qubit_evicts_partner():
    c = Circuit().allocate(0, 1, 2, 3).cz(0, 1).cz(1, 2).cz(1, 3).cz(3, 0).cz(0, 2)
    segments, _ = segments_of(4, c)
    # 3 and then 0 left the cycle, so cz(0, 2) cannot close anything
    assert segments == [[0, 1, 2]]


def test_closing_loop_on_open_chain():
    active = {0, 1, 2, 3}
    arena = SegmentArena()
    neighbours = {q: set() for q in active}
    for a, b in [(0, 1), (1, 2), (2, 3), (3, 0)]:
        _process_two_qubit_gate(4, False, a, b, active, arena, neighbours)
    assert arena.live() == [[0, 1, 2, 3]]
    assert active == {1, 2}


def test_ring_on_cyclic_chain():
    c = Circuit().allocate(0, 1, 2, 3).cz(0, 1).cz(1, 2).cz(2, 3).cz(3, 0)
    active = {0, 1, 2, 3}
    arena = SegmentArena()
    neighbours = {q: set() for q in active}
    for cmd in c.commands[4:]:
        _process_two_qubit_gate(4, True, *cmd.qubit_ids, active, arena, neighbours)
    assert arena.live() == [[0, 1, 2, 3]]
    assert active == {0, 1, 2, 3}
    assert neighbours[0] == {1, 3}


def test_full_segment_on_cyclic_chain_links_ends():
    segments, _ = segments_of(3, Circuit().allocate(0, 1, 2).cz(0, 1).cz(2, 1).cz(0, 2), cyclic=True)
    assert segments == [[0, 1, 2]]


# =============================================================================
# Allocate / Deallocate
# =============================================================================

def test_allocate_deferred_when_full():
    segments, allocated = segments_of(2, Circuit().allocate(0, 1, 2).cz(0, 2))
    assert allocated == {0, 1}
    assert segments == []


def test_deallocated_qubit_is_inactive():
    c = Circuit().allocate(0, 1).deallocate(0).cz(0, 1)
    segments, allocated = segments_of(2, c)
    assert segments == []
    # A deallocated qubit keeps its slot in this cycle
    assert allocated == {0, 1}


def test_stops_once_nothing_can_change():
    commands = [deallocate(0), deallocate(1), Command(Gate.X, ((0,), (1,), (2,)))]
    segments, allocated = compute_segments(2, False, {0, 1}, commands)
    assert segments == []
    assert allocated == {0, 1}


# =============================================================================
# Invalid commands
# =============================================================================

@pytest.mark.parametrize("cmd", [
    Command(Gate.X, ((0,), (1,), (2,))),
    Command(Gate.X, ((0,),), controls=(1, 2)),
    Command(Gate.X, ()),
])
def test_invalid_command(cmd):
    with pytest.raises(InvalidCommandError) as exc:
        compute_segments(4, False, {0, 1, 2}, [cmd])
    assert exc.value.cmd == cmd
    assert "number of qubits" in str(exc.value)
