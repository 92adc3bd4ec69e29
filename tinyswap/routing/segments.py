"""Segment building: group logical qubits that must become chain neighbours."""

from __future__ import annotations

from ..errors import InvalidCommandError
from ..ir import Command, Gate


class SegmentArena:
    """Disjoint segments addressed by index, with a qubit -> segment index table.

    A segment absorbed by a merge leaves a None tombstone, so indices of the
    other segments stay valid and their creation order is kept.
    """

    def __init__(self):
        self.segments: list[list[int] | None] = []
        self.segment_of: dict[int, int] = {}

    def end_of(self, qubit: int) -> tuple[int | None, bool]:
        """(segment index, is left end) for a qubit at a segment end, (None, False) otherwise."""
        idx = self.segment_of.get(qubit)
        if idx is None: return None, False
        return idx, self.segments[idx][0] == qubit

    def new(self, qubits: list[int]) -> int:
        self.segments.append(list(qubits))
        idx = len(self.segments) - 1
        for q in qubits: self.segment_of[q] = idx
        return idx

    def attach(self, idx: int, qubit: int, left: bool) -> None:
        if left: self.segments[idx].insert(0, qubit)
        else: self.segments[idx].append(qubit)
        self.segment_of[qubit] = idx

    def absorb(self, keep: int, gone: int, reverse_keep: bool = False, reverse_gone: bool = False) -> None:
        """Append segment `gone` to the right end of segment `keep`."""
        if reverse_keep: self.segments[keep].reverse()
        tail = self.segments[gone][::-1] if reverse_gone else self.segments[gone]
        self.segments[keep].extend(tail)
        for q in tail: self.segment_of[q] = keep
        self.segments[gone] = None

    def live(self) -> list[list[int]]:
        return [list(s) for s in self.segments if s is not None]


def _process_two_qubit_gate(num_qubits: int, cyclic: bool, qubit0: int, qubit1: int,
                            active_qubits: set[int], arena: SegmentArena,
                            neighbour_ids: dict[int, set[int]]) -> None:
    """Either make qubit0 and qubit1 neighbours in some segment, or drop both from active_qubits."""
    # Already connected
    if qubit1 in neighbour_ids.get(qubit0, ()):
        return
    # At least one qubit cannot take part in this cycle any more
    if qubit0 not in active_qubits or qubit1 not in active_qubits:
        active_qubits.discard(qubit0); active_qubits.discard(qubit1)
        return
    # At least one qubit is inside a segment
    if len(neighbour_ids[qubit0]) > 1 or len(neighbour_ids[qubit1]) > 1:
        active_qubits.discard(qubit0); active_qubits.discard(qubit1)
        return

    idx0, qb0_is_left_end = arena.end_of(qubit0)
    idx1, qb1_is_left_end = arena.end_of(qubit1)

    if idx0 is None and idx1 is None:
        merged = arena.new([qubit0, qubit1])
    elif idx0 == idx1:
        # Closing a loop. On a cyclic chain a full ring was linked up already.
        active_qubits.discard(qubit0); active_qubits.discard(qubit1)
        return
    elif idx0 is None:
        arena.attach(idx1, qubit0, left=qb1_is_left_end)
        merged = idx1
    elif idx1 is None:
        arena.attach(idx0, qubit1, left=qb0_is_left_end)
        merged = idx0
    elif not qb0_is_left_end and qb1_is_left_end:
        arena.absorb(idx0, idx1)
        merged = idx0
    elif not qb0_is_left_end and not qb1_is_left_end:
        arena.absorb(idx0, idx1, reverse_gone=True)
        merged = idx0
    elif qb0_is_left_end and qb1_is_left_end:
        arena.absorb(idx0, idx1, reverse_keep=True)
        merged = idx0
    else:
        arena.absorb(idx1, idx0)
        merged = idx1

    neighbour_ids[qubit0].add(qubit1)
    neighbour_ids[qubit1].add(qubit0)
    segment = arena.segments[merged]
    if cyclic and len(segment) == num_qubits:
        neighbour_ids[segment[0]].add(segment[-1])
        neighbour_ids[segment[-1]].add(segment[0])


def compute_segments(num_qubits: int, cyclic: bool, currently_allocated_ids: set[int],
                     stored_commands: list[Command]) -> tuple[list[list[int]], set[int]]:
    """Walk the buffered commands first come first served and build segments.

    Args:
        num_qubits: Total number of slots in the chain
        cyclic: If the chain is a cycle
        currently_allocated_ids: Logical ids already allocated downstream; all
            of them need a slot in the new mapping
        stored_commands: Buffered commands, oldest first

    Returns:
        (segments, allocated_qubits). allocated_qubits is every logical id that
        must appear in the new mapping.
    """
    # A deallocated qubit keeps its slot until the next swaps have run
    allocated_qubits = set(currently_allocated_ids)
    active_qubits = set(currently_allocated_ids)
    arena = SegmentArena()
    neighbour_ids: dict[int, set[int]] = {q: set() for q in active_qubits}

    for cmd in stored_commands:
        if len(allocated_qubits) == num_qubits and not active_qubits:
            break

        qubit_ids = cmd.qubit_ids
        if len(qubit_ids) > 2 or len(qubit_ids) == 0:
            raise InvalidCommandError(cmd)
        if cmd.gate == Gate.ALLOCATE:
            qubit_id = cmd.qubits[0][0]
            if len(allocated_qubits) < num_qubits:
                allocated_qubits.add(qubit_id)
                active_qubits.add(qubit_id)
                neighbour_ids[qubit_id] = set()
        elif cmd.gate == Gate.DEALLOCATE:
            active_qubits.discard(cmd.qubits[0][0])
        elif len(qubit_ids) == 1:
            continue
        else:
            _process_two_qubit_gate(num_qubits, cyclic, qubit_ids[0], qubit_ids[1],
                                    active_qubits, arena, neighbour_ids)

    return arena.live(), allocated_qubits
