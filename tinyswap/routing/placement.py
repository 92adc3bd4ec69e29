"""Chain placement: lay segments onto the chain close to where their qubits already are."""

from __future__ import annotations

from ..ir import Command
from .segments import compute_segments


def _overlap_fraction(previous_chain: list[int | None], idx0: int, segment: list[int]) -> float:
    """Share of the segment that lands on its own previous slot or on a free slot."""
    window = previous_chain[idx0:idx0 + len(segment)]
    overlap = len({q for q in window if q is not None} & set(segment)) + window.count(None)
    if overlap == 0: return 0.0
    if overlap == len(segment): return 1.0
    return overlap / len(segment)


def place_segments(num_qubits: int, segments: list[list[int]], allocated_qubits: set[int],
                   current_mapping: dict[int, int] | None) -> dict[int, int]:
    """
    Combine segments into a new mapping logical id -> chain position.

    Each segment goes to the region where most of its qubits already are, so
    that few swaps are needed from current_mapping. Greedy, not globally optimal;
    it pays off when the qubits split into groups that do not interact.

    Args:
        num_qubits: Total number of positions in the chain
        segments: Qubit ids that must be nearest neighbours, in chain order.
            Allocated qubits not in any segment are placed on their own.
        allocated_qubits: Every logical id the new mapping must contain
        current_mapping: Previous mapping or None on the first cycle
    """
    remaining_segments = [list(s) for s in segments]
    in_segment = {q for s in segments for q in s}
    remaining_segments += [[q] for q in sorted(allocated_qubits - in_segment)]
    num_unused_qubits = num_qubits - len(allocated_qubits)

    previous_chain: list[int | None] = [None] * num_qubits
    for logical_id, pos in (current_mapping or {}).items():
        previous_chain[pos] = logical_id
    new_chain: list[int | None] = [None] * num_qubits

    current_position_to_fill = 0
    while remaining_segments:
        best_index, best_padding, highest_overlap_fraction = 0, num_qubits, 0.0
        for index, segment in enumerate(remaining_segments):
            for padding in range(num_unused_qubits + 1):
                fraction = _overlap_fraction(previous_chain, current_position_to_fill + padding, segment)
                if ((fraction == 1 and padding < best_padding) or fraction > highest_overlap_fraction
                        or highest_overlap_fraction == 0):
                    best_index, best_padding, highest_overlap_fraction = index, padding, fraction
        best_segment = remaining_segments.pop(best_index)
        start = current_position_to_fill + best_padding
        new_chain[start:start + len(best_segment)] = best_segment
        current_position_to_fill = start + len(best_segment)
        num_unused_qubits -= best_padding

    return {logical_id: pos for pos, logical_id in enumerate(new_chain) if logical_id is not None}


def return_new_mapping(num_qubits: int, cyclic: bool, currently_allocated_ids: set[int],
                       stored_commands: list[Command], current_mapping: dict[int, int] | None) -> dict[int, int]:
    """Build a chain mapping under which the buffered commands can run, first come first served."""
    segments, allocated_qubits = compute_segments(num_qubits, cyclic, currently_allocated_ids, stored_commands)
    return place_segments(num_qubits, segments, allocated_qubits, current_mapping)
