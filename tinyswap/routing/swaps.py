"""Swap networks on a chain: odd-even transposition sort and swap depth."""

from __future__ import annotations


def swap_depth(swaps: list[tuple[int, int]]) -> int:
    """Circuit depth needed to execute the swaps in order. 0 for no swaps."""
    depth_of_qubits: dict[int, int] = {}
    for qb0, qb1 in swaps:
        depth = max(depth_of_qubits.get(qb0, 0), depth_of_qubits.get(qb1, 0)) + 1
        depth_of_qubits[qb0] = depth_of_qubits[qb1] = depth
    return max(depth_of_qubits.values(), default=0)


def target_permutation(old_mapping: dict[int, int], new_mapping: dict[int, int], num_qubits: int) -> list[int]:
    """final_positions[old_slot] = new_slot, completed to a permutation of range(num_qubits).

    Qubits present in both mappings keep their move. Every other old slot gets
    an unused new slot, smallest first.
    """
    final_positions: list[int | None] = [None] * num_qubits
    for logical_id, old_slot in old_mapping.items():
        if logical_id in new_mapping:
            final_positions[old_slot] = new_mapping[logical_id]
    used = {p for p in final_positions if p is not None}
    not_used_mapped_ids = sorted(set(range(num_qubits)) - used, reverse=True)
    for i, p in enumerate(final_positions):
        if p is None: final_positions[i] = not_used_mapped_ids.pop()
    assert not not_used_mapped_ids
    return final_positions


def odd_even_transposition_swaps(old_mapping: dict[int, int], new_mapping: dict[int, int],
                                 num_qubits: int) -> list[tuple[int, int]]:
    """Adjacent swaps turning old_mapping into new_mapping (odd-even transposition sort).

    See https://en.wikipedia.org/wiki/Odd-even_sort. Terminates after at most
    num_qubits passes.

    Returns:
        List of (i, i + 1) slot pairs in the order they must be applied.
    """
    final_positions = target_permutation(old_mapping, new_mapping, num_qubits)
    swap_operations = []
    finished_sorting = False
    while not finished_sorting:
        finished_sorting = True
        for start in (1, 0):
            for i in range(start, num_qubits - 1, 2):
                if final_positions[i] > final_positions[i + 1]:
                    swap_operations.append((i, i + 1))
                    final_positions[i], final_positions[i + 1] = final_positions[i + 1], final_positions[i]
                    finished_sorting = False
    return swap_operations


def apply_swaps(mapping: dict[int, int], swaps: list[tuple[int, int]]) -> dict[int, int]:
    """Return the mapping obtained by exchanging slot contents for each swap in order."""
    p2l = {slot: logical for logical, slot in mapping.items()}
    for a, b in swaps:
        la, lb = p2l.pop(a, None), p2l.pop(b, None)
        if la is not None: p2l[b] = la
        if lb is not None: p2l[a] = lb
    return {logical: slot for slot, logical in p2l.items()}
