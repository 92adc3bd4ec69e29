"""
Swap networks on a 2-D grid.

Three sorting phases, each an odd-even transposition sort restricted to one
grid line:
    1. within columns, keyed by the row chosen from the perfect matchings
    2. within rows, keyed by final column
    3. within columns, keyed by final row

After phase 1 every row holds exactly one element per final column, so phase 2
can bring each element to its final column and phase 3 to its final row.
"""
from __future__ import annotations

import itertools
import math
import random
from dataclasses import dataclass
from typing import Callable

import numpy as np

from ..matching import MatchingOracle, perfect_matchings
from ..topology import Grid
from .swaps import swap_depth


@dataclass
class Position:
    """Element currently at (current_row, current_column) of the grid."""
    current_row: int
    current_column: int
    final_row: int
    final_column: int
    row_after_step_1: int | None = None


def _initial_positions(old_mapping: dict[int, int], new_mapping: dict[int, int],
                       grid: Grid) -> list[list[Position]]:
    """final_positions[row][column] is the record of the element at (row, column)."""
    n_rows, n_columns = grid.n_rows, grid.n_columns
    final_positions: list[list[Position | None]] = [[None] * n_columns for _ in range(n_rows)]
    used_mapped_ids = set()
    for logical_id, old_slot in old_mapping.items():
        if logical_id in new_mapping:
            new_slot = new_mapping[logical_id]
            used_mapped_ids.add(new_slot)
            final_positions[grid.row(old_slot)][grid.column(old_slot)] = Position(
                grid.row(old_slot), grid.column(old_slot), grid.row(new_slot), grid.column(new_slot))
    # Empty places travel to the unused slots, smallest first
    not_used_mapped_ids = sorted(set(range(grid.n_qubits)) - used_mapped_ids, reverse=True)
    for row in range(n_rows):
        for column in range(n_columns):
            if final_positions[row][column] is None:
                slot = not_used_mapped_ids.pop()
                final_positions[row][column] = Position(row, column, grid.row(slot), grid.column(slot))
    assert not not_used_mapped_ids
    return final_positions


def _compare_and_swap(element0: Position, element1: Position, key: Callable[[Position], int],
                      n_columns: int) -> tuple[int, int] | None:
    """Exchange contents if out of order so that key(element0) < key(element1). Returns the swap."""
    if key(element0) <= key(element1):
        return None
    swap_operation = (element0.current_column + element0.current_row * n_columns,
                      element1.current_column + element1.current_row * n_columns)
    element0.final_row, element1.final_row = element1.final_row, element0.final_row
    element0.final_column, element1.final_column = element1.final_column, element0.final_column
    element0.row_after_step_1, element1.row_after_step_1 = element1.row_after_step_1, element0.row_after_step_1
    return swap_operation


def _odd_even_sort(line: list[Position], key: Callable[[Position], int], n_columns: int) -> list[tuple[int, int]]:
    swap_operations = []
    finished_sorting = False
    while not finished_sorting:
        finished_sorting = True
        for start in (1, 0):
            for i in range(start, len(line) - 1, 2):
                swap = _compare_and_swap(line[i], line[i + 1], key, n_columns)
                if swap is not None:
                    finished_sorting = False
                    swap_operations.append(swap)
    return swap_operations


def sort_within_rows(final_positions: list[list[Position]], key: Callable[[Position], int]) -> list[tuple[int, int]]:
    n_columns = len(final_positions[0])
    return [swap for row in final_positions for swap in _odd_even_sort(row, key, n_columns)]


def sort_within_columns(final_positions: list[list[Position]], key: Callable[[Position], int]) -> list[tuple[int, int]]:
    n_columns = len(final_positions[0])
    swaps = []
    for column in range(n_columns):
        swaps += _odd_even_sort([row[column] for row in final_positions], key, n_columns)
    return swaps


def column_matchings(old_mapping: dict[int, int], new_mapping: dict[int, int], grid: Grid,
                     matching: MatchingOracle = perfect_matchings) -> list[np.ndarray]:
    """The n_rows perfect matchings current column -> final column for this move."""
    final_positions = _initial_positions(old_mapping, new_mapping, grid)
    final_columns = np.array([[p.final_column for p in row] for row in final_positions], dtype=int)
    return matching(final_columns)


def return_grid_swaps(old_mapping: dict[int, int], new_mapping: dict[int, int], grid: Grid,
                      permutation: list[int] | tuple[int, ...] | None = None,
                      matchings: list[np.ndarray] | None = None,
                      matching: MatchingOracle = perfect_matchings) -> list[tuple[int, int]]:
    """
    Swap operations turning old_mapping into new_mapping on the grid.

    Args:
        old_mapping: logical id -> row-major slot
        new_mapping: logical id -> row-major slot
        grid: Grid dimensions
        permutation: Order in which the perfect matchings are assigned to rows.
            Default keeps the order returned by the matching oracle.
        matchings: Precomputed matchings (see column_matchings); computed if None
        matching: Matching oracle used when matchings is None

    Returns:
        List of (slot0, slot1) swaps of grid neighbours, in application order.
    """
    n_rows, n_columns = grid.n_rows, grid.n_columns
    if permutation is None:
        permutation = range(n_rows)
    final_positions = _initial_positions(old_mapping, new_mapping, grid)
    if matchings is None:
        final_columns = np.array([[p.final_column for p in row] for row in final_positions], dtype=int)
        matchings = matching(final_columns)
    matchings = [matchings[i] for i in permutation]

    # 1. Pick row_after_step_1 for every element, one matching per row
    for column in range(n_columns):
        for row_after_step_1 in range(n_rows):
            dest_column = int(matchings[row_after_step_1][column])
            best_element = None
            for row in range(n_rows):
                element = final_positions[row][column]
                if element.row_after_step_1 is not None or element.final_column != dest_column:
                    continue
                if best_element is None or best_element.final_row > element.final_row:
                    best_element = element
            if best_element is None:
                raise RuntimeError(f"Matching {row_after_step_1} sends column {column} to {dest_column}, "
                                   "but no element there has that final column")
            best_element.row_after_step_1 = row_after_step_1

    swap_operations = sort_within_columns(final_positions, lambda x: x.row_after_step_1)
    swap_operations += sort_within_rows(final_positions, lambda x: x.final_column)
    swap_operations += sort_within_columns(final_positions, lambda x: x.final_row)
    return swap_operations


def candidate_permutations(n_rows: int, num_optimization_steps: int,
                           rng: random.Random) -> list[tuple[int, ...]]:
    """All row orders if there are few enough, else the identity plus random samples."""
    if num_optimization_steps >= math.factorial(n_rows):
        return list(itertools.permutations(range(n_rows)))
    perms = [tuple(range(n_rows))]
    while len(perms) < max(num_optimization_steps, 1):
        perms.append(tuple(rng.sample(range(n_rows), n_rows)))
    return perms


def best_grid_swaps(old_mapping: dict[int, int], new_mapping: dict[int, int], grid: Grid,
                    cost_function: Callable[[list[tuple[int, int]]], float] = swap_depth,
                    num_optimization_steps: int = 50, rng: random.Random | None = None,
                    matching: MatchingOracle = perfect_matchings) -> list[tuple[int, int]]:
    """Try matching permutations and keep the swap list with the lowest cost.

    Only the sampled permutations are compared; when n_rows! exceeds
    num_optimization_steps the result need not be the best over all of them.
    """
    rng = rng if rng is not None else random.Random(11)
    matchings = column_matchings(old_mapping, new_mapping, grid, matching)
    swaps, lowest_cost = None, None
    for permutation in candidate_permutations(grid.n_rows, num_optimization_steps, rng):
        trial_swaps = return_grid_swaps(old_mapping, new_mapping, grid, permutation, matchings)
        cost = cost_function(trial_swaps)
        if swaps is None or cost < lowest_cost:
            swaps, lowest_cost = trial_swaps, cost
    return swaps
