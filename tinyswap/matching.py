"""
Perfect matchings for the grid swap network.

Every grid column holds n_rows elements and every destination column receives
n_rows elements, so the column -> destination-column multigraph is n_rows-regular
and splits into n_rows perfect matchings (Koenig). Each matching is found as a
minimum-cost assignment over the edges still present, cost |column - destination|.
"""
from __future__ import annotations

from typing import Callable

import numpy as np
from scipy.optimize import linear_sum_assignment

MatchingOracle = Callable[[np.ndarray], list[np.ndarray]]


def edge_counts(final_columns: np.ndarray) -> np.ndarray:
    """counts[c, d] = number of elements now in column c that end in column d."""
    n_rows, n_columns = final_columns.shape
    counts = np.zeros((n_columns, n_columns), dtype=int)
    for column in range(n_columns):
        np.add.at(counts[column], final_columns[:, column], 1)
    return counts


def perfect_matchings(final_columns: np.ndarray) -> list[np.ndarray]:
    """Split the column multigraph into n_rows perfect matchings.

    Args:
        final_columns: (n_rows, n_columns) array; entry [r, c] is the final
            column of the element currently at row r, column c.

    Returns:
        n_rows arrays of length n_columns; matching[c] is the destination column
        paired with current column c.
    """
    final_columns = np.asarray(final_columns, dtype=int)
    n_rows, n_columns = final_columns.shape
    counts = edge_counts(final_columns)
    distance = np.abs(np.subtract.outer(np.arange(n_columns), np.arange(n_columns)))
    absent = n_columns * n_columns + 1  # Larger than any all-present assignment

    matchings = []
    for _ in range(n_rows):
        cost = np.where(counts > 0, distance, absent)
        rows, cols = linear_sum_assignment(cost)
        if np.any(counts[rows, cols] == 0):
            raise RuntimeError("Column multigraph has no perfect matching; final columns are not a permutation")
        matching = np.empty(n_columns, dtype=int)
        matching[rows] = cols
        counts[rows, cols] -= 1
        matchings.append(matching)
    return matchings
