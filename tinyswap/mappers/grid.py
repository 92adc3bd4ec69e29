"""
Mapper for a quantum circuit to a 2-D square grid.

The chain heuristic picks the new mapping on a snake through the grid; the
swaps to reach it come from a three-phase sorting network whose first phase is
tuned by trying permutations of perfect matchings.
"""
from __future__ import annotations

import random
from typing import Callable

from ..matching import MatchingOracle, perfect_matchings
from ..routing.grid_swaps import best_grid_swaps
from ..routing.placement import return_new_mapping
from ..routing.swaps import swap_depth
from ..topology import Grid
from .base import MapperEngine


class GridMapper(MapperEngine):
    """
    Map to a grid. Slots are numbered row-major; the backend may number its
    qubits differently, see `mapped_ids_to_backend_ids`.

    Note: The swap network sorts twice inside each column and once inside each row.

    Args:
        num_rows: Number of rows in the grid
        num_columns: Number of columns in the grid
        mapped_ids_to_backend_ids: slot -> backend id. Default None means the
            backend uses the row-major slot ids.
        storage: Number of commands buffered before mapping
        optimization_function: Cost of a swap list; the permutation of
            matchings with the lowest cost wins. Default is swap depth.
        num_optimization_steps: Number of matching permutations to try
        matching: Perfect matching oracle for the first sorting phase
        rng: Source of randomness for sampling permutations. Default is
            random.Random(11), so runs are reproducible.

    Raises:
        MappingConfigError: if mapped_ids_to_backend_ids is not a bijection
            onto num_rows * num_columns ids
    """

    def __init__(self, num_rows: int, num_columns: int, mapped_ids_to_backend_ids: dict[int, int] | None = None,
                 storage: int = 1000, optimization_function: Callable[[list[tuple[int, int]]], float] = swap_depth,
                 num_optimization_steps: int = 50, matching: MatchingOracle = perfect_matchings,
                 rng: random.Random | None = None):
        super().__init__(Grid(num_rows, num_columns, mapped_ids_to_backend_ids), storage)
        self.num_rows = num_rows
        self.num_columns = num_columns
        self.optimization_function = optimization_function
        self.num_optimization_steps = num_optimization_steps
        self.matching = matching
        # Own instance so the module-level random state is left alone
        self._rng = rng if rng is not None else random.Random(11)

    @property
    def current_row_major_mapping(self) -> dict[int, int] | None:
        """Internal mapping logical id -> row-major slot."""
        mapping = self._state.mapping
        return None if mapping is None else dict(mapping)

    def _return_new_mapping(self) -> dict[int, int]:
        """Chain mapping on the snake, wrapped back onto the grid."""
        grid = self.topology
        old_mapping = self._state.mapping
        old_mapping_1d = None if old_mapping is None else {q: grid.to_chain(s) for q, s in old_mapping.items()}
        new_mapping_1d = return_new_mapping(self.num_qubits, False, self._state.currently_allocated_ids,
                                            self._stored_commands, old_mapping_1d)
        return {q: grid.from_chain(pos) for q, pos in new_mapping_1d.items()}

    def _return_swaps(self, old_mapping: dict[int, int], new_mapping: dict[int, int]) -> list[tuple[int, int]]:
        return best_grid_swaps(old_mapping, new_mapping, self.topology, self.optimization_function,
                               self.num_optimization_steps, self._rng, self.matching)
