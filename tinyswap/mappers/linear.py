"""
Mapper for a quantum circuit to a linear chain of qubits.

Input: circuit of 1- and 2-qubit commands on any number of logical qubits,
assuming all-to-all connectivity.
Output: the same commands on a 1-D chain where only nearest neighbours can
perform a 2-qubit gate. Swap commands move qubits next to each other.
"""
from __future__ import annotations

from ..routing.placement import return_new_mapping
from ..routing.swaps import odd_even_transposition_swaps
from ..topology import Chain
from .base import MapperEngine


class LinearMapper(MapperEngine):
    """
    Map to a linear chain with open or cyclic boundary conditions.

    Attributes:
        current_mapping: logical qubit id -> position 0..num_qubits-1
        cyclic: If the chain is a cycle
        storage: Number of commands buffered before mapping
        stats: MappingStats (num_mappings, depth_of_swaps, num_of_swaps_per_mapping)
    """

    def __init__(self, num_qubits: int, cyclic: bool = False, storage: int = 1000):
        super().__init__(Chain(num_qubits, cyclic), storage)
        self.cyclic = cyclic

    def _return_new_mapping(self) -> dict[int, int]:
        return return_new_mapping(self.num_qubits, self.cyclic, self._state.currently_allocated_ids,
                                  self._stored_commands, self._state.mapping)

    def _return_swaps(self, old_mapping: dict[int, int], new_mapping: dict[int, int]) -> list[tuple[int, int]]:
        return odd_even_transposition_swaps(old_mapping, new_mapping, self.num_qubits)
