"""
Routing building blocks used by the mappers.

Modules:
    - segments: Group qubits that must become chain neighbours
    - placement: Lay segments onto the chain close to the previous mapping
    - swaps: Odd-even transposition swap network on a chain, swap depth
    - grid_swaps: Three-phase sorting network on a grid with matching search
"""
from .segments import compute_segments
from .placement import place_segments, return_new_mapping
from .swaps import odd_even_transposition_swaps, swap_depth, apply_swaps
from .grid_swaps import return_grid_swaps, best_grid_swaps

__all__ = [
    "compute_segments",
    "place_segments",
    "return_new_mapping",
    "odd_even_transposition_swaps",
    "swap_depth",
    "apply_swaps",
    "return_grid_swaps",
    "best_grid_swaps",
]
