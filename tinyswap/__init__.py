"""
TinySwap - nearest-neighbour qubit mapping for chains and grids
"""

from .ir import Circuit, Command, Gate, LogicalQubitIDTag
from .engine import BasicEngine, CommandRecorder, link
from .errors import MapperError, MappingConfigError, MapperCapacityError, InvalidCommandError
from .topology import Chain, Grid, validate
from .state import MappingState
from .report import MappingStats
from .matching import perfect_matchings
from .routing import (
    compute_segments, place_segments, return_new_mapping,
    odd_even_transposition_swaps, swap_depth, apply_swaps,
    return_grid_swaps, best_grid_swaps,
)
from .mappers import Mapper, MapperEngine, LinearMapper, GridMapper, ManualMapper
from .compile import map_circuit

__all__ = [
    # Commands
    "Circuit",
    "Command",
    "Gate",
    "LogicalQubitIDTag",
    # Pipeline
    "BasicEngine",
    "CommandRecorder",
    "link",
    # Errors
    "MapperError",
    "MappingConfigError",
    "MapperCapacityError",
    "InvalidCommandError",
    # Topologies
    "Chain",
    "Grid",
    "validate",
    # State and statistics
    "MappingState",
    "MappingStats",
    # Routing
    "compute_segments",
    "place_segments",
    "return_new_mapping",
    "odd_even_transposition_swaps",
    "swap_depth",
    "apply_swaps",
    "return_grid_swaps",
    "best_grid_swaps",
    "perfect_matchings",
    # Mappers
    "Mapper",
    "MapperEngine",
    "LinearMapper",
    "GridMapper",
    "ManualMapper",
    "map_circuit",
]
