"""
Main mapping entry point.

map_circuit() links a mapper to a CommandRecorder, feeds it the circuit's
commands followed by a Flush, and returns what reached the end of the pipeline.
"""
from __future__ import annotations

import logging
import warnings

from .engine import CommandRecorder, link
from .ir import Circuit, Command, Gate, flush
from .mappers.base import MapperEngine
from .topology import validate

logger = logging.getLogger(__name__)


def map_circuit(circuit: Circuit | list[Command], mapper, verbosity: int = 0,
                verify: bool = False) -> list[Command]:
    """
    Map a circuit onto the mapper's device.

    Args:
        circuit: Circuit or list of commands with logical qubit ids
        mapper: LinearMapper, GridMapper or ManualMapper (any engine with receive())
        verbosity: 0=silent, >0 prints the mapper's statistics report
        verify: If True, check every 2-qubit command in the output acts on
            adjacent qubits and warn if not

    Returns:
        The physical commands, ending with the Flush.
    """
    commands = list(circuit)
    recorder = CommandRecorder()
    link(mapper, recorder)
    if not commands or commands[-1].gate != Gate.FLUSH:
        commands.append(flush())
    mapper.receive(commands)
    result = recorder.received_commands

    if verify and isinstance(mapper, MapperEngine):
        errors = validate(result, mapper.topology)
        for err in errors: logger.warning("%s", err)
        if errors:
            warnings.warn(f"Mapped circuit violates the topology ({len(errors)} errors)")

    if verbosity > 0 and isinstance(mapper, MapperEngine):
        print(mapper.stats.to_text(type(mapper).__name__))
    return result
