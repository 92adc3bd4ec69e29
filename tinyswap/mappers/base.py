"""
Shared machinery of the buffering mappers.

Contains:
    - Mapper: Protocol every mapper satisfies (receive + current_mapping)
    - mapped_command: Rewrite a logical command to backend ids
    - MapperEngine: Command buffer, cycle trigger and dispatcher. Concrete
      mappers only decide the new mapping and the swaps to reach it.
"""
from __future__ import annotations

import logging
from typing import Callable, Protocol

from ..engine import BasicEngine
from ..errors import InvalidCommandError, MapperCapacityError, MappingConfigError
from ..ir import Command, Gate, LogicalQubitIDTag, allocate, deallocate, swap
from ..report import MappingStats
from ..routing.swaps import swap_depth
from ..state import MappingState
from ..topology import Topology

logger = logging.getLogger(__name__)


class Mapper(Protocol):
    """Anything that maps logical qubit ids onto backend ids."""

    @property
    def current_mapping(self) -> dict[int, int] | None: ...

    def receive(self, commands: list[Command]) -> None: ...


def mapped_command(cmd: Command, lookup: Callable[[int], int]) -> Command:
    """cmd with every qubit id replaced by lookup(id). Measurements get a LogicalQubitIDTag."""
    new_cmd = cmd.map_ids(lambda q: q if q == -1 else lookup(q))
    if cmd.gate == Gate.MEASURE:
        if len(cmd.qubits) != 1 or len(cmd.qubits[0]) != 1:
            raise ValueError(f"Measurement must act on a single qubit: {cmd}")
        new_cmd = Command(new_cmd.gate, new_cmd.qubits, new_cmd.controls, new_cmd.params,
                          cmd.tags + (LogicalQubitIDTag(cmd.qubits[0][0]),))
    return new_cmd


class MapperEngine(BasicEngine):
    """
    Buffer commands, and from time to time move qubits so the buffered
    commands become executable on the topology.

    Note:
        1) Commands are buffered and only mapped when the buffer reaches
           `storage` commands or a Flush arrives.
        2) Only 1- and 2-qubit commands are allowed.
        3) Dirty qubits are not optimized for.
    """

    def __init__(self, topology: Topology, storage: int = 1000):
        super().__init__()
        if storage < 1:
            raise MappingConfigError(f"storage must be positive, got {storage}")
        self.topology = topology
        self.num_qubits = topology.n_qubits
        self.storage = storage
        self._stored_commands: list[Command] = []
        self._state = MappingState(topology.n_qubits)
        self.stats = MappingStats()

    # Mapping seen from outside, in backend ids ---------------------------------

    @property
    def current_mapping(self) -> dict[int, int] | None:
        mapping = self._state.mapping
        if mapping is None: return None
        return {logical: self.topology.to_backend(slot) for logical, slot in mapping.items()}

    @current_mapping.setter
    def current_mapping(self, new_mapping: dict[int, int] | None) -> None:
        if new_mapping is None:
            self._state.replace(None)
            return
        slots = {}
        for logical, backend_id in new_mapping.items():
            try:
                slots[logical] = self.topology.from_backend(backend_id)
            except KeyError:
                raise MappingConfigError(f"Backend id {backend_id} for logical qubit {logical} not on device") from None
        self._state.replace(slots)

    @property
    def num_mappings(self) -> int: return self.stats.num_mappings
    @property
    def depth_of_swaps(self) -> dict[int, int]: return self.stats.depth_of_swaps
    @property
    def num_of_swaps_per_mapping(self) -> dict[int, int]: return self.stats.num_of_swaps_per_mapping

    def is_available(self, cmd: Command) -> bool:
        """Only 1- and 2-qubit commands can be mapped."""
        return len(cmd.qubit_ids) <= 2

    # Hooks -------------------------------------------------------------------

    def _return_new_mapping(self) -> dict[int, int]:
        """New mapping logical id -> slot under which buffered commands can run."""
        raise NotImplementedError

    def _return_swaps(self, old_mapping: dict[int, int], new_mapping: dict[int, int]) -> list[tuple[int, int]]:
        """Adjacent slot swaps turning old_mapping into new_mapping."""
        raise NotImplementedError

    # Dispatch ----------------------------------------------------------------

    def _backend_id(self, logical: int) -> int:
        return self.topology.to_backend(self._state.logical_to_phys(logical))

    def _send_cmd_with_mapped_ids(self, cmd: Command) -> None:
        self.send([mapped_command(cmd, self._backend_id)])

    def _send_possible_commands(self) -> None:
        """Send the buffered commands that are possible without changing the mapping."""
        state = self._state
        active_ids = set(state.currently_allocated_ids) | set(state.mapping or {})

        new_stored_commands = []
        for i, cmd in enumerate(self._stored_commands):
            if not active_ids:
                new_stored_commands += self._stored_commands[i:]
                break
            if cmd.gate == Gate.ALLOCATE:
                qid = cmd.qubits[0][0]
                if qid in state:
                    state.currently_allocated_ids.add(qid)
                    self.send([allocate(self._backend_id(qid), tags=(LogicalQubitIDTag(qid),))])
                else:
                    new_stored_commands.append(cmd)
            elif cmd.gate == Gate.DEALLOCATE:
                qid = cmd.qubits[0][0]
                if qid in active_ids:
                    backend_id = self._backend_id(qid)
                    state.remove(qid)
                    active_ids.discard(qid)
                    self.send([deallocate(backend_id, tags=(LogicalQubitIDTag(qid),))])
                else:
                    new_stored_commands.append(cmd)
            else:
                qubit_ids = cmd.qubit_ids
                send_gate = all(q in active_ids for q in qubit_ids)
                if send_gate:
                    mapped_ids = {state.logical_to_phys(q) for q in qubit_ids}
                    if len(mapped_ids) == 2 and not self.topology.are_adjacent(*mapped_ids):
                        send_gate = False
                if send_gate:
                    self._send_cmd_with_mapped_ids(cmd)
                else:
                    active_ids.difference_update(qubit_ids)
                    new_stored_commands.append(cmd)
        self._stored_commands = new_stored_commands

    # Mapping cycle -----------------------------------------------------------

    def _run(self) -> None:
        """
        Create a new mapping and execute possible gates.

        Every slot not holding an allocated qubit is allocated first, since the
        swaps may need all of them. Then the qubits are swapped to the new
        mapping, possible gates are sent, and slots holding no information are
        deallocated again.
        """
        num_of_stored_commands_before = len(self._stored_commands)
        if not self._state.is_initialized():
            self._state.replace({})
        else:
            self._send_possible_commands()
            if not self._stored_commands:
                return

        old_mapping = self._state.mapping
        new_mapping = self._return_new_mapping()
        swaps = self._return_swaps(old_mapping, new_mapping)
        if swaps:  # First mapping requires no swaps
            to_backend = self.topology.to_backend
            all_slots = set(range(self.num_qubits))
            for slot in sorted(all_slots - self._state.used_slots()):
                self.send([allocate(to_backend(slot))])
            for slot0, slot1 in swaps:
                self.send([swap(to_backend(slot0), to_backend(slot1))])
            depth = swap_depth(swaps)
            self.stats.record(len(swaps), depth)
            for slot in sorted(all_slots - self._state.used_slots(new_mapping)):
                self.send([deallocate(to_backend(slot))])
            logger.debug("%s: mapping %d with %d swaps (depth %d)",
                         type(self).__name__, self.stats.num_mappings, len(swaps), depth)

        self._state.replace(new_mapping)
        self._send_possible_commands()
        if len(self._stored_commands) == num_of_stored_commands_before:
            logger.error("%s made no progress with %d buffered commands on %d qubits",
                         type(self).__name__, num_of_stored_commands_before, self.num_qubits)
            raise MapperCapacityError("Mapper is potentially in an infinite loop. It is likely that the "
                                      "algorithm requires too many qubits. Increase the number of qubits "
                                      "for this mapper.")

    def receive(self, commands: list[Command]) -> None:
        """Buffer each command until a mapping is done (Flush, or buffer full)."""
        for cmd in commands:
            if cmd.gate == Gate.FLUSH:
                while self._stored_commands:
                    self._run()
                self.send([cmd])
            elif not 0 < len(cmd.qubit_ids) <= 2:
                raise InvalidCommandError(cmd)
            else:
                self._stored_commands.append(cmd)
            if len(self._stored_commands) >= self.storage:
                self._run()
