"""Mapper that places qubits with a fixed user function and never moves them."""
from __future__ import annotations

from typing import Callable

from ..engine import BasicEngine
from ..errors import MappingConfigError
from ..ir import Command, Gate
from .base import mapped_command


class ManualMapper(BasicEngine):
    """Forward every command at once, placing each new logical id at map_fun(id).

    map_fun must be constant per id. Two logical ids sharing a slot is an error.
    """

    def __init__(self, map_fun: Callable[[int], int] = lambda x: x):
        super().__init__()
        self.map = map_fun
        self.current_mapping: dict[int, int] = {}

    def receive(self, commands: list[Command]) -> None:
        for cmd in commands:
            if cmd.gate == Gate.FLUSH:
                self.send([cmd])
                continue
            taken = set(self.current_mapping.values())
            for q in cmd.qubit_ids:
                if q in self.current_mapping: continue
                slot = self.map(q)
                if slot in taken:
                    raise MappingConfigError(f"map_fun places logical qubit {q} on occupied slot {slot}")
                self.current_mapping[q] = slot
                taken.add(slot)
            self.send([mapped_command(cmd, self.current_mapping.__getitem__)])
