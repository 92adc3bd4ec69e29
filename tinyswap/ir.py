"""
Core command types - the single representation passed between engines.

Contains:
    - Gate: Enum of gate kinds, including the Allocate/Deallocate/Flush meta gates
    - Command: Dataclass (gate, qubits, controls, params, tags)
    - LogicalQubitIDTag: Tag carrying the logical id of a re-emitted command
    - Circuit: Lazy builder, just appends Commands
"""
from __future__ import annotations

from enum import Enum, auto
from dataclasses import dataclass, replace


class Gate(Enum):
    """Gate kinds understood by the mapping engines."""
    # Qubit lifetime
    ALLOCATE = auto()
    DEALLOCATE = auto()
    FLUSH = auto()  # Barrier: empties every buffer before being forwarded

    # Single-qubit
    X = auto()
    Y = auto()
    Z = auto()
    H = auto()
    S = auto()
    T = auto()
    RX = auto()
    RY = auto()
    RZ = auto()

    # Two-qubit
    CX = auto()
    CZ = auto()
    SWAP = auto()

    MEASURE = auto()

    @property
    def is_meta(self) -> bool:
        return self in (Gate.ALLOCATE, Gate.DEALLOCATE, Gate.FLUSH)


@dataclass(frozen=True)
class LogicalQubitIDTag:
    """Marks a physical command with the logical qubit id it came from."""
    logical_qubit_id: int


@dataclass(frozen=True)
class Command:
    gate: Gate
    qubits: tuple[tuple[int, ...], ...]
    controls: tuple[int, ...] = ()
    params: tuple[float, ...] = ()
    tags: tuple = ()

    @property
    def all_qubits(self) -> tuple[tuple[int, ...], ...]:
        """Control qubits first, then every quantum register."""
        return (self.controls,) + self.qubits

    @property
    def qubit_ids(self) -> list[int]:
        """Flat list of every qubit id the command touches."""
        return [q for qureg in self.all_qubits for q in qureg]

    def map_ids(self, id_map) -> Command:
        """Return a copy with every qubit id replaced by id_map(id)."""
        return replace(self,
                       qubits=tuple(tuple(id_map(q) for q in qureg) for qureg in self.qubits),
                       controls=tuple(id_map(q) for q in self.controls))

    def __str__(self):
        ctrl = f"C[{','.join(map(str, self.controls))}]" if self.controls else ""
        regs = " | ".join(",".join(map(str, qureg)) for qureg in self.qubits)
        return f"{ctrl}{self.gate.name}({regs})"


def allocate(qubit: int, tags: tuple = ()) -> Command: return Command(Gate.ALLOCATE, ((qubit,),), tags=tags)
def deallocate(qubit: int, tags: tuple = ()) -> Command: return Command(Gate.DEALLOCATE, ((qubit,),), tags=tags)
def swap(a: int, b: int) -> Command: return Command(Gate.SWAP, ((a,), (b,)))
def flush() -> Command: return Command(Gate.FLUSH, ((-1,),))


class Circuit:
    """Lazy circuit builder. Adds commands to a list."""

    def __init__(self):
        self.commands: list[Command] = []

    def _add(self, gate: Gate, qubits: tuple, controls: tuple = (), params: tuple = ()) -> "Circuit":
        self.commands.append(Command(gate, tuple((q,) for q in qubits), controls, params))
        return self

    def allocate(self, *qubits: int) -> "Circuit":
        for q in qubits: self.commands.append(allocate(q))
        return self

    def deallocate(self, *qubits: int) -> "Circuit":
        for q in qubits: self.commands.append(deallocate(q))
        return self

    def x(self, q: int) -> "Circuit": return self._add(Gate.X, (q,))
    def y(self, q: int) -> "Circuit": return self._add(Gate.Y, (q,))
    def z(self, q: int) -> "Circuit": return self._add(Gate.Z, (q,))
    def h(self, q: int) -> "Circuit": return self._add(Gate.H, (q,))
    def s(self, q: int) -> "Circuit": return self._add(Gate.S, (q,))
    def t(self, q: int) -> "Circuit": return self._add(Gate.T, (q,))
    def rx(self, q: int, theta: float) -> "Circuit": return self._add(Gate.RX, (q,), params=(theta,))
    def ry(self, q: int, theta: float) -> "Circuit": return self._add(Gate.RY, (q,), params=(theta,))
    def rz(self, q: int, theta: float) -> "Circuit": return self._add(Gate.RZ, (q,), params=(theta,))
    def cx(self, c: int, t: int) -> "Circuit": return self._add(Gate.X, (t,), controls=(c,))  # Controlled X
    def cz(self, a: int, b: int) -> "Circuit": return self._add(Gate.CZ, (a, b))
    def swap(self, a: int, b: int) -> "Circuit": return self._add(Gate.SWAP, (a, b))

    def measure(self, q: int) -> "Circuit":
        return self._add(Gate.MEASURE, (q,))

    def flush(self) -> "Circuit":
        self.commands.append(flush())
        return self

    @property
    def n_qubits(self) -> int:
        """Number of distinct logical qubits referenced."""
        return len({q for cmd in self.commands if cmd.gate != Gate.FLUSH for q in cmd.qubit_ids})

    def __len__(self): return len(self.commands)
    def __iter__(self): return iter(self.commands)
