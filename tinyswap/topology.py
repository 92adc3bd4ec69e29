"""
Device topologies.

Contains:
    - Chain: 1-D nearest-neighbour chain, optionally cyclic
    - Grid: 2-D row-major grid with optional slot -> backend id table and the
      snake embedding into a chain
    - validate: Check a physical command stream against a topology

Slots are the ids the mappers reason about internally. Backend ids are what
gets sent downstream; they differ from slots only for a Grid with a custom
translation table.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .errors import MappingConfigError
from .ir import Command, Gate


@dataclass(frozen=True)
class Chain:
    """Linear chain 0-1-2-...-(n-1). With cyclic=True, n-1 is also adjacent to 0."""
    n_qubits: int
    cyclic: bool = False

    def __post_init__(self):
        if self.n_qubits < 1:
            raise MappingConfigError(f"Chain needs at least one qubit, got {self.n_qubits}")

    def are_adjacent(self, a: int, b: int) -> bool:
        diff = abs(a - b)
        if self.cyclic:
            return diff == 1 or (diff == self.n_qubits - 1 and self.n_qubits > 2)
        return diff == 1

    @property
    def edges(self) -> frozenset[tuple[int, int]]:
        edges = {(i, i + 1) for i in range(self.n_qubits - 1)}
        if self.cyclic and self.n_qubits > 2: edges.add((0, self.n_qubits - 1))
        return frozenset(edges)

    def to_backend(self, slot: int) -> int: return slot
    def from_backend(self, backend_id: int) -> int: return backend_id


@dataclass(frozen=True)
class Grid:
    """Row-major grid. For 3 rows and 2 columns the slots are

        0 - 1
        |   |
        2 - 3
        |   |
        4 - 5

    backend_ids translates slot -> backend id when the backend numbers its
    qubits differently. It must be a bijection onto n_rows * n_columns ids.
    """
    n_rows: int
    n_columns: int
    backend_ids: dict[int, int] | None = None
    _to_backend: dict[int, int] = field(default_factory=dict, repr=False, compare=False)
    _from_backend: dict[int, int] = field(default_factory=dict, repr=False, compare=False)
    _map_2d_to_1d: tuple[int, ...] = field(default=(), repr=False, compare=False)
    _map_1d_to_2d: tuple[int, ...] = field(default=(), repr=False, compare=False)

    def __post_init__(self):
        if self.n_rows < 1 or self.n_columns < 1:
            raise MappingConfigError(f"Grid needs positive dimensions, got {self.n_rows}x{self.n_columns}")
        n = self.n_rows * self.n_columns
        table = dict(self.backend_ids) if self.backend_ids is not None else {i: i for i in range(n)}
        if set(table) != set(range(n)) or len(set(table.values())) != n:
            raise MappingConfigError("Incorrect mapped_ids_to_backend_ids parameter: "
                                     f"need a bijection from slots 0..{n - 1} to distinct backend ids")
        object.__setattr__(self, '_to_backend', table)
        object.__setattr__(self, '_from_backend', {b: s for s, b in table.items()})

        # Snake: even rows left-to-right, odd rows right-to-left
        to_1d = [0] * n
        for row in range(self.n_rows):
            for column in range(self.n_columns):
                slot = row * self.n_columns + column
                to_1d[slot] = slot if row % 2 == 0 else (row + 1) * self.n_columns - column - 1
        to_2d = [0] * n
        for slot, pos in enumerate(to_1d): to_2d[pos] = slot
        object.__setattr__(self, '_map_2d_to_1d', tuple(to_1d))
        object.__setattr__(self, '_map_1d_to_2d', tuple(to_2d))

    @property
    def n_qubits(self) -> int:
        return self.n_rows * self.n_columns

    def row(self, slot: int) -> int: return slot // self.n_columns
    def column(self, slot: int) -> int: return slot % self.n_columns

    def are_adjacent(self, a: int, b: int) -> bool:
        """Row or column neighbours in row-major slot numbering."""
        qb0, qb1 = min(a, b), max(a, b)
        if qb1 - qb0 == self.n_columns: return True
        return qb1 - qb0 == 1 and qb1 % self.n_columns != 0

    @property
    def edges(self) -> frozenset[tuple[int, int]]:
        edges = set()
        for r in range(self.n_rows):
            for c in range(self.n_columns):
                i = r * self.n_columns + c
                if c < self.n_columns - 1: edges.add((i, i + 1))
                if r < self.n_rows - 1: edges.add((i, i + self.n_columns))
        return frozenset(edges)

    def to_backend(self, slot: int) -> int: return self._to_backend[slot]
    def from_backend(self, backend_id: int) -> int: return self._from_backend[backend_id]

    def to_chain(self, slot: int) -> int:
        """Row-major slot -> position on the snake chain."""
        return self._map_2d_to_1d[slot]

    def from_chain(self, position: int) -> int:
        """Position on the snake chain -> row-major slot."""
        return self._map_1d_to_2d[position]


Topology = Chain | Grid


def validate(commands: list[Command], topology: Topology) -> list[str]:
    """Check a physical command stream. Returns list of error strings (empty = valid)."""
    errors = []
    for cmd in commands:
        if cmd.gate == Gate.FLUSH: continue
        ids = cmd.qubit_ids
        slots = []
        for q in ids:
            try:
                slot = topology.from_backend(q)
            except KeyError:
                errors.append(f"{cmd}: backend id {q} not on device")
                continue
            if not 0 <= slot < topology.n_qubits:
                errors.append(f"{cmd}: qubit {q} out of range for {topology.n_qubits}-qubit device")
                continue
            slots.append(slot)
        if len(ids) > 2:
            errors.append(f"{cmd}: acts on {len(ids)} qubits")
        elif len(slots) == 2 and not topology.are_adjacent(*slots):
            errors.append(f"{cmd}: qubits {ids[0]} and {ids[1]} not adjacent")
    return errors
