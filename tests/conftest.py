"""
Pytest fixtures and helpers for mapper tests.
"""
from collections import defaultdict

import pytest
from hypothesis import strategies as st

from tinyswap.engine import CommandRecorder, link
from tinyswap.ir import Circuit, Command, Gate, LogicalQubitIDTag
from tinyswap.mappers import GridMapper, LinearMapper


# =============================================================================
# Mapper Fixtures
# =============================================================================

@pytest.fixture
def recorder():
    return CommandRecorder()


@pytest.fixture
def linear_5(recorder):
    """5-qubit open chain mapper wired to a recorder."""
    mapper = LinearMapper(num_qubits=5)
    link(mapper, recorder)
    return mapper


@pytest.fixture
def grid_2x3(recorder):
    """2x3 grid mapper wired to a recorder."""
    mapper = GridMapper(num_rows=2, num_columns=3)
    link(mapper, recorder)
    return mapper


# =============================================================================
# Helpers
# =============================================================================

def gates_only(commands: list[Command]) -> list[Command]:
    """Drop Allocate/Deallocate/Flush and mapper Swaps."""
    return [c for c in commands if not c.gate.is_meta and c.gate != Gate.SWAP]


def logical_histories(commands: list[Command]) -> dict[int, list[tuple]]:
    """Per logical qubit, the gates acting on it in order (logical circuit)."""
    history = defaultdict(list)
    for cmd in gates_only(commands):
        key = (cmd.gate, cmd.controls, cmd.qubits, cmd.params)
        for q in cmd.qubit_ids: history[q].append(key)
    return dict(history)


def replay(physical: list[Command], topology) -> dict[int, list[tuple]]:
    """
    Rebuild per-logical-qubit gate histories from a physical command stream.

    Follows the LogicalQubitIDTag on Allocate and every mapper Swap to know
    which logical qubit sits on which slot. Asserts that gates only touch slots
    holding a logical qubit and that every pair is adjacent.
    """
    holder: dict[int, int | None] = {}
    history = defaultdict(list)
    for cmd in physical:
        if cmd.gate == Gate.FLUSH: continue
        slots = [topology.from_backend(q) for q in cmd.qubit_ids]
        if len(slots) == 2:
            assert topology.are_adjacent(*slots), f"{cmd} acts on non-adjacent slots"
        if cmd.gate == Gate.ALLOCATE:
            assert slots[0] not in holder, f"{cmd} allocates an occupied slot"
            tags = [t for t in cmd.tags if isinstance(t, LogicalQubitIDTag)]
            holder[slots[0]] = tags[0].logical_qubit_id if tags else None
        elif cmd.gate == Gate.DEALLOCATE:
            holder.pop(slots[0])
        elif cmd.gate == Gate.SWAP:
            a, b = slots
            holder[a], holder[b] = holder[b], holder[a]
        else:
            logical = {s: holder[s] for s in slots}
            assert None not in logical.values(), f"{cmd} acts on a slot without a logical qubit"
            to_logical = lambda q: logical[topology.from_backend(q)]
            mapped = cmd.map_ids(to_logical)
            key = (mapped.gate, mapped.controls, mapped.qubits, mapped.params)
            for s in slots: history[logical[s]].append(key)
    return dict(history)


# =============================================================================
# Strategies
# =============================================================================

@st.composite
def random_circuit(draw, max_qubits: int, max_ops: int = 20):
    """Allocate n logical qubits (arbitrary ids), apply random 1Q/2Q gates, deallocate some."""
    n = draw(st.integers(min_value=2, max_value=max_qubits))
    ids = draw(st.lists(st.integers(min_value=0, max_value=50), min_size=n, max_size=n, unique=True))
    c = Circuit().allocate(*ids)
    n_ops = draw(st.integers(min_value=1, max_value=max_ops))
    for _ in range(n_ops):
        if draw(st.booleans()):
            a, b = draw(st.lists(st.sampled_from(ids), min_size=2, max_size=2, unique=True))
            if draw(st.booleans()): c.cx(a, b)
            else: c.cz(a, b)
        else:
            q = draw(st.sampled_from(ids))
            gate = draw(st.sampled_from(["h", "x", "t", "rz"]))
            if gate == "rz": c.rz(q, draw(st.floats(min_value=-3.0, max_value=3.0)))
            else: getattr(c, gate)(q)
    for q in draw(st.lists(st.sampled_from(ids), unique=True)):
        c.deallocate(q)
    return c
