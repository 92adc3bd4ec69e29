"""
Property-based tests using Hypothesis.

Mapped output must be executable on the device and must apply the same gates,
in the same order, to every logical qubit as the input circuit.
"""
from hypothesis import given, settings, strategies as st

from tinyswap import map_circuit
from tinyswap.ir import Gate
from tinyswap.mappers import GridMapper, LinearMapper
from tinyswap.topology import validate

from conftest import logical_histories, random_circuit, replay


# =============================================================================
# Property tests
# =============================================================================

@given(random_circuit(max_qubits=6, max_ops=25), st.integers(min_value=1, max_value=8), st.booleans())
@settings(max_examples=60, deadline=None)
def test_linear_mapper_preserves_circuit(circuit, storage, cyclic):
    """Each logical qubit sees the same gates in the same order after mapping."""
    mapper = LinearMapper(6, cyclic=cyclic, storage=storage)
    out = map_circuit(circuit, mapper)
    assert validate(out, mapper.topology) == []
    assert replay(out, mapper.topology) == logical_histories(circuit.commands)


@given(random_circuit(max_qubits=6, max_ops=25), st.integers(min_value=1, max_value=8),
       st.sampled_from([(2, 3), (3, 2), (3, 3)]))
@settings(max_examples=60, deadline=None)
def test_grid_mapper_preserves_circuit(circuit, storage, shape):
    mapper = GridMapper(*shape, storage=storage)
    out = map_circuit(circuit, mapper)
    assert validate(out, mapper.topology) == []
    assert replay(out, mapper.topology) == logical_histories(circuit.commands)


@given(random_circuit(max_qubits=5, max_ops=15))
@settings(max_examples=30, deadline=None)
def test_mapping_deterministic(circuit):
    """Same circuit mapped twice gives identical output."""
    first = map_circuit(circuit, GridMapper(2, 3, storage=4))
    second = map_circuit(circuit, GridMapper(2, 3, storage=4))
    assert first == second


@given(random_circuit(max_qubits=5, max_ops=15))
@settings(max_examples=30, deadline=None)
def test_stats_match_emitted_swaps(circuit):
    mapper = LinearMapper(5, storage=3)
    out = map_circuit(circuit, mapper)
    n_swaps = sum(1 for cmd in out if cmd.gate == Gate.SWAP)
    assert mapper.stats.total_swaps == n_swaps
    assert sum(mapper.num_of_swaps_per_mapping.values()) == mapper.num_mappings
