"""
Basic TinySwap mapping examples.

Run: python examples/mapping.py
"""
import logging
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tinyswap import Circuit, GridMapper, LinearMapper, map_circuit

logging.basicConfig(level=logging.INFO)

# =============================================================================
# Example 1: Long-range CNOT on a chain
# =============================================================================
print("=== Chain of 5 ===")
c = Circuit().allocate(0, 1, 2, 3, 4).flush().cx(0, 4).cx(1, 3)

for cmd in map_circuit(c, LinearMapper(5), verbosity=1):
    print(f"  {cmd}")

# =============================================================================
# Example 2: Ring
# =============================================================================
print("\n=== Cyclic chain of 4 ===")
ring = Circuit().allocate(0, 1, 2, 3).cz(0, 1).cz(1, 2).cz(2, 3).cz(3, 0)

for cmd in map_circuit(ring, LinearMapper(4, cyclic=True), verify=True):
    print(f"  {cmd}")

# =============================================================================
# Example 3: 3x3 grid with a custom backend numbering
# =============================================================================
print("\n=== Grid 3x3 ===")
backend_ids = {slot: 100 + slot for slot in range(9)}
mapper = GridMapper(3, 3, mapped_ids_to_backend_ids=backend_ids)
grid_circuit = Circuit().allocate(*range(9)).flush()
for a, b in [(0, 8), (2, 6), (1, 7), (3, 5)]:
    grid_circuit.cx(a, b)

out = map_circuit(grid_circuit, mapper, verbosity=1, verify=True)
print(f"Commands: {len(out)}")
print(f"Final mapping: {mapper.current_mapping}")
