"""Mapping statistics for explainability."""
from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class MappingStats:
    """Counters collected over the lifetime of a mapper.

    Only cycles that actually moved qubits (at least one swap) are counted.
    """
    num_mappings: int = 0
    depth_of_swaps: dict[int, int] = field(default_factory=dict)
    num_of_swaps_per_mapping: dict[int, int] = field(default_factory=dict)

    def record(self, n_swaps: int, depth: int) -> None:
        self.num_mappings += 1
        self.depth_of_swaps[depth] = self.depth_of_swaps.get(depth, 0) + 1
        self.num_of_swaps_per_mapping[n_swaps] = self.num_of_swaps_per_mapping.get(n_swaps, 0) + 1

    @property
    def total_swaps(self) -> int:
        return sum(n * count for n, count in self.num_of_swaps_per_mapping.items())

    def to_text(self, name: str = "") -> str:
        lines = [
            "=" * 40, "  TinySwap Mapping Report", "=" * 40, "",
            "SUMMARY",
            f"  Mappings: {self.num_mappings}",
            f"  SWAPs:    {self.total_swaps} total",
        ]
        if name: lines.append(f"  Mapper:   {name}")
        if self.depth_of_swaps:
            lines += ["", "DEPTH OF SWAPS", "  Depth  Count", "  " + "-" * 13]
            lines += [f"  {d:>5} {n:>6}" for d, n in sorted(self.depth_of_swaps.items())]
        if self.num_of_swaps_per_mapping:
            lines += ["", "SWAPS PER MAPPING", "  Swaps  Count", "  " + "-" * 13]
            lines += [f"  {s:>5} {n:>6}" for s, n in sorted(self.num_of_swaps_per_mapping.items())]
        return "\n".join(lines)
