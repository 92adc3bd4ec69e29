"""
Logical -> physical mapping state.

Contains:
    - MappingState: Partial bijection logical id -> slot plus the set of
      logical ids whose Allocate has already been sent downstream

Note: every write goes through assign()/remove()/replace(), which keep the
mapping injective and inside [0, n_slots).
"""
from __future__ import annotations

from .errors import MappingConfigError


class MappingState:
    """
    Track which slot holds which logical qubit.

    `mapping` is None until the first mapping cycle (or an explicit
    assignment); afterwards it is a dict, possibly empty.
    """

    def __init__(self, n_slots: int):
        self.n_slots = n_slots
        self._l2p: dict[int, int] | None = None
        self._p2l: dict[int, int] = {}
        self.currently_allocated_ids: set[int] = set()

    @property
    def mapping(self) -> dict[int, int] | None:
        return self._l2p

    def is_initialized(self) -> bool:
        return self._l2p is not None

    def __contains__(self, logical: int) -> bool:
        return self._l2p is not None and logical in self._l2p

    def logical_to_phys(self, logical: int) -> int:
        """Slot of a mapped logical qubit. KeyError if it has none."""
        if self._l2p is None or logical not in self._l2p:
            raise KeyError(f"Logical qubit {logical} is not mapped")
        return self._l2p[logical]

    def phys_to_logical(self, slot: int) -> int | None:
        """Logical qubit at a slot, or None if the slot is free."""
        return self._p2l.get(slot)

    def replace(self, new_mapping: dict[int, int] | None) -> None:
        """Install a whole new mapping after checking it is an injection into the slots."""
        if new_mapping is None:
            self._l2p, self._p2l = None, {}
            return
        p2l: dict[int, int] = {}
        for logical, slot in new_mapping.items():
            if not 0 <= slot < self.n_slots:
                raise MappingConfigError(f"Slot {slot} for logical qubit {logical} outside 0..{self.n_slots - 1}")
            if slot in p2l:
                raise MappingConfigError(f"Logical qubits {p2l[slot]} and {logical} both mapped to slot {slot}")
            p2l[slot] = logical
        self._l2p, self._p2l = dict(new_mapping), p2l

    def assign(self, logical: int, slot: int) -> None:
        if self._l2p is None: self._l2p = {}
        if not 0 <= slot < self.n_slots:
            raise MappingConfigError(f"Slot {slot} outside 0..{self.n_slots - 1}")
        owner = self._p2l.get(slot)
        if owner is not None and owner != logical:
            raise MappingConfigError(f"Slot {slot} already holds logical qubit {owner}")
        if logical in self._l2p: del self._p2l[self._l2p[logical]]
        self._l2p[logical] = slot
        self._p2l[slot] = logical

    def remove(self, logical: int) -> int:
        """Drop a logical qubit from the mapping and the allocated set. Returns its slot."""
        slot = self.logical_to_phys(logical)
        del self._l2p[logical]
        del self._p2l[slot]
        self.currently_allocated_ids.discard(logical)
        return slot

    def used_slots(self, mapping: dict[int, int] | None = None) -> set[int]:
        """Slots holding currently allocated qubits under `mapping` (default: current)."""
        mapping = self._l2p if mapping is None else mapping
        return {mapping[q] for q in self.currently_allocated_ids}
