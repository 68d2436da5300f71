# ledger.py
# Named-resource quantity ledger (the stockpile a plan draws from).
#
# increase()/decrease() take an absolute target quantity, not a delta.
# debit()/credit() are the delta helpers the batch apply path uses; they go
# through the guarded setters so every write is checked the same way.
#
# A ledger cannot be copied. Only transfer() moves its contents elsewhere.

from typing import Any, Iterator, Mapping

from pydantic import ValidationError

from resource_forge.errors import ConstructionError, LedgerViolation
from resource_forge.models import LedgerSpec


class ResourceLedger:
    """Mapping of resource name to non-negative quantity with guarded writes."""

    def __init__(self, resources: Mapping[str, int]) -> None:
        try:
            spec = LedgerSpec.model_validate({"resources": dict(resources)})
        except ValidationError as exc:
            raise ConstructionError(f"Ledger contents are invalid: {exc}") from exc

        self._resources: dict[str, int] = dict(spec.resources)
        self._restock_point: dict[str, int] = dict(spec.resources)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def has_resource(self, name: str) -> bool:
        return name in self._resources

    def get_quantity(self, name: str) -> int:
        """Current quantity, or 0 for a resource the ledger has never seen."""
        return self._resources.get(name, 0)

    def shortfall(self, requirements: Mapping[str, int]) -> dict[str, int]:
        """Missing amount per resource. Empty when every requirement is met."""
        missing: dict[str, int] = {}
        for name, required in requirements.items():
            held = self._resources.get(name)
            if held is None:
                missing[name] = required
            elif held < required:
                missing[name] = required - held
        return missing

    def covers(self, requirements: Mapping[str, int]) -> bool:
        return not self.shortfall(requirements)

    def snapshot(self) -> dict[str, int]:
        return dict(sorted(self._resources.items()))

    # ------------------------------------------------------------------
    # Guarded writes (absolute targets)
    # ------------------------------------------------------------------

    def _current(self, name: str, new_quantity: int) -> int:
        if name not in self._resources:
            raise LedgerViolation(f"Unknown resource '{name}'.")
        if new_quantity < 0:
            raise LedgerViolation(f"Quantity for '{name}' cannot be negative ({new_quantity}).")
        return self._resources[name]

    def increase(self, name: str, new_quantity: int) -> bool:
        """
        Raise `name` to `new_quantity`.

        Raises LedgerViolation for unknown names or a target below the
        current value. Returns whether the stored value is >= its old value.
        """
        initial = self._current(name, new_quantity)
        if new_quantity < initial:
            raise LedgerViolation(
                f"Cannot increase '{name}' from {initial} to smaller target {new_quantity}."
            )
        self._resources[name] = new_quantity
        return self._resources[name] >= initial

    def decrease(self, name: str, new_quantity: int) -> bool:
        """
        Lower `name` to `new_quantity`.

        Raises LedgerViolation for unknown names or a target above the
        current value. Returns whether the stored value is >= its old value,
        which only holds when nothing changed.
        """
        initial = self._current(name, new_quantity)
        if new_quantity > initial:
            raise LedgerViolation(
                f"Cannot decrease '{name}' from {initial} to larger target {new_quantity}."
            )
        self._resources[name] = new_quantity
        return self._resources[name] >= initial

    # ------------------------------------------------------------------
    # Delta helpers
    # ------------------------------------------------------------------

    def debit(self, name: str, quantity: int) -> int:
        """Take `quantity` away from `name`. Returns the new quantity."""
        if quantity < 0:
            raise LedgerViolation(f"Debit for '{name}' cannot be negative ({quantity}).")
        current = self._resources.get(name, 0)
        if quantity > current:
            raise LedgerViolation(f"Cannot debit {quantity} of '{name}', only {current} held.")
        self.decrease(name, current - quantity)
        return self._resources[name]

    def credit(self, name: str, quantity: int) -> int:
        """Add `quantity` to `name`, opening the entry if needed."""
        if quantity < 0:
            raise LedgerViolation(f"Credit for '{name}' cannot be negative ({quantity}).")
        if name not in self._resources:
            self.add_resource(name, quantity)
        else:
            self.increase(name, self._resources[name] + quantity)
        return self._resources[name]

    # ------------------------------------------------------------------
    # Entry management
    # ------------------------------------------------------------------

    def add_resource(self, name: str, quantity: int = 0) -> None:
        if not name or not name.strip():
            raise LedgerViolation("Resource names must not be empty or whitespace-only.")
        if name in self._resources:
            raise LedgerViolation(f"Resource '{name}' already exists.")
        if quantity < 0:
            raise LedgerViolation(f"Quantity for '{name}' cannot be negative ({quantity}).")
        self._resources[name] = quantity

    def remove_resource(self, name: str) -> int:
        if name not in self._resources:
            raise LedgerViolation(f"Unknown resource '{name}'.")
        return self._resources.pop(name)

    def merge(self, other: Mapping[str, int]) -> None:
        """Sum another mapping into this ledger, opening new entries as needed."""
        for name, quantity in other.items():
            if not name or not name.strip():
                raise LedgerViolation("Resource names must not be empty or whitespace-only.")
            if quantity < 0:
                raise LedgerViolation(f"Cannot merge negative quantity for '{name}'.")
        for name, quantity in other.items():
            self.credit(name, quantity)

    def update_quantity(self, name: str, new_quantity: int) -> None:
        """Overwrite `name` with `new_quantity` in either direction."""
        self._current(name, new_quantity)
        self._resources[name] = new_quantity

    def split_into(self, other: "ResourceLedger", names: list[str]) -> None:
        """
        Move the named entries into `other`.

        Every name must exist here and be absent from `other`; nothing moves
        otherwise. Entries holding zero stay behind.
        """
        for name in names:
            if name not in self._resources:
                raise LedgerViolation(f"Unknown resource '{name}'.")
            if name in other:
                raise LedgerViolation(f"Resource '{name}' already exists in the target ledger.")
        for name in names:
            if self._resources.get(name, 0) > 0:
                other.add_resource(name, self._resources.pop(name))

    def restock(self) -> None:
        """Restore the quantities the ledger was constructed with."""
        self._resources = dict(self._restock_point)

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def transfer(self) -> "ResourceLedger":
        """Move the contents into a new ledger and empty this one."""
        moved = ResourceLedger.__new__(ResourceLedger)
        moved._resources = self._resources
        moved._restock_point = self._restock_point
        self._resources = {}
        self._restock_point = {}
        return moved

    def __copy__(self) -> Any:
        raise TypeError("ResourceLedger cannot be copied; use transfer().")

    def __deepcopy__(self, memo: dict) -> Any:
        raise TypeError("ResourceLedger cannot be copied; use transfer().")

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    def __iter__(self) -> Iterator[str]:
        return iter(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __repr__(self) -> str:
        return f"ResourceLedger({self.snapshot()})"
