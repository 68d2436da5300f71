# plan.py
# Ordered, resizable container of Formulas.
#
# The plan owns every Formula it holds. copy() deep-copies each one;
# transfer() moves the whole sequence and leaves an empty plan behind.

from typing import Any, Iterable, Iterator

from resource_forge.errors import StateViolation
from resource_forge.formula import Formula
from resource_forge.models import ApplicationRecord

INITIAL_CAPACITY = 2


class Plan:
    """A 0-indexed sequence of Formulas with doubling growth."""

    def __init__(self, formulas: Iterable[Formula] = ()) -> None:
        self._formulas: list[Formula] = []
        self._capacity = INITIAL_CAPACITY
        for formula in formulas:
            self.append(formula)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, formula: Formula) -> None:
        if not isinstance(formula, Formula):
            raise TypeError(f"Plan holds Formula objects, got {type(formula).__name__}.")
        if len(self._formulas) >= self._capacity:
            self._capacity *= 2
        self._formulas.append(formula)

    def remove_last(self) -> Formula:
        if not self._formulas:
            raise StateViolation("Cannot remove from an empty plan.")
        return self._formulas.pop()

    def replace_at(self, index: int, formula: Formula) -> None:
        """
        Overwrite the Formula at `index`.

        `index == len(plan)` appends. Anything past that is rejected.
        """
        if not isinstance(formula, Formula):
            raise TypeError(f"Plan holds Formula objects, got {type(formula).__name__}.")
        if index < 0 or index > len(self._formulas):
            raise StateViolation(
                f"Replace index {index} is out of bounds for a plan of size {len(self._formulas)}."
            )
        if index == len(self._formulas):
            self.append(formula)
            return
        self._formulas[index] = formula

    def apply_all(self) -> list[ApplicationRecord]:
        """Apply every Formula once, in order."""
        if not self._formulas:
            raise StateViolation("Cannot apply an empty plan.")
        return [
            formula.apply().model_copy(update={"slot": index})
            for index, formula in enumerate(self._formulas)
        ]

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def copy(self) -> "Plan":
        clone = Plan()
        clone._formulas = [formula.copy() for formula in self._formulas]
        clone._capacity = self._capacity
        return clone

    def transfer(self) -> "Plan":
        moved = Plan()
        moved._formulas = self._formulas
        moved._capacity = self._capacity
        self._formulas = []
        self._capacity = INITIAL_CAPACITY
        return moved

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def formulas(self) -> list[Formula]:
        """Shallow copy of the stored Formulas in order."""
        return list(self._formulas)

    def __len__(self) -> int:
        return len(self._formulas)

    def __getitem__(self, index: int) -> Formula:
        return self._formulas[index]

    def __iter__(self) -> Iterator[Formula]:
        return iter(self._formulas)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Plan):
            return NotImplemented
        return self._formulas == other._formulas

    __hash__ = None

    def __repr__(self) -> str:
        return f"Plan(size={len(self._formulas)}, capacity={self._capacity})"
