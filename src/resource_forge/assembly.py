# assembly.py
# Binds a Plan or StepSequencer to the ledger it draws from.
#
# Assembly adds no rules of its own. Every call is forwarded to the wrapped
# plan or ledger, which enforce their own invariants.

from resource_forge.errors import PreconditionError, StateViolation
from resource_forge.formula import Formula
from resource_forge.ledger import ResourceLedger
from resource_forge.models import ApplicationRecord
from resource_forge.plan import Plan
from resource_forge.sequencer import StepSequencer


class Assembly:
    """A plan paired with its stockpile."""

    def __init__(self, plan: Plan | StepSequencer, ledger: ResourceLedger) -> None:
        if plan is None:
            raise PreconditionError("Assembly requires a plan.")
        if ledger is None:
            raise PreconditionError("Assembly requires a ledger.")
        self._plan = plan
        self._ledger = ledger

    @property
    def is_executable(self) -> bool:
        return isinstance(self._plan, StepSequencer)

    @property
    def plan(self) -> Plan | StepSequencer:
        return self._plan

    @property
    def ledger(self) -> ResourceLedger:
        return self._ledger

    # ------------------------------------------------------------------
    # Plan operations
    # ------------------------------------------------------------------

    def append(self, formula: Formula) -> None:
        self._plan.append(formula)

    def remove_last(self) -> Formula:
        return self._plan.remove_last()

    def replace_at(self, index: int, formula: Formula) -> None:
        self._plan.replace_at(index, formula)

    def apply(self) -> list[ApplicationRecord]:
        """Next step for an executable plan, every formula for a plain one."""
        if self.is_executable:
            return [self._plan.apply_next()]
        return self._plan.apply_all()

    def apply_with_ledger(self) -> ResourceLedger:
        if not self.is_executable:
            raise StateViolation("Ledger-gated execution needs an executable plan.")
        return self._plan.apply_with_ledger(self._ledger)

    # ------------------------------------------------------------------
    # Ledger operations
    # ------------------------------------------------------------------

    def increase(self, name: str, new_quantity: int) -> bool:
        return self._ledger.increase(name, new_quantity)

    def decrease(self, name: str, new_quantity: int) -> bool:
        return self._ledger.decrease(name, new_quantity)

    def restock(self) -> None:
        self._ledger.restock()
