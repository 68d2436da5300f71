# sequencer.py
# One-shot, cursor-gated execution over a Plan.
#
# The sequencer holds a Plan rather than extending it. Each slot is pending
# or completed; the cursor `step` points at the next pending slot and only
# ever moves forward. Slots the cursor has passed are frozen.
#
# Control flow:
#   apply_next()          → cursor slot only → mark completed → advance
#   apply_with_ledger()   → every slot → ledger gate → debit inputs
#                         → apply → credit nominal outputs
#
# All terminal output is delegated to display.py. No formatting here.

from typing import Iterable, Sequence

from resource_forge import display
from resource_forge.errors import ConstructionError, PreconditionError, StateViolation
from resource_forge.formula import Formula
from resource_forge.ledger import ResourceLedger
from resource_forge.models import ApplicationRecord
from resource_forge.plan import Plan


def _requirements(formula: Formula) -> dict[str, int]:
    """Input quantities keyed by name, summing repeated names."""
    needed: dict[str, int] = {}
    for name, quantity in zip(formula.input_resources, formula.input_quantities):
        needed[name] = needed.get(name, 0) + quantity
    return needed


class StepSequencer:
    """
    Executable plan with a monotonic cursor and per-slot completion flags.

    Example:
        sequencer = StepSequencer([smelt, forge, polish])
        sequencer.apply_next()      # runs slot 0, step -> 1
        sequencer.replace_at(0, x)  # StateViolation: slot 0 already ran
    """

    def __init__(
        self,
        formulas: Iterable[Formula],
        current_step: int = 0,
        completed: Sequence[bool] | None = None,
    ) -> None:
        plan = formulas.copy() if isinstance(formulas, Plan) else Plan(formulas)
        size = len(plan)

        if current_step < 0 or current_step >= size:
            raise ConstructionError(
                f"Initial step {current_step} is invalid for a plan of size {size}."
            )
        if completed is not None and len(completed) != size:
            raise ConstructionError(
                f"Completion flags ({len(completed)}) must match the plan size ({size})."
            )

        self._plan = plan
        self._step = current_step
        self._completed = [bool(flag) for flag in completed] if completed is not None else [False] * size
        self._history: list[ApplicationRecord] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def step(self) -> int:
        """Index of the next slot apply_next() will run."""
        return self._step

    @property
    def completed(self) -> tuple[bool, ...]:
        return tuple(self._completed)

    @property
    def is_finished(self) -> bool:
        return self._step >= len(self._plan)

    @property
    def history(self) -> list[ApplicationRecord]:
        """Records from apply_next(), oldest first."""
        return list(self._history)

    @property
    def plan(self) -> Plan:
        """Deep copy of the underlying plan. Edits to it do not reach the sequencer."""
        return self._plan.copy()

    def __len__(self) -> int:
        return len(self._plan)

    def __getitem__(self, index: int) -> Formula:
        return self._plan[index]

    # ------------------------------------------------------------------
    # Single-step execution
    # ------------------------------------------------------------------

    def apply_next(self) -> ApplicationRecord:
        """
        Run the slot under the cursor exactly once and advance.

        Raises StateViolation when the cursor is past the end or the slot
        has already completed.
        """
        total = len(self._plan)

        if self._step >= total:
            msg = f"Step {self._step} is past the end of a plan of size {total}."
            display.halt(msg)
            raise StateViolation(msg)

        if self._completed[self._step]:
            msg = f"Slot {self._step} was already applied."
            display.halt(msg)
            raise StateViolation(msg)

        record = self._plan[self._step].apply().model_copy(update={"slot": self._step})
        self._completed[self._step] = True
        self._step += 1
        self._history.append(record)

        display.step_applied(record, total)
        return record

    # ------------------------------------------------------------------
    # Guarded container operations
    # ------------------------------------------------------------------

    def append(self, formula: Formula) -> None:
        self._plan.append(formula)
        self._completed.append(False)

    def remove_last(self) -> Formula:
        """
        Drop the last slot.

        Refused when that slot is completed or sits behind the cursor.
        """
        if not len(self._plan):
            raise StateViolation("Cannot remove from an empty plan.")

        last = len(self._plan) - 1
        if self._step - 1 == last and self._completed[last]:
            raise StateViolation(f"Cannot remove slot {last}: it has already been applied.")
        if last < self._step:
            raise StateViolation(f"Cannot remove slot {last}: it is behind the cursor at {self._step}.")

        removed = self._plan.remove_last()
        self._completed.pop()
        return removed

    def replace_at(self, index: int, formula: Formula) -> None:
        """Swap in a new Formula at a slot the cursor has not reached."""
        if index < self._step:
            raise StateViolation(f"Cannot replace slot {index}: it is behind the cursor at {self._step}.")
        if index < len(self._completed) and self._completed[index]:
            raise StateViolation(f"Cannot replace slot {index}: it has already been applied.")

        appending = index == len(self._plan)
        self._plan.replace_at(index, formula)
        if appending:
            self._completed.append(False)

    # ------------------------------------------------------------------
    # Ledger-gated batch execution
    # ------------------------------------------------------------------

    def apply_with_ledger(self, ledger: ResourceLedger | None) -> ResourceLedger:
        """
        Batch pass over every slot, gated by `ledger`.

        A slot runs only when the ledger holds every input it needs. Its
        inputs are debited and its nominal output quantities credited, not
        the randomised result. Short slots are skipped without raising.
        The cursor, completion flags and history are left alone.
        """
        if ledger is None:
            raise PreconditionError("A ledger is required for a ledger-gated pass.")

        for slot, formula in enumerate(self._plan):
            if not formula.is_initialized:
                raise PreconditionError(f"Slot {slot} holds an uninitialised Formula.")

        display.batch_start(len(self._plan))

        for slot, formula in enumerate(self._plan):
            needed = _requirements(formula)
            missing = ledger.shortfall(needed)
            if missing:
                display.step_skipped(slot, missing)
                continue

            record = formula.apply().model_copy(update={"slot": slot})
            for name, quantity in needed.items():
                ledger.debit(name, quantity)
            for name, quantity in zip(formula.output_resources, formula.output_quantities):
                ledger.credit(name, quantity)

            display.slot_gated(slot, record)

        return ledger

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    @classmethod
    def _from_parts(
        cls,
        plan: Plan,
        step: int,
        completed: list[bool],
        history: list[ApplicationRecord],
    ) -> "StepSequencer":
        sequencer = cls.__new__(cls)
        sequencer._plan = plan
        sequencer._step = step
        sequencer._completed = completed
        sequencer._history = history
        return sequencer

    def copy(self) -> "StepSequencer":
        """Deep copy: formulas, cursor, flags and history are all independent."""
        return StepSequencer._from_parts(
            self._plan.copy(),
            self._step,
            list(self._completed),
            [record.model_copy(deep=True) for record in self._history],
        )

    def transfer(self) -> "StepSequencer":
        """Move everything into a new sequencer and leave this one empty."""
        moved = StepSequencer._from_parts(self._plan.transfer(), self._step, self._completed, self._history)
        self._step = 0
        self._completed = []
        self._history = []
        return moved

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StepSequencer):
            return NotImplemented
        return (
            self._step == other._step
            and self._completed == other._completed
            and self._plan == other._plan
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"StepSequencer(step={self._step}, size={len(self._plan)})"
