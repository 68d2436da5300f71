# errors.py
# Exception taxonomy for the conversion engine.
#
# Every failure is raised to the direct caller. Nothing here is retried and
# no mutation that would break an invariant is ever half-applied.


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConstructionError(ValueError):
    """Raised when a Formula, ledger or sequencer is built from invalid data."""


class PreconditionError(Exception):
    """Raised when an operation is called on an object that cannot serve it."""


class StateViolation(Exception):
    """Raised when a step would re-run, run past the end, or touch completed work."""


class LedgerViolation(Exception):
    """Raised on unknown resources or illegal quantity targets in a ledger."""
