# formula.py
# A single resource-to-resource conversion rule with a probabilistic outcome.
#
# A Formula owns its resource lists and its result vector outright. Copies
# duplicate every list; transfer() hands the data to a new object and leaves
# the source in the uninitialised default state.

import random
from typing import Any

from pydantic import ValidationError

from resource_forge.errors import ConstructionError, PreconditionError
from resource_forge.models import ApplicationRecord, FormulaSpec
from resource_forge.outcome import (
    MAX_PROFICIENCY,
    ResolutionPolicy,
    apply_tier,
    compute_modifiers,
    resolve_tier,
)

# Seeded once per process. Pass rng= for reproducible draws.
_DEFAULT_RNG = random.Random()

PROFICIENCY_INTERVAL = 5


class Formula:
    """
    Converts named input quantities into named output quantities.

    Example:
        plank = Formula(["log"], [1], ["plank"], [4], proficiency=1)
        record = plank.apply()
        record.tier, plank.result
    """

    def __init__(
        self,
        input_resources: list[str] | None = None,
        input_quantities: list[int] | None = None,
        output_resources: list[str] | None = None,
        output_quantities: list[int] | None = None,
        proficiency: int = 0,
        *,
        rng: random.Random | None = None,
        policy: ResolutionPolicy = ResolutionPolicy.LEGACY,
    ) -> None:
        self._rng = rng
        self._policy = ResolutionPolicy(policy)
        self._reset()

        lists = (input_resources, input_quantities, output_resources, output_quantities)
        if all(value is None for value in lists):
            return

        try:
            spec = FormulaSpec.model_validate(
                {
                    "input_resources": input_resources,
                    "input_quantities": input_quantities,
                    "output_resources": output_resources,
                    "output_quantities": output_quantities,
                    "proficiency": proficiency,
                }
            )
        except ValidationError as exc:
            raise ConstructionError(f"Formula arguments are invalid: {exc}") from exc

        self._input_resources = list(spec.input_resources)
        self._input_quantities = list(spec.input_quantities)
        self._output_resources = list(spec.output_resources)
        self._output_quantities = list(spec.output_quantities)
        self._result = [0] * len(spec.output_quantities)
        self._proficiency = spec.proficiency

    def _reset(self) -> None:
        self._input_resources: list[str] | None = None
        self._input_quantities: list[int] | None = None
        self._output_resources: list[str] | None = None
        self._output_quantities: list[int] | None = None
        self._result: list[int] | None = None
        self._proficiency = 0
        self._applications = 0

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return None not in (
            self._input_resources,
            self._input_quantities,
            self._output_resources,
            self._output_quantities,
            self._result,
        )

    @property
    def input_resources(self) -> list[str]:
        return list(self._input_resources or [])

    @property
    def input_quantities(self) -> list[int]:
        return list(self._input_quantities or [])

    @property
    def output_resources(self) -> list[str]:
        return list(self._output_resources or [])

    @property
    def output_quantities(self) -> list[int]:
        return list(self._output_quantities or [])

    @property
    def result(self) -> list[int]:
        """Result vector written by the last apply()."""
        return list(self._result or [])

    @property
    def proficiency(self) -> int:
        return self._proficiency

    @property
    def applications(self) -> int:
        return self._applications

    @property
    def policy(self) -> ResolutionPolicy:
        return self._policy

    def inputs(self) -> dict[str, int]:
        return dict(zip(self.input_resources, self.input_quantities))

    def outputs(self) -> dict[str, int]:
        return dict(zip(self.output_resources, self.output_quantities))

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def apply(self, rng: random.Random | None = None) -> ApplicationRecord:
        """
        Draw once, resolve the outcome tier and rewrite the result vector.

        The draw is rounded to two decimals before resolution. Every fifth
        application raises proficiency by one, up to the cap.
        Raises PreconditionError on an uninitialised Formula.
        """
        if not self.is_initialized:
            raise PreconditionError("Cannot apply an uninitialised Formula.")

        source = rng or self._rng or _DEFAULT_RNG
        modifiers = compute_modifiers(self._proficiency)
        draw = round(source.random(), 2)

        tier = resolve_tier(draw, modifiers, self._policy)
        self._result = apply_tier(tier, self._output_quantities, self._result, self._policy)

        self._applications += 1
        if self._applications % PROFICIENCY_INTERVAL == 0 and self._proficiency < MAX_PROFICIENCY:
            self._proficiency += 1

        return ApplicationRecord(
            draw=draw,
            tier=tier,
            result=list(self._result),
            proficiency=self._proficiency,
        )

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def copy(self) -> "Formula":
        """Independent duplicate. The random source is shared, not cloned."""
        clone = Formula(rng=self._rng, policy=self._policy)
        if self.is_initialized:
            clone._input_resources = list(self._input_resources)
            clone._input_quantities = list(self._input_quantities)
            clone._output_resources = list(self._output_resources)
            clone._output_quantities = list(self._output_quantities)
            clone._result = list(self._result)
        clone._proficiency = self._proficiency
        clone._applications = self._applications
        return clone

    def transfer(self) -> "Formula":
        """Move this Formula's data into a new object and reset this one."""
        moved = Formula(rng=self._rng, policy=self._policy)
        moved._input_resources = self._input_resources
        moved._input_quantities = self._input_quantities
        moved._output_resources = self._output_resources
        moved._output_quantities = self._output_quantities
        moved._result = self._result
        moved._proficiency = self._proficiency
        moved._applications = self._applications
        self._reset()
        return moved

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Formula):
            return NotImplemented
        return (
            self._input_resources == other._input_resources
            and self._input_quantities == other._input_quantities
            and self._output_resources == other._output_resources
            and self._output_quantities == other._output_quantities
            and self._result == other._result
            and self._proficiency == other._proficiency
        )

    __hash__ = None

    def __repr__(self) -> str:
        if not self.is_initialized:
            return "Formula(<uninitialised>)"
        return f"Formula({self.inputs()} -> {self.outputs()}, proficiency={self._proficiency})"
