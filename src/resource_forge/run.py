# run.py
# Entry point. Config and wiring only, no logic lives here.
#
# Settings come from the environment (or a .env file):
#   FORGE_SEED    integer seed for reproducible draws
#   FORGE_POLICY  "legacy" or "partition"
#   FORGE_QUIET   "1" silences console output

import os
import random

from dotenv import load_dotenv

from resource_forge import display
from resource_forge.formula import Formula
from resource_forge.ledger import ResourceLedger
from resource_forge.outcome import ResolutionPolicy
from resource_forge.sequencer import StepSequencer

load_dotenv()

SEED = int(os.environ["FORGE_SEED"]) if os.getenv("FORGE_SEED") else None
POLICY = ResolutionPolicy(os.getenv("FORGE_POLICY", ResolutionPolicy.LEGACY.value))

OPENING_STOCK = {
    "iron_ore": 12,
    "coal": 8,
    "timber": 6,
}

# (inputs, outputs, proficiency)
FORMULAS = [
    ({"iron_ore": 3, "coal": 2}, {"iron_ingot": 2}, 0),
    ({"timber": 2}, {"plank": 4}, 1),
    ({"iron_ingot": 2, "plank": 1}, {"tool_head": 1, "scrap": 1}, 2),
]


def _build(rng: random.Random) -> list[Formula]:
    return [
        Formula(
            list(inputs),
            list(inputs.values()),
            list(outputs),
            list(outputs.values()),
            proficiency,
            rng=rng,
            policy=POLICY,
        )
        for inputs, outputs, proficiency in FORMULAS
    ]


def main() -> None:
    rng = random.Random(SEED)
    display.banner(SEED, POLICY.value)

    # Single-step run over the whole plan.
    sequencer = StepSequencer(_build(rng))
    display.plan_table(sequencer.plan.formulas, sequencer.step, sequencer.completed)
    while not sequencer.is_finished:
        sequencer.apply_next()
    display.plan_table(sequencer.plan.formulas, sequencer.step, sequencer.completed)

    # Two ledger-gated passes against the same stockpile.
    ledger = ResourceLedger(OPENING_STOCK)
    gated = StepSequencer(_build(rng))
    display.ledger_table(ledger.snapshot(), "OPENING STOCK")
    for _ in range(2):
        gated.apply_with_ledger(ledger)
        display.ledger_table(ledger.snapshot())


if __name__ == "__main__":
    main()
