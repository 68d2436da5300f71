# outcome.py
# Proficiency → tier probabilities, and draw → tier resolution.
#
# Pure functions only. Formula owns the random source and the result vector;
# this module decides which tier a draw lands in and what that tier does to
# the nominal output quantities.

import math
from enum import Enum

from resource_forge.errors import ConstructionError
from resource_forge.models import OutcomeModifiers, OutcomeTier

MAX_PROFICIENCY = 5

BASE_FAILURE = 0.25
BASE_PARTIAL = 0.20
BASE_BONUS = 0.05
BASE_NORMAL = 0.50
LEVEL_SHIFT = 0.05

PARTIAL_MODIFIER = 0.75
BONUS_MODIFIER = 1.1


class ResolutionPolicy(str, Enum):
    """
    How a draw is matched against the modifiers.

    LEGACY runs four independent open-interval checks where the last match
    wins and a draw on a boundary matches nothing. PARTITION normalises the
    modifiers into a cumulative table and always picks exactly one tier.
    """

    LEGACY = "legacy"
    PARTITION = "partition"


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------


def compute_modifiers(level: int) -> OutcomeModifiers:
    """
    Tier probabilities for a proficiency level.

    Each level moves 0.05 out of failure and partial and into bonus and
    normal, so the four values always sum to 1.0. Nothing clamps them:
    partial goes negative at level 5.
    """
    if level < 0 or level > MAX_PROFICIENCY:
        raise ConstructionError(f"Proficiency level must be 0..{MAX_PROFICIENCY}, got {level}.")

    shift = level * LEVEL_SHIFT
    return OutcomeModifiers(
        failure=BASE_FAILURE - shift,
        partial=BASE_PARTIAL - shift,
        bonus=BASE_BONUS + shift,
        normal=BASE_NORMAL + shift,
    )


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _resolve_legacy(draw: float, m: OutcomeModifiers) -> OutcomeTier | None:
    tier: OutcomeTier | None = None

    if draw < m.failure:
        tier = OutcomeTier.FAILURE
    if m.failure < draw < m.failure + m.partial:
        tier = OutcomeTier.PARTIAL
    if m.failure + m.partial < draw < m.normal:
        tier = OutcomeTier.BONUS
    if m.failure + m.bonus + m.partial < draw < 1.0:
        tier = OutcomeTier.NORMAL

    return tier


def cumulative_table(m: OutcomeModifiers) -> list[tuple[float, OutcomeTier]]:
    """Upper bounds of each tier after clamping negatives and normalising to 1."""
    weights = [
        (OutcomeTier.FAILURE, max(m.failure, 0.0)),
        (OutcomeTier.PARTIAL, max(m.partial, 0.0)),
        (OutcomeTier.BONUS, max(m.bonus, 0.0)),
        (OutcomeTier.NORMAL, max(m.normal, 0.0)),
    ]
    total = sum(weight for _, weight in weights)

    table: list[tuple[float, OutcomeTier]] = []
    running = 0.0
    for tier, weight in weights:
        running += weight / total
        table.append((running, tier))
    return table


def _resolve_partition(draw: float, m: OutcomeModifiers) -> OutcomeTier:
    for upper, tier in cumulative_table(m):
        if draw < upper:
            return tier
    # Draws rounded up to 1.0 land in the last tier.
    return OutcomeTier.NORMAL


def resolve_tier(
    draw: float,
    modifiers: OutcomeModifiers,
    policy: ResolutionPolicy = ResolutionPolicy.LEGACY,
) -> OutcomeTier | None:
    """
    Map a draw in [0, 1] onto a tier.

    Returns None only under LEGACY, when no branch matched the draw.
    """
    if policy is ResolutionPolicy.PARTITION:
        return _resolve_partition(draw, modifiers)
    return _resolve_legacy(draw, modifiers)


# ---------------------------------------------------------------------------
# Result vector
# ---------------------------------------------------------------------------


def apply_tier(
    tier: OutcomeTier | None,
    outputs: list[int],
    result: list[int],
    policy: ResolutionPolicy = ResolutionPolicy.LEGACY,
) -> list[int]:
    """
    Return the new result vector for `tier`.

    `result` is the previous vector. It is returned unchanged when no tier
    fired, and a LEGACY failure only clears its first cell.
    """
    updated = list(result)

    if tier is None:
        return updated

    if tier is OutcomeTier.FAILURE:
        if policy is ResolutionPolicy.PARTITION:
            return [0] * len(outputs)
        if updated:
            updated[0] = 0
        return updated

    if tier is OutcomeTier.PARTIAL:
        return [math.floor(q * PARTIAL_MODIFIER) for q in outputs]

    if tier is OutcomeTier.BONUS:
        # round() absorbs float noise such as 10 * 1.1 == 11.000000000000002
        return [math.ceil(round(q * BONUS_MODIFIER, 9)) for q in outputs]

    return list(outputs)
