from __future__ import annotations

from collections.abc import Iterable

from merkle_rewards.core.models.rewards import Phase


def normalize_phases(phases: Iterable[Phase]) -> list[Phase]:
    """Return the phases in order with at most one marked active.

    If the program document flags several phases active, the first one wins
    and later ones are reported inactive. Inputs are not modified.
    """
    seen_active = False
    normalized: list[Phase] = []
    for phase in phases:
        if phase.is_active and seen_active:
            normalized.append(phase.model_copy(update={"is_active": False}))
            continue
        if phase.is_active:
            seen_active = True
        normalized.append(phase.model_copy())
    return normalized


def active_phase(phases: Iterable[Phase]) -> Phase | None:
    return next((p for p in normalize_phases(phases) if p.is_active), None)


def inactive_phases(phases: Iterable[Phase]) -> list[Phase]:
    return [p for p in normalize_phases(phases) if not p.is_active]
