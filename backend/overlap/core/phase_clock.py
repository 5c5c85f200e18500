"""
Phase clock: deadline arithmetic for a round phase.

There is no timer process. A phase's deadline is derived from the stored
``phase_started_at`` and recomputed on every request that needs it.
"""

import math
from dataclasses import dataclass
from datetime import datetime

from overlap.core.utils import as_utc

ANSWERING = "answering"
VOTING = "voting"
RESULTS = "results"

PHASES = (ANSWERING, VOTING, RESULTS)


@dataclass(frozen=True)
class PhaseTiming:
    """Snapshot of a phase's timing at one instant"""
    phase: str
    elapsed_seconds: int
    time_limit: int
    remaining: int
    expired: bool


def time_limit_for(phase: str, answering_seconds: int = 60, voting_seconds: int = 30) -> int:
    """Answering gets the long limit, every other phase the short one"""
    return answering_seconds if phase == ANSWERING else voting_seconds


def phase_timing(
    phase: str,
    phase_started_at: datetime,
    now: datetime,
    answering_seconds: int = 60,
    voting_seconds: int = 30,
) -> PhaseTiming:
    """Pure function: elapsed/remaining seconds and expiry for a phase.

    ``elapsed`` is floored to whole seconds; ``remaining`` never goes below 0.
    Naive datetimes are read as UTC.
    """
    delta = (as_utc(now) - as_utc(phase_started_at)).total_seconds()
    elapsed = math.floor(delta)
    limit = time_limit_for(phase, answering_seconds, voting_seconds)
    return PhaseTiming(
        phase=phase,
        elapsed_seconds=elapsed,
        time_limit=limit,
        remaining=max(0, limit - elapsed),
        expired=elapsed >= limit,
    )
