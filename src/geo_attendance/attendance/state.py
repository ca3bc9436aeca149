"""Derive check-in state from a user's history and gate transitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.enums import AttendanceState, AttendanceType
from .model import AttendanceRecord


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    reason: Optional[str] = None


ALLOWED = TransitionDecision(allowed=True)


def current_state(history: Sequence[AttendanceRecord]) -> AttendanceState:
    """``history`` must be one user's records, newest first."""
    if history and history[0].type == AttendanceType.CHECK_IN:
        return AttendanceState.CHECKED_IN
    return AttendanceState.CHECKED_OUT


def validate_transition(state: AttendanceState, requested: AttendanceType) -> TransitionDecision:
    if requested == AttendanceType.CHECK_IN and state == AttendanceState.CHECKED_IN:
        return TransitionDecision(allowed=False, reason="already checked in")
    if requested == AttendanceType.CHECK_OUT and state == AttendanceState.CHECKED_OUT:
        return TransitionDecision(allowed=False, reason="not checked in")
    return ALLOWED


def available_actions(state: AttendanceState) -> dict[AttendanceType, bool]:
    return {t: validate_transition(state, t).allowed for t in AttendanceType}
