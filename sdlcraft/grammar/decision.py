# FILE: sdlcraft/grammar/decision.py
"""
Decision policy: map a RepairResult to what the caller should do.

    confidence > 0.9 and a repaired command        -> auto-correct
    single dictionary match, confidence >= 0.85    -> auto-correct
    0.5 <= confidence <= 0.9 and any candidate     -> present-options
    anything else                                  -> fail-to-backend

Pure function, no side effects.
"""
from __future__ import annotations

from .config import RepairThresholds, DEFAULT_THRESHOLDS
from .schemas import RepairAction, RepairResult


def decide_action(
    result: RepairResult,
    thresholds: RepairThresholds = DEFAULT_THRESHOLDS,
) -> RepairAction:
    """Pick auto-correct, present-options or fail-to-backend for a result."""
    confidence = result.confidence

    if result.repaired is not None:
        if confidence > thresholds.auto_correct_above:
            return RepairAction.AUTO_CORRECT
        # One dictionary word within distance two: nothing to choose between
        if result.unambiguous and confidence >= thresholds.distance_two:
            return RepairAction.AUTO_CORRECT

    if (
        thresholds.present_options_min <= confidence <= thresholds.present_options_max
        and result.candidates
    ):
        return RepairAction.PRESENT_OPTIONS

    return RepairAction.FAIL_TO_BACKEND


__all__ = ["decide_action"]
