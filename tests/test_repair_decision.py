# FILE: tests/test_repair_decision.py
"""
Tests for the repair decision policy.

The boundaries are exact: > 0.9 auto-corrects, 0.5..0.9 (inclusive) presents
options when there is something to present, everything else goes to the
intent inference backend.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from sdlcraft.grammar import (
    Command,
    GrammarConfig,
    GrammarParser,
    RepairAction,
    RepairEngine,
    RepairResult,
    RepairThresholds,
    decide_action,
)


def _cmd(intent="status", target=""):
    return Command(raw=f"sdlc {intent} {target}".strip(), intent=intent, target=target, is_valid=True)


def _result(confidence, repaired=False, candidates=0, unambiguous=False):
    original = Command(raw="sdlc something")
    return RepairResult(
        original=original,
        repaired=_cmd() if repaired else None,
        confidence=confidence,
        candidates=[_cmd("test"), _cmd("text")][:candidates],
        unambiguous=unambiguous,
    )


# =============================================================================
# AUTO-CORRECT
# =============================================================================


class TestAutoCorrect:
    """High-confidence single repairs are applied without asking."""

    @pytest.mark.parametrize("confidence", [1.0, 0.98, 0.95, 0.91])
    def test_high_confidence_repair(self, confidence):
        assert decide_action(_result(confidence, repaired=True)) == RepairAction.AUTO_CORRECT

    def test_repair_wins_over_candidates(self):
        result = _result(0.95, repaired=True, candidates=2)
        assert decide_action(result) == RepairAction.AUTO_CORRECT

    def test_unambiguous_distance_two(self):
        result = _result(0.85, repaired=True, unambiguous=True)
        assert decide_action(result) == RepairAction.AUTO_CORRECT

    def test_unambiguous_still_needs_minimum(self):
        result = _result(0.4, repaired=True, unambiguous=True)
        assert decide_action(result) == RepairAction.FAIL_TO_BACKEND

    @pytest.mark.parametrize("confidence", [0.5, 0.7, 0.84])
    def test_unambiguous_far_match_not_applied(self, confidence):
        result = _result(confidence, repaired=True, unambiguous=True)
        assert decide_action(result) == RepairAction.FAIL_TO_BACKEND

    def test_wide_edit_distance_never_auto_corrects_far_guess(self):
        config = GrammarConfig(max_edit_distance=3)
        parser = GrammarParser(config)
        engine = RepairEngine(parser)

        # three substitutions away from "status"
        result, action = engine.repair_with_decision(parser.parse("sdlc sxxyus project"))
        assert result.repaired.intent == "status"
        assert result.confidence == 0.5
        assert action != RepairAction.AUTO_CORRECT


# =============================================================================
# PRESENT OPTIONS
# =============================================================================


class TestPresentOptions:
    """Mid-confidence results with candidates are shown to the user."""

    @pytest.mark.parametrize("confidence", [0.9, 0.7, 0.6, 0.5])
    def test_candidates_in_band(self, confidence):
        assert decide_action(_result(confidence, candidates=2)) == RepairAction.PRESENT_OPTIONS

    def test_single_candidate(self):
        assert decide_action(_result(0.6, candidates=1)) == RepairAction.PRESENT_OPTIONS


# =============================================================================
# FAIL TO BACKEND
# =============================================================================


class TestFailToBackend:
    """Everything else escalates."""

    @pytest.mark.parametrize("confidence", [0.0, 0.3, 0.49])
    def test_low_confidence(self, confidence):
        assert decide_action(_result(confidence, candidates=2)) == RepairAction.FAIL_TO_BACKEND

    def test_boundary_repair_without_candidates(self):
        # 0.9 is not > 0.9 and there is nothing to present
        assert decide_action(_result(0.9, repaired=True)) == RepairAction.FAIL_TO_BACKEND

    def test_distance_two_without_unambiguous(self):
        assert decide_action(_result(0.85, repaired=True)) == RepairAction.FAIL_TO_BACKEND

    def test_high_confidence_candidates_only(self):
        assert decide_action(_result(0.95, candidates=2)) == RepairAction.FAIL_TO_BACKEND

    def test_nothing_at_all(self):
        assert decide_action(_result(0.0)) == RepairAction.FAIL_TO_BACKEND


# =============================================================================
# ACTIONS + INTEGRATION
# =============================================================================


class TestDecisionIntegration:
    """Action tags and the engine's repair_with_decision()."""

    def test_action_tags(self):
        assert RepairAction.AUTO_CORRECT == "auto-correct"
        assert RepairAction.PRESENT_OPTIONS == "present-options"
        assert RepairAction.FAIL_TO_BACKEND == "fail-to-backend"

    def test_custom_thresholds(self):
        strict = RepairThresholds(auto_correct_above=0.96)
        assert decide_action(_result(0.95, repaired=True), strict) == RepairAction.FAIL_TO_BACKEND
        assert decide_action(_result(0.98, repaired=True), strict) == RepairAction.AUTO_CORRECT

    def test_engine_delegates(self, parser, engine):
        result = engine.repair(parser.parse("sdlc security analyze"))
        assert engine.decide_action(result) == decide_action(result)

    @pytest.mark.parametrize("text,expected", [
        ("sdlc status project", RepairAction.AUTO_CORRECT),
        ("sdlc stauts project", RepairAction.AUTO_CORRECT),
        ("sdlc check project", RepairAction.AUTO_CORRECT),
        ("sdlc security analyze", RepairAction.AUTO_CORRECT),
        ("sdlc xyzabc qwerty", RepairAction.FAIL_TO_BACKEND),
        ("what is going on with my build", RepairAction.FAIL_TO_BACKEND),
    ])
    def test_repair_with_decision(self, parser, engine, text, expected):
        result, action = engine.repair_with_decision(parser.parse(text))
        assert action == expected
        assert result.original.raw == text
