# FILE: sdlcraft/grammar/repair.py
"""
Self-healing repair engine for SDLCraft commands.

Pipeline (first hit wins):
1. Flag normalization   (0.98)
2. Argument order       (0.95)
3. Synonym expansion    (0.95)
4. Typo correction      (0.95 / 0.85 single match, 0.7 / 0.6 ambiguous)

Nothing fires -> confidence 0.0 and the caller escalates to intent
inference. That is a normal result, not an error.

INVARIANT: the input command is never modified; confidence is 1.0 only for
commands that were already valid.
"""
from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple

from .config import GrammarConfig, RepairThresholds, DEFAULT_THRESHOLDS
from .decision import decide_action
from .errors import InvalidCommandError
from .parser import GrammarParser
from .schemas import Command, RepairAction, RepairResult
from .strategies import DEFAULT_STRATEGIES, RepairContext, RepairStrategy

logger = logging.getLogger(__name__)


class RepairEngine:
    """
    Deterministic command repair.

    Usage:
        engine = RepairEngine(parser)
        result, action = engine.repair_with_decision(cmd)
        if action == RepairAction.AUTO_CORRECT:
            run(result.repaired)
    """

    def __init__(
        self,
        parser: Optional[GrammarParser] = None,
        config: Optional[GrammarConfig] = None,
        strategies: Optional[Sequence[RepairStrategy]] = None,
        thresholds: Optional[RepairThresholds] = None,
    ):
        """
        Args:
            parser: Parser used to validate repaired commands
            config: Vocabulary; ignored when a parser is given (the parser's wins)
            strategies: Ordered strategy chain (default: DEFAULT_STRATEGIES)
            thresholds: Confidence values and policy bounds
        """
        self.parser = parser or GrammarParser(config)
        self.thresholds = thresholds or DEFAULT_THRESHOLDS
        self.strategies: Tuple[RepairStrategy, ...] = tuple(
            DEFAULT_STRATEGIES if strategies is None else strategies
        )
        self._context = RepairContext(parser=self.parser, thresholds=self.thresholds)

    @property
    def config(self) -> GrammarConfig:
        return self.parser.config

    def repair(self, cmd: Command) -> RepairResult:
        """
        Attempt to repair a command.

        Raises:
            InvalidCommandError: cmd is None or not a Command
        """
        if not isinstance(cmd, Command):
            raise InvalidCommandError(cmd)

        if cmd.is_valid:
            return RepairResult(
                original=cmd,
                repaired=cmd,
                confidence=self.thresholds.already_valid,
                explanation="Command is already valid",
                strategy="already-valid",
            )

        for strategy in self.strategies:
            outcome = strategy(cmd, self._context)
            if outcome is None:
                name = getattr(strategy, "__name__", repr(strategy))
                logger.debug(f"[repair] {name}: no fix for {cmd.raw!r}")
                continue

            logger.info(
                f"[repair] {outcome.strategy} fixed {cmd.raw!r} "
                f"(confidence={outcome.confidence:.2f}, candidates={len(outcome.candidates)})"
            )
            return RepairResult(
                original=cmd,
                repaired=outcome.repaired,
                confidence=outcome.confidence,
                explanation=outcome.explanation,
                candidates=list(outcome.candidates),
                strategy=outcome.strategy,
                unambiguous=outcome.unambiguous,
            )

        logger.info(f"[repair] No deterministic repair for {cmd.raw!r}")
        return RepairResult(
            original=cmd,
            confidence=self.thresholds.unrepairable,
            explanation="Unable to repair command deterministically, requires intent inference",
        )

    def suggest_corrections(self, cmd: Command) -> List[Command]:
        """All plausible corrections: the single repair, or the candidates."""
        result = self.repair(cmd)
        if result.repaired is not None:
            return [result.repaired]
        return list(result.candidates)

    def decide_action(self, result: RepairResult) -> RepairAction:
        return decide_action(result, self.thresholds)

    def repair_with_decision(self, cmd: Command) -> Tuple[RepairResult, RepairAction]:
        """repair() followed by decide_action()."""
        result = self.repair(cmd)
        action = self.decide_action(result)
        logger.debug(f"[repair] Decision for {cmd.raw!r}: {action.value}")
        return result, action


__all__ = ["RepairEngine"]
