# FILE: sdlcraft/grammar/strategies.py
"""
Deterministic repair strategies.

Each strategy is a pure function:

    strategy(cmd, ctx) -> StrategyOutcome | None

It never mutates `cmd`; every proposed fix is a fresh Command built with
Command.derive(). The engine tries DEFAULT_STRATEGIES in order and stops at
the first outcome. Order matters: argument-order repair runs before typo
correction, so a swapped-and-misspelled pair is fixed by reordering when
that alone validates.

Strategies:
1. normalize_flags     --Output-File=TRUE  -> outputfile=true       (0.98)
2. fix_argument_order  security analyze    -> analyze security      (0.95)
3. expand_synonym      check project       -> status project        (0.95)
4. correct_typos       stauts project      -> status project        (0.95 / 0.85 / 0.7 / 0.6)
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .config import GrammarConfig, RepairThresholds
from .distance import closest_candidates, confidence_for_distance
from .parser import GrammarParser
from .schemas import Command

logger = logging.getLogger(__name__)


# =============================================================================
# SHARED TYPES
# =============================================================================

@dataclass(frozen=True)
class RepairContext:
    """Everything a strategy may read. Nothing in here is written to."""
    parser: GrammarParser
    thresholds: RepairThresholds

    @property
    def config(self) -> GrammarConfig:
        return self.parser.config


@dataclass
class StrategyOutcome:
    """A strategy's proposal: one repaired command or a set of candidates."""
    strategy: str
    confidence: float
    explanation: str
    repaired: Optional[Command] = None
    candidates: List[Command] = field(default_factory=list)
    unambiguous: bool = False


RepairStrategy = Callable[[Command, RepairContext], Optional[StrategyOutcome]]


def _validated(cmd: Command, ctx: RepairContext) -> Optional[Command]:
    """Return cmd marked valid if it passes the grammar, else None."""
    if ctx.parser.is_grammatical(cmd):
        cmd.is_valid = True
        return cmd
    return None


# =============================================================================
# 1. FLAG NORMALIZATION
# =============================================================================

def normalize_flag_key(key: str) -> str:
    """--Output-File / output_file -> outputfile"""
    return key.lstrip("-").lower().replace("-", "").replace("_", "")


def normalize_flag_value(value: str) -> str:
    lowered = value.lower()
    if value == "" or lowered == "true":
        return "true"
    if lowered == "false":
        return "false"
    return value


def normalize_flags(cmd: Command, ctx: RepairContext) -> Optional[StrategyOutcome]:
    """Rewrite modifier keys and boolean values into their standard form."""
    if not cmd.modifiers:
        return None

    normalized: Dict[str, str] = {}
    sources: Dict[str, str] = {}
    changes: List[str] = []
    for key, value in cmd.modifiers.items():
        new_key = normalize_flag_key(key)
        new_value = normalize_flag_value(value)
        if new_value != value:
            changes.append(f"'{key}={value}' -> '{new_key}={new_value}'")
        elif new_key != key:
            changes.append(f"'{key}' -> '{new_key}'")

        # Last one wins
        if new_key in sources:
            changes.append(
                f"'{sources[new_key]}' and '{key}' both normalize to '{new_key}', "
                f"kept '{new_value}' and dropped '{normalized[new_key]}'"
            )
        sources[new_key] = key
        normalized[new_key] = new_value

    if not changes:
        return None

    repaired = _validated(cmd.derive(modifiers=normalized), ctx)
    if repaired is None:
        logger.debug("Flag normalization changed modifiers but command still invalid")
        return None

    return StrategyOutcome(
        strategy="flag-normalization",
        confidence=ctx.thresholds.flag_normalization,
        explanation=f"Normalized flag formats to standard form: {', '.join(changes)}",
        repaired=repaired,
    )


# =============================================================================
# 2. ARGUMENT ORDER
# =============================================================================

def fix_argument_order(cmd: Command, ctx: RepairContext) -> Optional[StrategyOutcome]:
    """
    Fix intent/target placed in the wrong slot.

    a) sdlc security analyze  -> sdlc analyze security   (swap)
    b) <no intent> status     -> sdlc status             (promote target)
    c) sdlc security          -> sdlc status security    (default intent)
    """
    config = ctx.config
    repaired: Optional[Command] = None
    explanation = ""

    if cmd.intent and cmd.target and config.is_intent(cmd.target):
        repaired = _validated(
            cmd.derive(intent=cmd.target.lower(), target=cmd.intent.lower()), ctx,
        )
        explanation = (
            f"Reordered arguments: '{cmd.intent} {cmd.target}' -> "
            f"'{cmd.target.lower()} {cmd.intent.lower()}'"
        )

    if repaired is None and not cmd.intent and cmd.target and config.is_intent(cmd.target):
        repaired = _validated(cmd.derive(intent=cmd.target.lower(), target=""), ctx)
        explanation = f"Moved '{cmd.target}' into the intent position"

    if repaired is None and cmd.intent and not cmd.target and config.is_target(cmd.intent):
        repaired = _validated(
            cmd.derive(intent=config.default_intent, target=cmd.intent.lower()),
            ctx,
        )
        explanation = (
            f"'{cmd.intent}' is a target; using default intent "
            f"'{config.default_intent}'"
        )

    if repaired is None:
        return None

    return StrategyOutcome(
        strategy="argument-order",
        confidence=ctx.thresholds.argument_order,
        explanation=explanation,
        repaired=repaired,
    )


# =============================================================================
# 3. SYNONYM EXPANSION
# =============================================================================

def expand_synonym(cmd: Command, ctx: RepairContext) -> Optional[StrategyOutcome]:
    """Map an informal verb (check, scan, optimize, ...) to its canonical intent."""
    if not cmd.intent:
        return None

    canonical = ctx.config.synonym_for(cmd.intent)
    if canonical is None:
        return None

    repaired = _validated(cmd.derive(intent=canonical), ctx)
    if repaired is None:
        return None

    return StrategyOutcome(
        strategy="synonym",
        confidence=ctx.thresholds.synonym,
        explanation=f"Expanded synonym '{cmd.intent}' to intent '{canonical}'",
        repaired=repaired,
    )


# =============================================================================
# 4. TYPO CORRECTION
# =============================================================================

def _dictionary(ctx: RepairContext, field_name: str) -> Tuple[str, ...]:
    return ctx.config.intents if field_name == "intent" else ctx.config.targets


def _correct_field(
    cmd: Command,
    ctx: RepairContext,
    field_name: str,
) -> Optional[StrategyOutcome]:
    """Typo-correct one field, leaving the other untouched."""
    word = getattr(cmd, field_name)
    dictionary = _dictionary(ctx, field_name)
    if word.lower() in dictionary:
        # Case is the only difference
        entries, distance = [word.lower()], 1
    else:
        entries, distance = closest_candidates(
            word, dictionary, ctx.config.max_edit_distance,
        )
    if not entries:
        return None

    if len(entries) == 1:
        repaired = _validated(cmd.derive(**{field_name: entries[0]}), ctx)
        if repaired is None:
            logger.debug(f"Typo fix {word!r} -> {entries[0]!r} does not validate")
            return None
        return StrategyOutcome(
            strategy=f"{field_name}-typo",
            confidence=confidence_for_distance(distance, ctx.thresholds),
            explanation=f"Corrected {field_name} typo '{word}' to '{entries[0]}'",
            repaired=repaired,
            unambiguous=True,
        )

    candidates = [
        repaired
        for repaired in (
            _validated(cmd.derive(**{field_name: entry}), ctx) for entry in entries
        )
        if repaired is not None
    ]
    if not candidates:
        return None

    return StrategyOutcome(
        strategy=f"{field_name}-typo",
        confidence=ctx.thresholds.ambiguous_single_field,
        explanation=(
            f"Found {len(candidates)} possible corrections for {field_name} '{word}': "
            f"{', '.join(getattr(c, field_name) for c in candidates)}"
        ),
        candidates=candidates,
    )


def _correct_both(cmd: Command, ctx: RepairContext) -> Optional[StrategyOutcome]:
    """Typo-correct intent and target together."""
    max_distance = ctx.config.max_edit_distance
    intents, _ = closest_candidates(cmd.intent, ctx.config.intents, max_distance)
    targets, _ = closest_candidates(cmd.target, ctx.config.targets, max_distance)

    candidates = []
    for intent in intents:
        for target in targets:
            repaired = _validated(cmd.derive(intent=intent, target=target), ctx)
            if repaired is not None:
                candidates.append(repaired)

    if not candidates:
        return None

    return StrategyOutcome(
        strategy="combined-typo",
        confidence=ctx.thresholds.ambiguous_both_fields,
        explanation=(
            f"Found {len(candidates)} possible corrections for both intent "
            f"'{cmd.intent}' and target '{cmd.target}'"
        ),
        candidates=candidates,
    )


def correct_typos(cmd: Command, ctx: RepairContext) -> Optional[StrategyOutcome]:
    """
    Edit-distance correction: intent, then target, then both.

    Only offending tokens are corrected; a token that already is a
    dictionary word is left alone.
    """
    config = ctx.config
    intent_offends = bool(cmd.intent) and cmd.intent not in config.intents
    target_offends = bool(cmd.target) and cmd.target not in config.targets

    if intent_offends:
        outcome = _correct_field(cmd, ctx, "intent")
        if outcome is not None:
            return outcome

    if cmd.intent and target_offends:
        outcome = _correct_field(cmd, ctx, "target")
        if outcome is not None:
            return outcome

    if intent_offends and target_offends:
        return _correct_both(cmd, ctx)

    return None


# =============================================================================
# PIPELINE
# =============================================================================

DEFAULT_STRATEGIES: Tuple[RepairStrategy, ...] = (
    normalize_flags,
    fix_argument_order,
    expand_synonym,
    correct_typos,
)


__all__ = [
    "RepairContext",
    "StrategyOutcome",
    "RepairStrategy",
    "normalize_flag_key",
    "normalize_flag_value",
    "normalize_flags",
    "fix_argument_order",
    "expand_synonym",
    "correct_typos",
    "DEFAULT_STRATEGIES",
]
