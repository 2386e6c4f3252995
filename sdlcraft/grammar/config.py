# FILE: sdlcraft/grammar/config.py
"""
SDLCraft Grammar Layer - Configuration

Vocabularies and confidence knobs for the parser and the repair engine.
Everything here is frozen and handed to the parser/engine at construction,
so several engines with different vocabularies can coexist and tests can
inject their own.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv


# =============================================================================
# DEFAULT VOCABULARIES
# =============================================================================

DEFAULT_PROGRAM_NAME = "sdlc"

DEFAULT_INTENTS: Tuple[str, ...] = (
    "status",
    "analyze",
    "improve",
    "test",
    "debug",
    "prepare",
    "release",
)

# Intents that cannot run without a target
DEFAULT_TARGET_REQUIRED_INTENTS: Tuple[str, ...] = ("analyze", "improve")

DEFAULT_TARGETS: Tuple[str, ...] = (
    "security",
    "performance",
    "coverage",
    "quality",
    "dependencies",
    "project",
    "tests",
    "build",
    "deployment",
)

DEFAULT_SYNONYMS: Mapping[str, str] = MappingProxyType({
    # status
    "check": "status",
    "show": "status",
    "display": "status",
    "view": "status",
    "get": "status",
    "list": "status",
    "info": "status",
    # analyze
    "scan": "analyze",
    "examine": "analyze",
    "inspect": "analyze",
    "review": "analyze",
    "audit": "analyze",
    "evaluate": "analyze",
    # improve
    "enhance": "improve",
    "optimize": "improve",
    "fix": "improve",
    "upgrade": "improve",
    "refactor": "improve",
    "boost": "improve",
    # test
    "run": "test",
    "execute": "test",
    "verify": "test",
    "validate": "test",
    # debug
    "troubleshoot": "debug",
    "diagnose": "debug",
    "investigate": "debug",
    # prepare
    "setup": "prepare",
    "configure": "prepare",
    "init": "prepare",
    "initialize": "prepare",
    # release
    "deploy": "release",
    "publish": "release",
    "ship": "release",
})


# =============================================================================
# CONFIG OBJECTS
# =============================================================================

@dataclass(frozen=True)
class RepairThresholds:
    """
    Quantized confidence values and decision policy bounds.

    The values are a contract with the decision policy; do not turn them
    into a continuous score.
    """
    already_valid: float = 1.0
    flag_normalization: float = 0.98
    argument_order: float = 0.95
    synonym: float = 0.95

    # Typo correction, by edit distance
    distance_one: float = 0.95
    distance_two: float = 0.85
    distance_far: float = 0.5

    # Several equidistant dictionary matches
    ambiguous_single_field: float = 0.7
    ambiguous_both_fields: float = 0.6

    unrepairable: float = 0.0

    # Decision policy
    auto_correct_above: float = 0.9     # strict >
    present_options_min: float = 0.5    # inclusive
    present_options_max: float = 0.9    # inclusive


@dataclass(frozen=True)
class GrammarConfig:
    """
    Vocabulary and limits for one parser/engine pair.
    """
    program_name: str = DEFAULT_PROGRAM_NAME
    intents: Tuple[str, ...] = DEFAULT_INTENTS
    target_required_intents: Tuple[str, ...] = DEFAULT_TARGET_REQUIRED_INTENTS
    targets: Tuple[str, ...] = DEFAULT_TARGETS
    synonyms: Mapping[str, str] = field(default_factory=lambda: DEFAULT_SYNONYMS, hash=False)

    # Intent used when the user only names a target ("sdlc security")
    default_intent: str = "status"

    max_edit_distance: int = 2

    # Reject targets outside the vocabulary during validation
    strict_targets: bool = False

    def __post_init__(self):
        # Normalize to lowercase tuples / read-only mapping
        object.__setattr__(self, "intents", tuple(i.lower() for i in self.intents))
        object.__setattr__(
            self, "target_required_intents",
            tuple(i.lower() for i in self.target_required_intents),
        )
        object.__setattr__(self, "targets", tuple(t.lower() for t in self.targets))
        object.__setattr__(
            self, "synonyms",
            MappingProxyType({k.lower(): v.lower() for k, v in dict(self.synonyms).items()}),
        )
        object.__setattr__(self, "default_intent", self.default_intent.lower())

        if not self.intents:
            raise ValueError("GrammarConfig needs at least one intent")
        if self.default_intent not in self.intents:
            raise ValueError(f"Default intent '{self.default_intent}' is not a known intent")
        unknown = sorted(
            {v for v in self.synonyms.values() if v not in self.intents}
            | {i for i in self.target_required_intents if i not in self.intents}
        )
        if unknown:
            raise ValueError(f"Unknown intents referenced in config: {', '.join(unknown)}")
        if self.max_edit_distance < 1:
            raise ValueError("max_edit_distance must be at least 1")

    def is_intent(self, word: str) -> bool:
        return word.lower() in self.intents

    def is_target(self, word: str) -> bool:
        return word.lower() in self.targets

    def requires_target(self, intent: str) -> bool:
        return intent.lower() in self.target_required_intents

    def synonym_for(self, word: str) -> Optional[str]:
        return self.synonyms.get(word.lower())

    @classmethod
    def from_env(cls, base: Optional["GrammarConfig"] = None) -> "GrammarConfig":
        """
        Build a config from environment variables (and a .env file if present).

        SDLCRAFT_PROGRAM_NAME      program word the grammar expects (default: sdlc)
        SDLCRAFT_MAX_EDIT_DISTANCE typo search radius (default: 2)
        SDLCRAFT_STRICT_TARGETS    "1"/"true" to validate targets against the vocabulary
        """
        load_dotenv()
        base = base or cls()

        overrides = {}
        program_name = os.getenv("SDLCRAFT_PROGRAM_NAME")
        if program_name:
            overrides["program_name"] = program_name.strip()

        max_distance = os.getenv("SDLCRAFT_MAX_EDIT_DISTANCE")
        if max_distance:
            try:
                overrides["max_edit_distance"] = int(max_distance)
            except ValueError:
                raise ValueError(
                    f"SDLCRAFT_MAX_EDIT_DISTANCE must be an integer, got '{max_distance}'"
                )

        strict = os.getenv("SDLCRAFT_STRICT_TARGETS")
        if strict is not None:
            overrides["strict_targets"] = strict.strip().lower() in ("1", "true", "yes", "on")

        if not overrides:
            return base
        return replace(base, **overrides)


# Global default instances
DEFAULT_CONFIG = GrammarConfig()
DEFAULT_THRESHOLDS = RepairThresholds()


def get_config() -> GrammarConfig:
    """Get the default grammar configuration."""
    return DEFAULT_CONFIG


def get_thresholds() -> RepairThresholds:
    """Get the default confidence thresholds."""
    return DEFAULT_THRESHOLDS


__all__ = [
    "DEFAULT_PROGRAM_NAME",
    "DEFAULT_INTENTS",
    "DEFAULT_TARGET_REQUIRED_INTENTS",
    "DEFAULT_TARGETS",
    "DEFAULT_SYNONYMS",
    "RepairThresholds",
    "GrammarConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_THRESHOLDS",
    "get_config",
    "get_thresholds",
]
