# FILE: sdlcraft/grammar/__init__.py
"""
SDLCraft Grammar Layer

Turns raw `sdlc ...` input into structured commands and repairs broken ones
with bounded, explainable, purely local strategies before anything is sent
to the intent inference service.

Usage:
    from sdlcraft.grammar import GrammarParser, RepairEngine, RepairAction

    parser = GrammarParser()
    engine = RepairEngine(parser)

    cmd = parser.parse("sdlc stauts project")
    result, action = engine.repair_with_decision(cmd)
    if action == RepairAction.AUTO_CORRECT:
        execute(result.repaired)
    elif action == RepairAction.PRESENT_OPTIONS:
        ask_user(result.candidates)
    else:
        send_to_inference(cmd.raw)

Key Invariants:
- Repair never mutates the input command
- confidence == 1.0 if and only if the command was already valid
- Vocabularies come from a GrammarConfig, never from module globals
- Only fail-to-backend leaves this layer
"""
from __future__ import annotations

# Config
from .config import (
    GrammarConfig,
    RepairThresholds,
    DEFAULT_CONFIG,
    DEFAULT_THRESHOLDS,
    get_config,
    get_thresholds,
)

# Errors
from .errors import (
    GrammarError,
    EmptyInputError,
    MissingIntentError,
    InvalidGrammarError,
    InvalidCommandError,
    InferenceError,
)

# Schemas
from .schemas import (
    Command,
    RepairResult,
    RepairAction,
    IntentRequest,
    IntentResponse,
    Interpretation,
)

# Parser
from .parser import (
    GrammarParser,
    parse_modifiers,
)

# Edit distance
from .distance import (
    levenshtein_distance,
    find_typo_candidates,
    closest_candidates,
    confidence_for_distance,
)

# Strategies
from .strategies import (
    RepairContext,
    StrategyOutcome,
    normalize_flags,
    fix_argument_order,
    expand_synonym,
    correct_typos,
    DEFAULT_STRATEGIES,
)

# Repair + decision
from .decision import decide_action
from .repair import RepairEngine

# Interpreter
from .interpreter import (
    IntentInferenceService,
    MockIntentInferenceService,
    CommandInterpreter,
    get_interpreter,
    interpret_command,
)


__all__ = [
    # Config
    "GrammarConfig",
    "RepairThresholds",
    "DEFAULT_CONFIG",
    "DEFAULT_THRESHOLDS",
    "get_config",
    "get_thresholds",

    # Errors
    "GrammarError",
    "EmptyInputError",
    "MissingIntentError",
    "InvalidGrammarError",
    "InvalidCommandError",
    "InferenceError",

    # Schemas
    "Command",
    "RepairResult",
    "RepairAction",
    "IntentRequest",
    "IntentResponse",
    "Interpretation",

    # Parser
    "GrammarParser",
    "parse_modifiers",

    # Edit distance
    "levenshtein_distance",
    "find_typo_candidates",
    "closest_candidates",
    "confidence_for_distance",

    # Strategies
    "RepairContext",
    "StrategyOutcome",
    "normalize_flags",
    "fix_argument_order",
    "expand_synonym",
    "correct_typos",
    "DEFAULT_STRATEGIES",

    # Repair + decision
    "decide_action",
    "RepairEngine",

    # Interpreter
    "IntentInferenceService",
    "MockIntentInferenceService",
    "CommandInterpreter",
    "get_interpreter",
    "interpret_command",
]
