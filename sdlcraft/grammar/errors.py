# FILE: sdlcraft/grammar/errors.py
"""
Exceptions raised by the SDLCraft grammar layer.

Only blank input (parse) and a missing/invalid command (repair) propagate
out of the happy path. Grammar violations are usually attached to the
Command rather than raised; an unrepairable command is a zero-confidence
result, never an exception.
"""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .schemas import Command


class GrammarError(Exception):
    """Base class for grammar layer errors."""
    pass


class EmptyInputError(GrammarError, ValueError):
    """Raised when the input is empty or whitespace-only."""
    def __init__(self, message: str = "input cannot be empty"):
        super().__init__(message)


class MissingIntentError(GrammarError):
    """Raised when a command has no intent."""
    def __init__(self, command: Optional["Command"] = None):
        self.command = command
        super().__init__("intent is required")


class InvalidGrammarError(GrammarError):
    """Raised when a command does not satisfy the grammar rules."""
    def __init__(self, reason: str, command: Optional["Command"] = None):
        self.reason = reason
        self.command = command
        super().__init__(f"command does not match expected grammar: {reason}")


class InvalidCommandError(GrammarError, ValueError):
    """Raised when repair is handed something that is not a Command."""
    def __init__(self, received: object = None):
        self.received = received
        if received is None:
            message = "cannot repair a missing command"
        else:
            message = f"cannot repair object of type {type(received).__name__}"
        super().__init__(message)


class InferenceError(GrammarError):
    """Raised by intent inference service adapters."""
    pass


__all__ = [
    "GrammarError",
    "EmptyInputError",
    "MissingIntentError",
    "InvalidGrammarError",
    "InvalidCommandError",
    "InferenceError",
]
