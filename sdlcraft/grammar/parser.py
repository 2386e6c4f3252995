# FILE: sdlcraft/grammar/parser.py
"""
Grammar parser for SDLCraft commands.

Grammar:
    <program> <intent> [<target>] [<modifiers>...]

    sdlc analyze security --verbose --format=json -e prod

Input that does not match the grammar at all is NOT an error: it comes back
as an invalid Command with no error attached, which the caller treats as
natural language for the intent inference service.
"""
from __future__ import annotations
import logging
import re
import uuid
from typing import Dict, List, Optional

from .config import GrammarConfig, DEFAULT_CONFIG
from .errors import (
    EmptyInputError,
    GrammarError,
    InvalidGrammarError,
    MissingIntentError,
)
from .schemas import Command

logger = logging.getLogger(__name__)


def _strip_dashes(token: str) -> str:
    """Remove one or two leading dashes."""
    if token.startswith("--"):
        return token[2:]
    if token.startswith("-"):
        return token[1:]
    return token


def parse_modifiers(tail: str) -> Dict[str, str]:
    """
    Tokenize the modifier tail of a command.

    Supported forms:
        --flag=value, flag=value   key/value split on the first '='
        --flag value, -f value     next token is the value unless it is a flag
        --flag, -f                 boolean flag ("true")
        word                       boolean flag keyed by the word itself
    """
    modifiers: Dict[str, str] = {}
    parts = tail.split()

    i = 0
    while i < len(parts):
        part = parts[i]
        i += 1

        if "=" in part:
            key, value = part.split("=", 1)
            key = _strip_dashes(key)
        elif part.startswith("-"):
            key = _strip_dashes(part)
            if i < len(parts) and not parts[i].startswith("-"):
                value = parts[i]
                i += 1
            else:
                value = "true"
        else:
            key, value = part, "true"

        if not key:
            logger.debug(f"Skipping modifier token without a name: {part!r}")
            continue
        modifiers[key] = value

    return modifiers


# =============================================================================
# PARSER
# =============================================================================

class GrammarParser:
    """
    Turns raw text into Commands and checks them against the grammar.

    Usage:
        parser = GrammarParser()
        cmd = parser.parse("sdlc analyze security --verbose")
        if not cmd.is_valid:
            ...  # cmd.error holds the grammar violation, if any
    """

    def __init__(self, config: Optional[GrammarConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._grammar_pattern = re.compile(
            rf"^{re.escape(self.config.program_name)}"
            r"\s+([A-Za-z0-9_]+)"           # intent
            r"(?:\s+([A-Za-z0-9_]+))?"      # target
            r"(?:\s+(.*))?$",               # modifiers
            re.IGNORECASE | re.DOTALL,
        )

    def parse(
        self,
        text: str,
        strict: bool = False,
        user_id: str = "",
        project_path: str = "",
    ) -> Command:
        """
        Parse raw user input into a Command.

        Args:
            text: Raw input line
            strict: Raise the grammar error instead of attaching it to the command
            user_id: Carried onto the command
            project_path: Carried onto the command

        Returns:
            Command - valid, invalid with `error` set (grammar violation),
            or invalid with no error (natural language)

        Raises:
            EmptyInputError: blank input
            MissingIntentError / InvalidGrammarError: only when strict=True
        """
        text = (text or "").strip()
        if not text:
            raise EmptyInputError()

        cmd = self.parse_structured(text)
        if cmd is None:
            logger.debug(f"No grammar match, treating as natural language: {text!r}")
            cmd = Command(raw=text)
        else:
            error = self.check_grammar(cmd)
            if error is None:
                cmd.is_valid = True
            else:
                cmd.error = error
                logger.debug(f"Grammar violation for {text!r}: {error}")

        cmd.id = str(uuid.uuid4())
        cmd.user_id = user_id
        cmd.project_path = project_path

        if strict and cmd.error is not None:
            raise cmd.error
        return cmd

    def parse_structured(self, text: str) -> Optional[Command]:
        """
        Extract intent, target and modifiers without validating.

        Returns:
            Command with is_valid=False, or None if the text does not match
            the structured grammar
        """
        text = text.strip()
        match = self._grammar_pattern.match(text)
        if match is None:
            return None

        intent, target, tail = match.groups()
        cmd = Command(raw=text)
        cmd.intent = intent.lower()
        if target:
            cmd.target = target.lower()
        if tail:
            cmd.modifiers = parse_modifiers(tail)
        return cmd

    def validate_grammar(self, cmd: Command) -> None:
        """
        Check a command against the grammar rules.

        Raises:
            MissingIntentError: intent is empty
            InvalidGrammarError: unknown intent, missing required target,
                or (strict_targets) unknown target
        """
        if not cmd.intent:
            raise MissingIntentError(cmd)

        # Case-sensitive: the vocabulary is lowercase and parse() folds case
        if cmd.intent not in self.config.intents:
            raise InvalidGrammarError(f"unknown intent '{cmd.intent}'", cmd)

        if cmd.intent in self.config.target_required_intents and not cmd.target:
            raise InvalidGrammarError(f"intent '{cmd.intent}' requires a target", cmd)

        if self.config.strict_targets and cmd.target and cmd.target not in self.config.targets:
            raise InvalidGrammarError(f"unknown target '{cmd.target}'", cmd)

    def check_grammar(self, cmd: Command) -> Optional[GrammarError]:
        """Non-raising validate_grammar(): the error, or None if valid."""
        try:
            self.validate_grammar(cmd)
        except GrammarError as e:
            return e
        return None

    def is_grammatical(self, cmd: Command) -> bool:
        return self.check_grammar(cmd) is None

    def is_valid_intent(self, word: str) -> bool:
        return self.config.is_intent(word)

    @property
    def valid_intents(self) -> List[str]:
        return sorted(self.config.intents)


__all__ = [
    "GrammarParser",
    "parse_modifiers",
]
