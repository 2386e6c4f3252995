# FILE: sdlcraft/grammar/schemas.py
"""
Data models for the SDLCraft grammar layer.

Command and RepairResult are plain dataclasses: they are built on every
keystroke-sized request and never cross a process boundary. The models that
are handed to the intent inference service are pydantic models.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .errors import GrammarError


def utcnow():
    """Timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class RepairAction(str, Enum):
    """What the caller should do with a repair result."""
    AUTO_CORRECT = "auto-correct"          # apply the single repair silently
    PRESENT_OPTIONS = "present-options"    # let the user pick a candidate
    FAIL_TO_BACKEND = "fail-to-backend"    # hand raw text to intent inference


# =============================================================================
# COMMAND
# =============================================================================

@dataclass
class Command:
    """
    One user-issued instruction.

    `raw` cannot be reassigned once set. Metadata (id, timestamp, user_id,
    project_path) rides along untouched and is left out of equality, so two
    parses of the same text compare equal.
    """
    raw: str
    intent: str = ""
    target: str = ""
    modifiers: Dict[str, str] = field(default_factory=dict)
    is_valid: bool = False

    id: str = field(default="", compare=False)
    timestamp: datetime = field(default_factory=utcnow, compare=False)
    user_id: str = field(default="", compare=False)
    project_path: str = field(default="", compare=False)

    # Validation error from parsing, if any
    error: Optional[GrammarError] = field(default=None, compare=False, repr=False)

    def __setattr__(self, name, value):
        if name == "raw" and "raw" in self.__dict__:
            raise AttributeError("Command.raw is immutable")
        super().__setattr__(name, value)

    def derive(
        self,
        intent: Optional[str] = None,
        target: Optional[str] = None,
        modifiers: Optional[Dict[str, str]] = None,
    ) -> "Command":
        """
        Build a new Command from this one.

        Metadata and raw text are copied; modifiers are copied unless a
        replacement mapping is given. The new command starts out invalid.
        """
        return Command(
            raw=self.raw,
            intent=self.intent if intent is None else intent,
            target=self.target if target is None else target,
            modifiers=dict(self.modifiers if modifiers is None else modifiers),
            is_valid=False,
            id=self.id,
            timestamp=self.timestamp,
            user_id=self.user_id,
            project_path=self.project_path,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "raw": self.raw,
            "intent": self.intent,
            "target": self.target,
            "modifiers": dict(self.modifiers),
            "is_valid": self.is_valid,
            "timestamp": self.timestamp.isoformat(),
            "user_id": self.user_id,
            "project_path": self.project_path,
        }


# =============================================================================
# REPAIR RESULT
# =============================================================================

@dataclass
class RepairResult:
    """
    Outcome of one repair attempt.

    repaired    - the single fix, when one exists
    candidates  - alternatives when several fixes are equally plausible
    confidence  - 1.0 only when the original was already valid
    unambiguous - the fix came from exactly one dictionary match
    """
    original: Command
    repaired: Optional[Command] = None
    confidence: float = 0.0
    explanation: str = ""
    candidates: List[Command] = field(default_factory=list)
    strategy: Optional[str] = None
    unambiguous: bool = False

    @property
    def succeeded(self) -> bool:
        return self.repaired is not None or len(self.candidates) > 0


# =============================================================================
# INTENT INFERENCE HAND-OFF
# =============================================================================

class IntentRequest(BaseModel):
    """Request sent to the intent inference service on fail-to-backend."""
    raw_command: str
    user_id: str = ""
    project_id: str = ""
    project_path: str = ""
    context: Dict[str, Any] = Field(default_factory=dict)


class IntentResponse(BaseModel):
    """Response from the intent inference service."""
    intent: str
    target: str = ""
    modifiers: Dict[str, str] = Field(default_factory=dict)
    confidence: float = Field(ge=0.0, le=1.0)
    explanation: str = ""
    clarification_questions: List[str] = Field(default_factory=list)
    requires_confirmation: bool = False
    risk_level: Optional[str] = None
    impact_description: Optional[str] = None


class Interpretation(BaseModel):
    """Final answer of the interpreter for one line of user input."""
    raw: str
    action: RepairAction
    command: Optional[Dict[str, Any]] = None
    options: List[Dict[str, Any]] = Field(default_factory=list)
    confidence: float = 0.0
    explanation: str = ""
    inferred: bool = False
    clarification_questions: List[str] = Field(default_factory=list)

    # Copied from the inference response
    requires_confirmation: bool = False
    risk_level: Optional[str] = None
    impact_description: Optional[str] = None

    timestamp: datetime = Field(default_factory=utcnow)


__all__ = [
    "utcnow",
    "RepairAction",
    "Command",
    "RepairResult",
    "IntentRequest",
    "IntentResponse",
    "Interpretation",
]
