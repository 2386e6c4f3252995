# FILE: sdlcraft/grammar/interpreter.py
"""
Command interpreter: the front door for one line of user input.

Pipeline:
1. Parse (grammar match or natural language)
2. Deterministic repair
3. Decision policy (auto-correct / present-options / fail-to-backend)
4. Intent inference service - ONLY on fail-to-backend, and only if one
   is configured. It receives the untouched raw text.

INVARIANT: nothing here reaches the inference service while a local repair
is available.
"""
from __future__ import annotations
import asyncio
import concurrent.futures
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .config import GrammarConfig, RepairThresholds
from .errors import InferenceError
from .parser import GrammarParser
from .repair import RepairEngine
from .schemas import (
    Command,
    IntentRequest,
    IntentResponse,
    Interpretation,
    RepairAction,
    RepairResult,
)

logger = logging.getLogger(__name__)


# =============================================================================
# INTENT INFERENCE SERVICE
# =============================================================================

class IntentInferenceService:
    """
    Collaborator that infers intent from free-form text.

    Implementations wrap whatever backend does the work (HTTP API, local
    model, ...). They should raise InferenceError on failure.
    """

    async def infer(self, request: IntentRequest) -> IntentResponse:
        raise NotImplementedError


class MockIntentInferenceService(IntentInferenceService):
    """
    Inference stub for tests: returns a canned response or raises.
    """

    def __init__(
        self,
        response: Optional[IntentResponse] = None,
        error: Optional[Exception] = None,
    ):
        self.response = response or IntentResponse(
            intent="status",
            confidence=0.8,
            explanation="Mock inference",
        )
        self.error = error
        self.call_count = 0
        self.last_request: Optional[IntentRequest] = None

    async def infer(self, request: IntentRequest) -> IntentResponse:
        self.call_count += 1
        self.last_request = request
        if self.error is not None:
            raise self.error
        return self.response


# =============================================================================
# INTERPRETER
# =============================================================================

class CommandInterpreter:
    """
    Parses, repairs and decides; escalates to inference when it has to.
    """

    def __init__(
        self,
        config: Optional[GrammarConfig] = None,
        inference_service: Optional[IntentInferenceService] = None,
        thresholds: Optional[RepairThresholds] = None,
    ):
        self.parser = GrammarParser(config)
        self.engine = RepairEngine(self.parser, thresholds=thresholds)
        self._inference_service = inference_service

    @property
    def config(self) -> GrammarConfig:
        return self.parser.config

    async def interpret(
        self,
        text: str,
        context: Optional[Dict[str, Any]] = None,
        user_id: str = "",
        project_path: str = "",
        project_id: str = "",
    ) -> Interpretation:
        """
        Interpret one line of user input.

        Args:
            text: Raw input
            context: Free-form context forwarded to the inference service
            user_id: Carried onto the command and the inference request
            project_path: Carried onto the command and the inference request
            project_id: Forwarded to the inference service

        Raises:
            EmptyInputError: blank input
        """
        cmd = self.parser.parse(text, user_id=user_id, project_path=project_path)
        result, action = self.engine.repair_with_decision(cmd)
        interpretation = self._from_repair(result, action)

        if action != RepairAction.FAIL_TO_BACKEND or self._inference_service is None:
            return interpretation

        return await self._infer(cmd, interpretation, context, project_id)

    def interpret_sync(
        self,
        text: str,
        context: Optional[Dict[str, Any]] = None,
        user_id: str = "",
        project_path: str = "",
        project_id: str = "",
    ) -> Interpretation:
        """
        Synchronous wrapper for interpret().
        Use only when async is not available.
        """
        coro = self.interpret(text, context, user_id, project_path, project_id)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)

        # Already inside a loop: run on a worker thread with its own loop
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
            return executor.submit(asyncio.run, coro).result()

    def _from_repair(self, result: RepairResult, action: RepairAction) -> Interpretation:
        interpretation = Interpretation(
            raw=result.original.raw,
            action=action,
            confidence=result.confidence,
            explanation=result.explanation,
        )
        if action == RepairAction.AUTO_CORRECT:
            interpretation.command = result.repaired.to_dict()
        elif action == RepairAction.PRESENT_OPTIONS:
            interpretation.options = [c.to_dict() for c in result.candidates]
        return interpretation

    async def _infer(
        self,
        cmd: Command,
        interpretation: Interpretation,
        context: Optional[Dict[str, Any]],
        project_id: str = "",
    ) -> Interpretation:
        request = IntentRequest(
            raw_command=cmd.raw,
            user_id=cmd.user_id,
            project_id=project_id,
            project_path=cmd.project_path,
            context=context or {},
        )

        try:
            response = await self._inference_service.infer(request)
        except (InferenceError, ValidationError) as e:
            logger.warning(f"[interpreter] Intent inference failed for {cmd.raw!r}: {e}")
            return interpretation

        interpretation.inferred = True
        interpretation.confidence = response.confidence
        interpretation.explanation = response.explanation or interpretation.explanation
        interpretation.clarification_questions = list(response.clarification_questions)
        interpretation.requires_confirmation = response.requires_confirmation
        interpretation.risk_level = response.risk_level
        interpretation.impact_description = response.impact_description

        inferred = cmd.derive(
            intent=response.intent.lower(),
            target=response.target.lower(),
            modifiers=response.modifiers,
        )
        error = self.parser.check_grammar(inferred)
        if error is not None:
            logger.warning(
                f"[interpreter] Inferred command for {cmd.raw!r} is not grammatical: {error}"
            )
            return interpretation

        inferred.is_valid = True
        interpretation.command = inferred.to_dict()
        label = f"{inferred.intent} {inferred.target}".strip()
        logger.info(
            f"[interpreter] Inferred '{label}' for {cmd.raw!r} "
            f"(confidence={response.confidence:.2f})"
        )
        return interpretation


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_default_interpreter: Optional[CommandInterpreter] = None


def get_interpreter() -> CommandInterpreter:
    """Get or create the default interpreter (config from the environment)."""
    global _default_interpreter
    if _default_interpreter is None:
        _default_interpreter = CommandInterpreter(GrammarConfig.from_env())
    return _default_interpreter


async def interpret_command(
    text: str,
    context: Optional[Dict[str, Any]] = None,
    user_id: str = "",
    project_path: str = "",
    project_id: str = "",
) -> Interpretation:
    """Convenience function: interpret text with the default interpreter."""
    return await get_interpreter().interpret(text, context, user_id, project_path, project_id)


__all__ = [
    "IntentInferenceService",
    "MockIntentInferenceService",
    "CommandInterpreter",
    "get_interpreter",
    "interpret_command",
]
