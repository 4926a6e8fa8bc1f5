"""Salomão questionnaire flow: question table, engine and generator."""

from src.orchestrator.flow.engine import GREETING, FlowEngine, SessionStore
from src.orchestrator.flow.generator import (
    AnthropicSystemGenerator,
    FallbackSystemGenerator,
    SystemGenerator,
    build_generation_prompt,
    fallback_system,
)
from src.orchestrator.flow.models import (
    ChatSessionRecord,
    GeneratedPreview,
    GeneratedSystem,
    Message,
    QuestionStep,
    SessionUpdate,
    SystemData,
    SystemPreview,
    TurnResult,
)
from src.orchestrator.flow.questions import (
    FINAL_STEP,
    FIRST_STEP,
    QUESTION_FLOW,
    get_question,
    get_question_flow,
)

__all__ = [
    "GREETING",
    "FlowEngine",
    "SessionStore",
    "AnthropicSystemGenerator",
    "FallbackSystemGenerator",
    "SystemGenerator",
    "build_generation_prompt",
    "fallback_system",
    "ChatSessionRecord",
    "GeneratedPreview",
    "GeneratedSystem",
    "Message",
    "QuestionStep",
    "SessionUpdate",
    "SystemData",
    "SystemPreview",
    "TurnResult",
    "FIRST_STEP",
    "FINAL_STEP",
    "QUESTION_FLOW",
    "get_question",
    "get_question_flow",
]
