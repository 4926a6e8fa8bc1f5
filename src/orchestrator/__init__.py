"""Orchestration layer for Salomão.

This package contains the questionnaire flow engine that interviews a
business owner and produces a generated lead-capture system.

Main Entry Points:
    FlowEngine: State machine driving the five-step questionnaire.
    AnthropicSystemGenerator: Claude-backed artifact generator with fallback.

Supporting Models:
    SystemData: Profile accumulated from the answers.
    TurnResult: Payload returned for one processed message.
"""

from src.orchestrator.flow import (
    QUESTION_FLOW,
    AnthropicSystemGenerator,
    ChatSessionRecord,
    FlowEngine,
    GeneratedSystem,
    Message,
    SessionStore,
    SessionUpdate,
    SystemData,
    SystemGenerator,
    SystemPreview,
    TurnResult,
    fallback_system,
)

__all__ = [
    "QUESTION_FLOW",
    "AnthropicSystemGenerator",
    "ChatSessionRecord",
    "FlowEngine",
    "GeneratedSystem",
    "Message",
    "SessionStore",
    "SessionUpdate",
    "SystemData",
    "SystemGenerator",
    "SystemPreview",
    "TurnResult",
    "fallback_system",
]
