"""Flow engine driving the five-step Salomão questionnaire.

Each call to process_message performs exactly one load, an in-memory
transition, at most one generator call, and one conditional write to the
session store. The engine never touches HTTP or SQL directly.

Example:
    engine = FlowEngine(ChatSessionStore(db), AnthropicSystemGenerator())
    session = engine.start_session(user_id="u-1")
    result = engine.process_message(session.id, "clínicas de estética")
    result.next_step  # 2
"""

import logging
from datetime import datetime, timezone
from typing import Protocol

from src.errors import InvalidStateError, NotFoundError, ValidationError
from src.orchestrator.flow.generator import (
    AnthropicSystemGenerator,
    SystemGenerator,
    fallback_system,
)
from src.orchestrator.flow.models import (
    ChatSessionRecord,
    GeneratedSystem,
    Message,
    SessionUpdate,
    SystemData,
    SystemPreview,
    TurnResult,
)
from src.orchestrator.flow.questions import (
    FINAL_STEP,
    SDR_ACCEPT_ANSWER,
    WEIGHT_LOSS_KEYWORDS,
    get_question,
)

logger = logging.getLogger(__name__)

GREETING = (
    "Olá! Sou o Salomão, sua IA especialista em sistemas de vendas. "
    "Vou criar um sistema personalizado para seu negócio em 60 segundos. "
    "Vamos começar?"
)


class SessionStore(Protocol):
    """Durable keyed storage for chat sessions."""

    def load(self, session_id: str) -> ChatSessionRecord | None: ...

    def save(self, session_id: str, update: SessionUpdate) -> ChatSessionRecord: ...

    def create(
        self, user_id: str | None, messages: list[Message]
    ) -> ChatSessionRecord: ...


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def compose_step_response(step: int, answer: str, next_question: str) -> str:
    """Echo the answer for steps 1-4 and ask the next question."""
    if step == 1:
        lowered = answer.lower()
        if any(keyword in lowered for keyword in WEIGHT_LOSS_KEYWORDS):
            return (
                f"Excelente! Para criar a isca perfeita para **{answer}**, me conta:"
                f"\n\n{next_question}"
            )
        return f"Perfeito! Vou criar um sistema para atrair **{answer}**.\n\n{next_question}"
    if step == 2:
        return (
            f"Perfeito! Vou focar em pessoas que querem perder **{answer}**. "
            f"Agora me conta:\n\n{next_question}"
        )
    if step == 3:
        return (
            f'Entendi! O maior obstáculo é "**{answer}**". '
            f"Vou criar uma solução específica para isso.\n\n{next_question}"
        )
    if step == 4:
        return (
            f"Ótima escolha! **{answer}** tem alta taxa de conversão para esse nicho."
            f"\n\n{next_question}"
        )
    raise ValueError(f"No intermediate response for step {step}")


def compose_final_summary(profile: SystemData, generated: GeneratedSystem) -> str:
    """Build the completion message shown after the last answer."""
    sdr_line = (
        "SDR automático incluso"
        if profile.sdr_automation == SDR_ACCEPT_ANSWER
        else "Captura manual de leads"
    )
    return (
        '🎉 **SISTEMA "CALCULADORA DE TRANSFORMAÇÃO CORPORAL" CRIADO!**\n\n'
        "🔥 **Com este sistema você terá:**\n"
        "📈 De 3 leads/dia → **45 leads/dia**\n"
        "💰 **Aumento de 1200%** no faturamento  \n"
        "⭐ **89% de taxa de conversão**\n\n"
        "✨ **FUNCIONALIDADES INCLUÍDAS:**\n"
        f"• {generated.description}\n"
        "• Visualização antes/depois com IA\n"
        "• Plano personalizado automático\n"
        f"• {sdr_line}\n"
        f"• Integração direta com {profile.conversion_method}\n\n"
        "🚀 **Pronto para capturar leads qualificados que querem perder "
        f"{profile.weight_goal}!**\n\n"
        'Clique em "Publicar Sistema" para ativar e começar a receber leads hoje mesmo!'
    )


def build_preview(profile: SystemData, generated: GeneratedSystem) -> SystemPreview:
    """Preview of the landing page emitted on the completing turn."""
    return SystemPreview(
        title="Calculadora de Transformação Corporal",
        subtitle="Veja como você ficará em 90 dias",
        button_text="Ver Minha Transformação",
        hook="Descubra seu peso ideal e veja o resultado visual",
        template="weight_loss_calculator",
        target_weight=profile.weight_goal,
        challenge=profile.main_challenge,
        conversion_method=profile.conversion_method,
        has_sdr=profile.sdr_automation == SDR_ACCEPT_ANSWER,
        generated=generated,
    )


class FlowEngine:
    """State machine for the questionnaire.

    Args:
        store: Session store used for the single load and single write
            of each turn.
        generator: Artifact generator invoked on the final step. Defaults
            to the Anthropic-backed generator.
    """

    def __init__(
        self,
        store: SessionStore,
        generator: SystemGenerator | None = None,
    ) -> None:
        self._store = store
        self._generator = generator or AnthropicSystemGenerator()

    def _generate(self, profile: SystemData) -> GeneratedSystem:
        """Run the generator; any failure yields the fallback system."""
        try:
            return self._generator.generate(profile)
        except Exception as e:
            logger.warning(
                "[E-3001] System generation failed, using fallback: %s: %s",
                type(e).__name__,
                e,
            )
            return fallback_system(profile)

    def start_session(self, user_id: str | None = None) -> ChatSessionRecord:
        """Create a session seeded with the assistant greeting."""
        greeting = Message(role="assistant", content=GREETING, timestamp=_now_iso())
        session = self._store.create(user_id, [greeting])
        logger.info("Started chat session %s (user=%s)", session.id, user_id)
        return session

    def process_message(self, session_id: str, text: str | None) -> TurnResult:
        """Apply one user answer to the session and persist the result.

        Args:
            session_id: Chat session identifier.
            text: User answer, stored verbatim.

        Returns:
            TurnResult for the processed turn.

        Raises:
            ValidationError: If the id or the message is blank.
            NotFoundError: If the session does not exist.
            InvalidStateError: If the stored step is outside the flow.
            ConflictError: If another turn advanced the session first.
            PersistenceError: If the write fails.
        """
        if not session_id or not session_id.strip():
            raise ValidationError("Session id is required", code="E-2001")
        if text is None or not text.strip():
            raise ValidationError("Message is required", code="E-2002")

        session = self._store.load(session_id)
        if session is None:
            raise NotFoundError("ChatSession", session_id)

        step = session.current_step
        question = get_question(step)
        if question is None:
            raise InvalidStateError(session_id, step)

        profile = session.system_data.with_answer(question.field, text)
        user_message = Message(role="user", content=text, timestamp=_now_iso())

        if step < FINAL_STEP:
            next_question = get_question(step + 1)
            response = compose_step_response(step, text, next_question.question)
            options = list(next_question.options) if next_question.options else None
            next_step = step + 1
            preview = None
        else:
            generated = self._generate(profile)
            response = compose_final_summary(profile, generated)
            options = None
            next_step = step
            preview = build_preview(profile, generated)

        assistant_message = Message(
            role="assistant",
            content=response,
            timestamp=_now_iso(),
            options=options,
        )

        self._store.save(
            session_id,
            SessionUpdate(
                append_messages=[user_message, assistant_message],
                current_step=next_step,
                system_data=profile,
                expected_step=step,
            ),
        )

        is_complete = preview is not None
        if is_complete:
            logger.info("Chat session %s completed the questionnaire", session_id)

        return TurnResult(
            response=response,
            next_step=None if is_complete else next_step,
            is_complete=is_complete,
            system_preview=preview,
        )

    def generate_for_session(self, session_id: str) -> tuple[ChatSessionRecord, GeneratedSystem]:
        """Re-run the generator on a session's profile, complete or not.

        Raises:
            NotFoundError: If the session does not exist.
        """
        session = self._store.load(session_id)
        if session is None:
            raise NotFoundError("ChatSession", session_id)
        return session, self._generate(session.system_data)

