"""Fixed question flow driven by the Salomão wizard.

The table is built once at import time from frozen models and exposed as
a tuple, so it cannot be mutated at runtime.
"""

from src.orchestrator.flow.models import QuestionStep

FIRST_STEP = 1
FINAL_STEP = 5

SDR_ACCEPT_ANSWER = "Sim, quero conversão máxima!"

# Step-1 answers containing any of these get the weight-loss phrasing.
WEIGHT_LOSS_KEYWORDS = ("emagrecer", "peso", "dieta")

QUESTION_FLOW: tuple[QuestionStep, ...] = (
    QuestionStep(
        step=1,
        field="target_audience",
        question="Que tipo de cliente você quer atrair em massa?",
        subtext="Ex: empresários, mulheres que querem emagrecer, donos de pets...",
        type="text_input",
    ),
    QuestionStep(
        step=2,
        field="weight_goal",
        question="Quantos kg em média seus clientes querem perder?",
        type="options",
        options=("5-10kg", "10-20kg", "20-30kg", "30kg+"),
        psychology="Meta específica gera comprometimento psicológico",
    ),
    QuestionStep(
        step=3,
        field="main_challenge",
        question="Qual o maior desafio deles hoje?",
        type="options",
        options=(
            "Falta de tempo",
            "Não conseguem manter dieta",
            "Não sabem o que comer",
            "Resultados lentos",
        ),
        psychology="Identificar dor específica aumenta conexão emocional",
    ),
    QuestionStep(
        step=4,
        field="conversion_method",
        question="Como você prefere converter esses leads?",
        type="options",
        options=(
            "WhatsApp direto",
            "Agendamento de consulta",
            "Venda de programa online",
            "Grupo VIP",
        ),
        psychology="Método de conversão alinhado com perfil do público",
    ),
    QuestionStep(
        step=5,
        field="sdr_automation",
        question="Quer que eu inclua um SDR automático que fecha vendas no piloto?",
        type="options",
        options=(SDR_ACCEPT_ANSWER, "Não, prefiro fazer manual"),
        psychology="Oferta de automação aumenta valor percebido",
    ),
)


def get_question(step: int) -> QuestionStep | None:
    """Return the question for a 1-based step, or None outside the flow."""
    if FIRST_STEP <= step <= FINAL_STEP:
        return QUESTION_FLOW[step - 1]
    return None


def get_question_flow() -> tuple[QuestionStep, ...]:
    """Return the full question table."""
    return QUESTION_FLOW
