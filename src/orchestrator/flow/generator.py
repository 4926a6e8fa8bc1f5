"""Artifact generator producing a marketing system from a questionnaire profile.

The primary strategy asks Claude for a JSON description of a lead-capture
system. Any failure along the way (client construction, network, timeout,
malformed JSON, schema mismatch) is logged and replaced by a deterministic
template, so callers always receive a valid GeneratedSystem.
"""

import json
import logging
import re
from typing import Any, Protocol

from anthropic import Anthropic

from src.errors import GenerationError
from src.orchestrator.flow.config import (
    DEFAULT_MAX_TOKENS,
    get_model,
    get_temperature,
    get_timeout,
    is_generator_enabled,
)
from src.orchestrator.flow.models import (
    GeneratedPreview,
    GeneratedSystem,
    PreviewColors,
    SystemData,
)

logger = logging.getLogger(__name__)

MISSING_VALUE = "não informado"
DEFAULT_SUBTITLE = "Descubra como alcançar o resultado que você procura"

SYSTEM_PROMPT = (
    "Você é o Salomão, especialista em criar sistemas de vendas personalizados. "
    "Responda sempre em JSON válido, sem texto fora do objeto JSON."
)


class SystemGenerator(Protocol):
    """Anything able to turn a profile into a GeneratedSystem."""

    def generate(self, profile: SystemData) -> GeneratedSystem: ...


def build_generation_prompt(profile: SystemData) -> str:
    """Build the user prompt describing the profile to Claude.

    Missing answers are rendered as "não informado" so a partial profile
    still produces a well-formed prompt.
    """

    def value(answer: str | None) -> str:
        return answer if answer else MISSING_VALUE

    return f"""Baseado nos dados abaixo, crie um sistema de captação de leads personalizado:

- Público-alvo: {value(profile.target_audience)}
- Meta de peso dos clientes: {value(profile.weight_goal)}
- Maior desafio dos clientes: {value(profile.main_challenge)}
- Método de conversão: {value(profile.conversion_method)}
- SDR automático: {value(profile.sdr_automation)}

Responda em JSON com:
{{
  "name": "Nome do sistema",
  "description": "Descrição em 1 linha",
  "features": ["feature1", "feature2", "feature3"],
  "conversionRate": "taxa estimada em %",
  "template": "template_id_sugerido",
  "preview": {{
    "title": "Título da landing page",
    "subtitle": "Subtítulo",
    "buttonText": "Texto do botão principal",
    "colors": {{"primary": "#3b82f6", "secondary": "#1e293b"}}
  }}
}}"""


def fallback_system(profile: SystemData) -> GeneratedSystem:
    """Deterministic system used whenever generation fails.

    Args:
        profile: Questionnaire answers, possibly incomplete.

    Returns:
        GeneratedSystem whose preview title, subtitle and button text are
        never empty.
    """
    audience = profile.target_audience or "seu público"
    subtitle = profile.main_challenge or DEFAULT_SUBTITLE
    return GeneratedSystem(
        name="Sistema Personalizado",
        description="Sistema inteligente de captação de leads",
        features=[
            "Formulário otimizado",
            "Integração WhatsApp",
            "Analytics em tempo real",
        ],
        conversion_rate="35",
        template="custom_template",
        preview=GeneratedPreview(
            title=f"Solução para {audience}",
            subtitle=subtitle,
            button_text="Quero Saber Mais",
            colors=PreviewColors(),
        ),
    )


def extract_json_object(response_text: str) -> dict[str, Any]:
    """Parse the JSON object out of a model reply.

    Accepts a bare object or one wrapped in a ```json fence.

    Raises:
        GenerationError: If no JSON object can be decoded.
    """
    match = re.search(r"```(?:json)?\s*\n(.*?)\n```", response_text, re.DOTALL | re.IGNORECASE)
    candidate = match.group(1) if match else response_text
    candidate = candidate.strip()
    if not candidate.startswith("{"):
        obj_match = re.search(r"(\{[\s\S]*\})", candidate)
        if not obj_match:
            raise GenerationError("Model reply contained no JSON object")
        candidate = obj_match.group(1)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Model reply is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise GenerationError("Model reply JSON is not an object")
    return parsed


class FallbackSystemGenerator:
    """SystemGenerator that always returns the deterministic template."""

    def generate(self, profile: SystemData) -> GeneratedSystem:
        return fallback_system(profile)


class AnthropicSystemGenerator:
    """SystemGenerator backed by the Anthropic Messages API.

    Args:
        client: Pre-built Anthropic client. Created lazily on the first
            call when omitted, so a missing API key only surfaces as a
            recovered generation failure.
    """

    def __init__(self, client: Anthropic | None = None) -> None:
        self._client = client

    def _get_client(self) -> Anthropic:
        if self._client is None:
            self._client = Anthropic(timeout=get_timeout())
        return self._client

    def _request(self, profile: SystemData) -> GeneratedSystem:
        response = self._get_client().messages.create(
            model=get_model(),
            max_tokens=DEFAULT_MAX_TOKENS,
            temperature=get_temperature(),
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": build_generation_prompt(profile)}],
        )

        response_text = ""
        for block in response.content:
            if hasattr(block, "text"):
                response_text += block.text

        return GeneratedSystem.model_validate(extract_json_object(response_text))

    def generate(self, profile: SystemData) -> GeneratedSystem:
        """Generate a system for ``profile``, falling back on any failure."""
        if not is_generator_enabled():
            logger.info("System generator disabled, using fallback template")
            return fallback_system(profile)

        try:
            return self._request(profile)
        except Exception as e:
            logger.warning(
                "[E-3001] System generation failed, using fallback: %s: %s",
                type(e).__name__,
                e,
            )
            return fallback_system(profile)
