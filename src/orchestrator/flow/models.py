"""Pydantic models for the Salomão questionnaire flow.

These models define the question table entries, the profile accumulated
from the answers, chat session records exchanged with the session store,
and the generated marketing system returned at the end of the flow.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


QuestionType = Literal["text_input", "options", "text_area"]
Role = Literal["user", "assistant"]


class QuestionStep(CamelModel):
    """One entry of the fixed question flow.

    Attributes:
        step: 1-based position in the flow.
        field: Profile field the answer is recorded under.
        question: Question text shown to the user.
        subtext: Optional hint shown under the question.
        type: Input widget the client should render.
        options: Candidate answers for options-typed steps.
        psychology: Why the question is asked (for copywriters).
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    step: int
    field: str
    question: str
    subtext: str | None = None
    type: QuestionType
    options: tuple[str, ...] | None = None
    psychology: str | None = None


class SystemData(CamelModel):
    """Profile accumulated from the questionnaire answers.

    One optional field per question; fields are filled in step order
    and never overwritten.
    """

    target_audience: str | None = None
    weight_goal: str | None = None
    main_challenge: str | None = None
    conversion_method: str | None = None
    sdr_automation: str | None = None

    def with_answer(self, field: str, answer: str) -> "SystemData":
        """Return a copy with ``field`` set to ``answer``."""
        return self.model_copy(update={field: answer})

    def to_wire(self) -> dict[str, str]:
        """camelCase dict containing only the answered fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Message(CamelModel):
    """Immutable chat log entry."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    role: Role
    content: str
    timestamp: str
    options: list[str] | None = None


class ChatSessionRecord(CamelModel):
    """Chat session as seen by the flow engine and the API."""

    id: str
    user_id: str | None = None
    messages: list[Message] = Field(default_factory=list)
    current_step: int = 1
    system_data: SystemData = Field(default_factory=SystemData)
    status: str = "active"
    created_at: str | None = None
    updated_at: str | None = None


class SessionUpdate(BaseModel):
    """Partial update applied by the session store in one write.

    Attributes:
        append_messages: Messages appended after the existing log.
        current_step: New value for the session's step.
        system_data: Full replacement profile.
        expected_step: When set, the write only succeeds if the stored
            step still equals this value.
    """

    append_messages: list[Message] = Field(default_factory=list)
    current_step: int
    system_data: SystemData
    expected_step: int | None = None


class PreviewColors(CamelModel):
    """Primary/secondary colour pair for a landing page."""

    primary: str = "#3b82f6"
    secondary: str = "#1e293b"


class GeneratedPreview(CamelModel):
    """Landing page copy produced by the generator."""

    title: str = Field(..., min_length=1)
    subtitle: str = Field(..., min_length=1)
    button_text: str = Field(..., min_length=1)
    colors: PreviewColors = Field(default_factory=PreviewColors)


class GeneratedSystem(CamelModel):
    """Marketing system description returned by the artifact generator."""

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    features: list[str] = Field(default_factory=list)
    conversion_rate: str = "0"
    template: str = "custom_template"
    preview: GeneratedPreview

    @field_validator("conversion_rate", mode="before")
    @classmethod
    def _coerce_rate(cls, value: object) -> object:
        # Models sometimes answer 45 or "45%" instead of "45".
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value.strip().rstrip("%").strip()
        return value


class SystemPreview(CamelModel):
    """Preview emitted when the final question is answered."""

    title: str
    subtitle: str
    button_text: str
    hook: str
    template: str
    target_weight: str | None = None
    challenge: str | None = None
    conversion_method: str | None = None
    has_sdr: bool = Field(default=False, alias="hasSDR")
    generated: GeneratedSystem


class TurnResult(CamelModel):
    """Payload returned for one processed user message.

    ``next_step`` is None on the completing turn and ``system_preview``
    is only set on it.
    """

    response: str
    next_step: int | None = None
    is_complete: bool = False
    system_preview: SystemPreview | None = None
