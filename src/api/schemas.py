"""Pydantic schemas for API request/response validation.

This module defines the data contracts for the Salomão REST API. All
payloads are camelCase on the wire; ORM rows are converted with
``from_attributes`` and JSON text columns are decoded by validators.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.orchestrator.flow.models import CamelModel


class OrmCamelModel(CamelModel):
    """CamelModel that can be built from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


def _decode_json(value: Any, default: Any) -> Any:
    """Parse a JSON string stored as text in SQLite."""
    if value is None:
        return default
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return default
    return value


# Chat schemas


class ChatMessageRequest(CamelModel):
    """Request body for POST /chat/{session_id}/message.

    ``message`` is optional here so that a missing value is reported with
    the domain error code rather than a generic 422.
    """

    message: str | None = None


class CreateFromChatRequest(CamelModel):
    """Request body for POST /systems/create-from-chat."""

    session_id: str | None = None


class ChatSessionSummary(CamelModel):
    """Lightweight session row for listings."""

    id: str
    current_step: int
    status: str
    created_at: str | None = None
    message_count: int = 0


# User schemas


class UserResponse(OrmCamelModel):
    """Response schema for a user record."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    business_name: str | None = None
    business_type: str | None = None
    instagram_url: str | None = None
    subscription_tier: str
    subscription_ends_at: str | None = None
    created_at: str
    updated_at: str


# Template schemas


class TemplateResponse(OrmCamelModel):
    """Response schema for a funnel template."""

    id: str
    category: str
    name: str
    description: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    performance_score: str
    usage_count: int
    conversion_rate: str
    created_at: str

    @field_validator("config", mode="before")
    @classmethod
    def _parse_config(cls, v: Any) -> Any:
        return _decode_json(v, {})


# System schemas


class SystemResponse(OrmCamelModel):
    """Response schema for a published system."""

    id: str
    user_id: str
    template_id: str | None = None
    name: str
    url: str
    config: dict[str, Any] = Field(default_factory=dict)
    status: str
    metrics: dict[str, Any] = Field(default_factory=dict)
    created_at: str
    updated_at: str

    @field_validator("config", "metrics", mode="before")
    @classmethod
    def _parse_json_columns(cls, v: Any) -> Any:
        return _decode_json(v, {})


# Lead schemas


class LeadCreate(CamelModel):
    """Request body for POST /systems/{id}/leads.

    Any visitor-submitted fields are accepted under ``data``.
    """

    data: dict[str, Any] = Field(default_factory=dict)


class LeadResponse(OrmCamelModel):
    """Response schema for a captured lead."""

    id: str
    system_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    status: str
    converted: bool
    created_at: str

    @field_validator("data", mode="before")
    @classmethod
    def _parse_data(cls, v: Any) -> Any:
        return _decode_json(v, {})


# Dashboard schemas


class DashboardMetricsResponse(OrmCamelModel):
    """Aggregated dashboard metrics."""

    leads_today: int
    total_leads: int
    conversion_rate: int
    projected_revenue: int
    active_systems: int
    average_rating: float


# Error schema


class ErrorResponse(BaseModel):
    """Body rendered for DomainError exceptions (snake_case keys)."""

    error_code: str
    message: str
    remediation: str
