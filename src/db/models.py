"""SQLAlchemy ORM models for the Salomão state database.

This module defines the data models for users, questionnaire chat sessions
and their messages, generated marketing systems, captured leads, and funnel
templates. Uses SQLAlchemy 2.0 style with Mapped and mapped_column.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


def generate_uuid() -> str:
    """Generate a UUID4 string for primary keys."""
    return str(uuid4())


def utc_now_iso() -> str:
    """Generate current UTC timestamp in ISO8601 format."""
    return datetime.now(UTC).isoformat()


# Enums matching the database schema constraints


class ChatSessionStatus(str, Enum):
    """Status values for questionnaire chat sessions.

    Sessions stay ``active`` after the final step is answered so the
    caller can still publish from them.
    """

    active = "active"
    archived = "archived"


class MessageRole(str, Enum):
    """Author of a chat message."""

    user = "user"
    assistant = "assistant"


class SystemStatus(str, Enum):
    """Lifecycle status values for published marketing systems."""

    active = "active"
    paused = "paused"
    archived = "archived"


class LeadStatus(str, Enum):
    """Status values for captured leads."""

    new = "new"
    contacted = "contacted"
    converted = "converted"


# SQLAlchemy Base


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Models


class User(Base):
    """Business owner account.

    Rows are upserted from the authenticated identity on each request,
    so only ``id`` is guaranteed to be present.

    Attributes:
        id: External user identifier (primary key).
        email: Optional unique e-mail address.
        business_name: Name of the owner's business.
        business_type: Free-form business category.
        subscription_tier: Plan name ('free' by default).
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=generate_uuid
    )
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    business_type: Mapped[str | None] = mapped_column(String(120), nullable=True)
    instagram_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    subscription_tier: Mapped[str] = mapped_column(
        String(30), nullable=False, default="free"
    )
    subscription_ends_at: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )
    updated_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )

    systems: Mapped[list["System"]] = relationship(
        "System", back_populates="user"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, email={self.email!r})>"


class Template(Base):
    """Funnel template a generated system can be based on.

    Attributes:
        id: Template identifier (e.g. 'weight_loss_calculator').
        category: Template category used for grouping.
        config: JSON blob with template defaults.
        usage_count: Number of systems published from this template.
    """

    __tablename__ = "templates"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    config: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    performance_score: Mapped[str] = mapped_column(
        String(20), nullable=False, default="0"
    )
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    conversion_rate: Mapped[str] = mapped_column(
        String(20), nullable=False, default="0"
    )
    created_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )

    def __repr__(self) -> str:
        return f"<Template(id={self.id!r}, usage={self.usage_count})>"


class ChatSession(Base):
    """Questionnaire conversation with Salomão.

    Attributes:
        id: UUID primary key.
        user_id: Optional owner; NULL for anonymous sessions.
        current_step: 1-based index into the question flow.
        system_data: JSON profile accumulated from the answers.
        status: Session status (see ChatSessionStatus).
        created_at: ISO8601 creation timestamp.
        updated_at: ISO8601 last-update timestamp.
    """

    __tablename__ = "chat_sessions"
    __table_args__ = (
        Index("ix_chatsess_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    user_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    current_step: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    system_data: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ChatSessionStatus.active.value
    )
    created_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )
    updated_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )

    messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ChatMessage.sequence",
    )

    def __repr__(self) -> str:
        return (
            f"<ChatSession(id={self.id!r}, step={self.current_step}, "
            f"status={self.status!r})>"
        )


class ChatMessage(Base):
    """Append-only message in a chat session.

    Attributes:
        id: UUID primary key.
        session_id: FK to ChatSession.
        role: 'user' or 'assistant'.
        content: Display text.
        options_json: JSON list of selectable answers for the next reply.
        sequence: Ordering within session (monotonically increasing).
        created_at: ISO8601 creation timestamp.
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        UniqueConstraint("session_id", "sequence", name="uq_chatmsg_session_seq"),
        Index("ix_chatmsg_session_seq", "session_id", "sequence"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    options_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )

    session: Mapped["ChatSession"] = relationship(
        "ChatSession", back_populates="messages"
    )

    def __repr__(self) -> str:
        return (
            f"<ChatMessage(id={self.id!r}, role={self.role!r}, "
            f"seq={self.sequence})>"
        )


class System(Base):
    """Published marketing system generated from a chat session.

    Attributes:
        id: UUID primary key.
        user_id: Owner of the system.
        template_id: Template the system was based on, if known.
        name: Display name from the generator.
        url: Unique public slug.
        config: JSON with the generator output plus ``originalData``.
        status: Lifecycle status (see SystemStatus).
        metrics: JSON counters (views, leads, conversions, conversionRate).
    """

    __tablename__ = "systems"
    __table_args__ = (
        Index("ix_systems_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False
    )
    template_id: Mapped[str | None] = mapped_column(
        String(100), ForeignKey("templates.id"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(300), unique=True, nullable=False)
    config: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SystemStatus.active.value
    )
    metrics: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    created_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )
    updated_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )

    user: Mapped["User"] = relationship("User", back_populates="systems")
    leads: Mapped[list["Lead"]] = relationship(
        "Lead",
        back_populates="system",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<System(id={self.id!r}, name={self.name!r}, status={self.status!r})>"


class Lead(Base):
    """Lead captured by a published system.

    Attributes:
        id: UUID primary key.
        system_id: FK to System.
        data: JSON payload submitted by the visitor.
        status: Lead status (see LeadStatus).
        converted: Whether the lead became a customer.
        created_at: ISO8601 capture timestamp.
    """

    __tablename__ = "leads"
    __table_args__ = (
        Index("ix_leads_system_created", "system_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    system_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("systems.id", ondelete="CASCADE"), nullable=False
    )
    data: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LeadStatus.new.value
    )
    converted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[str] = mapped_column(
        String(50), nullable=False, default=utc_now_iso
    )

    system: Mapped["System"] = relationship("System", back_populates="leads")

    def __repr__(self) -> str:
        return f"<Lead(id={self.id!r}, converted={self.converted})>"
