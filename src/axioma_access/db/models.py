"""
axioma_access.db.models

Persistence schema for principal profiles.

Responsibilities:
- Define the `profiles` table read by the access engine and written by onboarding
  and administrative actions.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from axioma_access.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=UTC).replace(tzinfo=None)


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Principal id issued by the session store.
    user_id: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)

    full_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    company_id: Mapped[uuid.UUID | None] = mapped_column(SAUuid(as_uuid=True), nullable=True)

    # Stored as raw strings: rows written by other tools may be malformed and must
    # fail closed when read, not at insert time.
    role: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status_homologacao: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    active_modules: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


# --- Module Notes -----------------------------------------------------------
# `status_homologacao` is the approval flag; the engine reads it as `approved`.
