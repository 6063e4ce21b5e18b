"""Sample record shapes."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import ClassVar

from pydantic import BaseModel, Field


class User(BaseModel):
    """User entity as stored in the ``Users`` table."""

    table_name: ClassVar[str] = "Users"

    id: int = 0
    name: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=100)
    description: str | None = Field(default=None, max_length=500)
    created_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_date: datetime | None = None
    is_active: bool = True
