from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Project(BaseModel):
    """A persisted project as returned by the persistence layer."""

    id: str
    name: str
    messages: list[dict[str, Any]] = Field(default_factory=list)
    data: dict[str, str] = Field(default_factory=dict)
    user_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AnonWorkRecord(BaseModel):
    """Conversation and files produced before the session is bound to a project."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[dict[str, Any]] = Field(default_factory=list)
    file_system_data: dict[str, str] = Field(default_factory=dict, alias="fileSystemData")


class AuthResult(BaseModel):
    success: bool
    error: str | None = None
