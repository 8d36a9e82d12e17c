"""Setting API schemas."""

from typing import Any

from pydantic import BaseModel, Field

from projecthub.schemas.common import Timestamped


class SettingResponse(Timestamped):
    workspace_id: int | None = None
    key: str
    value: Any = Field(default=None, validation_alias="typed_value")
    type: str
    description: str | None = None


class SettingValueResponse(BaseModel):
    key: str
    workspace_id: int | None = None
    value: Any = None
