from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, SecretStr


@dataclass(frozen=True, slots=True)
class Credentials:
    base_url: str
    username: str
    password: SecretStr


class PendingAttachment(BaseModel):
    """One file queued for the next write request, in Znuny's `Attachment` wire shape."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: str = Field(alias="Content")
    content_type: str = Field(alias="ContentType")
    filename: str = Field(alias="Filename")

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
