"""User Schemas — admin flag edits and broadcasts."""

from pydantic import BaseModel, Field, field_validator


class UserFlagsUpdate(BaseModel):
    banned: bool | None = None
    is_admin: bool | None = None


class BroadcastRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)
    target_ids: list[int]

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message cannot be empty or whitespace")
        return v
