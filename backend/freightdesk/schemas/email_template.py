"""Pydantic schemas for stored escalation email templates."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmailTemplateBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    subject: str = Field(min_length=1, max_length=500)
    body: str = Field(min_length=1)
    action: str | None = None
    recipient: str = ""
    sender: str = ""
    cc: str | None = None
    bcc: str | None = None
    company: str | None = None
    phone: str | None = None


class EmailTemplateCreate(EmailTemplateBase):
    # Generated when omitted; built-in templates use fixed slugs.
    id: str | None = Field(default=None, max_length=64, pattern=r"^[a-z0-9][a-z0-9_-]*$")


class EmailTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    subject: str | None = Field(default=None, min_length=1, max_length=500)
    body: str | None = Field(default=None, min_length=1)
    action: str | None = None
    recipient: str | None = None
    sender: str | None = None
    cc: str | None = None
    bcc: str | None = None
    company: str | None = None
    phone: str | None = None

    @field_validator("name", "subject", "body", "recipient", "sender")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class EmailTemplateRecord(EmailTemplateBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
