from datetime import datetime

from pydantic import Field

from cookbook_club.schemas.base import CamelModel


class User(CamelModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    created_at: datetime


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(None, max_length=320)
    phone: str | None = Field(None, max_length=64)
