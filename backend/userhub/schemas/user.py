from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CreateUserPayload(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=256)
    password: str = Field(min_length=6, max_length=128, repr=False)
    name: Optional[str] = Field(default=None, max_length=256)
    role: Optional[str] = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: Optional[str] = None
    role: str
    created_at: datetime
    updated_at: datetime


class UserPage(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    data: List[UserRead]
    count: int
    total: int
    page: int
    page_count: int = Field(alias="pageCount")
