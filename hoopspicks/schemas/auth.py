from __future__ import annotations

from pydantic import BaseModel


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    is_admin: bool = False
