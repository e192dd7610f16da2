"""Models related to authentication and login responses."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel


class LoginResult(BaseModel):
    """Simplified view of the login API response."""

    access_token: str
    username: str
    raw: Dict[str, Any]
