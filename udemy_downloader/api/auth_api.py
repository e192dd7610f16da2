"""Username/password login returning a fresh access token."""

from __future__ import annotations

import logging

from ..models import LoginResult
from ..utils.http_client import AuthenticationError, HttpClient

LOGIN_URL = "https://www.udemy.com/api-2.0/auth/udemy-auth/login/?fields[user]=access_token"


class AuthAPI:
    """Encapsulates the login process to retrieve a new access token."""

    def __init__(self, http_client: HttpClient) -> None:
        self._client = http_client

    def login(self, username: str, password: str) -> LoginResult:
        form = {"email": username, "password": password}
        try:
            data = self._client.post_form(LOGIN_URL, form)
        except AuthenticationError:
            raise
        except Exception as exc:  # pragma: no cover - network errors
            logging.error("Login request failed: %s", exc)
            raise

        access_token = data.get("access_token")
        if not access_token:
            raise ValueError("Login response has no access_token")

        login_result = LoginResult(access_token=access_token, username=username, raw=data)
        logging.info("Logged in as %s", login_result.username)
        return login_result
