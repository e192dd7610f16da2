"""Udemy access token cache.

A token obtained through username/password login is stored here so later
runs skip the login form. `main` clears it when the API answers 401/403.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Optional

DEFAULT_CACHE_PATH = os.path.join(os.path.expanduser("~"), ".cache", "udemy-downloader", "token.json")


def load_cached_token(path: Optional[str]) -> Optional[str]:
    """Return the stored bearer token, or None when the cache is absent or unreadable."""

    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, OSError) as exc:
        logging.warning("Failed to read token cache %s: %s", path, exc)
        return None
    token = data.get("access_token") if isinstance(data, dict) else None
    if token:
        logging.info("Using cached access token from %s", path)
    return token


def save_cached_token(path: Optional[str], token: str, username: Optional[str] = None) -> None:
    if not path:
        return
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"access_token": token, "username": username, "saved_at": time.time()}, f)
        logging.debug("Saved Udemy access token to %s", path)
    except OSError as exc:
        logging.warning("Unable to write token cache %s: %s", path, exc)


def clear_cached_token(path: Optional[str]) -> None:
    """Forget a token the API has rejected."""

    if not path:
        return
    try:
        if os.path.exists(path):
            os.remove(path)
            logging.info("Cleared cached token %s", path)
    except OSError as exc:
        logging.warning("Failed to remove token cache %s: %s", path, exc)
