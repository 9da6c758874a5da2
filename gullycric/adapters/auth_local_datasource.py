"""Persisted authentication session."""

import json
from typing import Optional

from pydantic import ValidationError

from ..domain.common.exceptions import CacheException
from ..domain.models.user import AuthSession
from .key_value_store import KeyValueStore

SESSION_KEY = "auth_session"


class AuthLocalDataSource:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_session(self) -> Optional[AuthSession]:
        raw = self.store.get_string(SESSION_KEY)
        if not raw:
            return None
        try:
            return AuthSession.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise CacheException(f"Stored session is unreadable: {e}")

    def save_session(self, session: AuthSession) -> None:
        self.store.set_string(SESSION_KEY, session.model_dump_json())

    def clear_session(self) -> None:
        self.store.remove(SESSION_KEY)
