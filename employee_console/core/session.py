"""Process-wide session store, persisted to a small JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from employee_console.core.config import Settings
from employee_console.models.auth import Session

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path).expanduser() if path is not None else None
        self._session: Session | None = self._load()

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionStore:
        return cls(settings.SESSION_FILE)

    @property
    def token(self) -> str | None:
        return self._session.token if self._session else None

    @property
    def username(self) -> str | None:
        return self._session.username if self._session else None

    def get_session(self) -> Session | None:
        return self._session

    def set_session(self, session: Session) -> None:
        self._session = session
        self._save()

    def clear_session(self) -> None:
        self._session = None
        if self.path is not None and self.path.exists():
            self.path.unlink()

    def _load(self) -> Session | None:
        if self.path is None or not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            session = Session.model_validate(data)
        except (OSError, ValueError, ValidationError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return None
        if not session.token:
            return None
        return session

    def _save(self) -> None:
        if self.path is None or self._session is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only; the file holds a bearer token.
        self.path.touch(mode=0o600, exist_ok=True)
        self.path.chmod(0o600)
        self.path.write_text(self._session.model_dump_json(), encoding="utf-8")
