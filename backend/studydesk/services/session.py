from __future__ import annotations

import logging

from studydesk.models.auth import SessionSnapshot, User

logger = logging.getLogger(__name__)


class SessionContext:
    """Process-wide session, passed explicitly to whoever needs it.

    Written only through ``login`` and ``logout``; everything else reads.
    """

    def __init__(self) -> None:
        self._user: User | None = None
        self._token: str | None = None

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def login(self, user: User, token: str) -> None:
        self._user = user
        self._token = token
        logger.info("Session started for %s", user.email)

    def logout(self) -> None:
        if self._token is None:
            return
        logger.info("Session ended for %s", self._user.email if self._user else "?")
        self._user = None
        self._token = None

    def update_user(self, user: User) -> None:
        if self._token is not None:
            self._user = user

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(authenticated=self.is_authenticated, user=self._user)
