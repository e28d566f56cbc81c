from __future__ import annotations

import logging

from studydesk.flows.forms import (
    FormValidationError,
    validate_login,
    validate_password_change,
    validate_registration,
)
from studydesk.models.auth import User
from studydesk.services.gateway import AuthGateway, GatewayError
from studydesk.services.notifications import Notifier
from studydesk.services.session import SessionContext

logger = logging.getLogger(__name__)


class AuthFlow:
    """Login, registration and profile forms.

    Each method returns True on success. Validation and remote failures are
    recorded in ``error`` and pushed as notifications.
    """

    def __init__(self, gateway: AuthGateway, session: SessionContext, notifier: Notifier) -> None:
        self._gateway = gateway
        self._session = session
        self._notifier = notifier
        self.loading = False
        self.error: str | None = None
        self.profile: User | None = None

    def _fail(self, message: str) -> bool:
        self.error = message
        self._notifier.error(message)
        return False

    async def login(self, email: str, password: str) -> bool:
        self.error = None
        try:
            email, password = validate_login(email, password)
        except FormValidationError as e:
            return self._fail(e.message)
        self.loading = True
        try:
            result = await self._gateway.login(email, password)
        except GatewayError as e:
            return self._fail(e.message or "Failed to login. Please check your credentials.")
        finally:
            self.loading = False
        self._session.login(result.user, result.token)
        self._notifier.success("Logged in successfully!")
        return True

    async def register(self, username: str, email: str, password: str) -> bool:
        self.error = None
        try:
            username, email, password = validate_registration(username, email, password)
        except FormValidationError as e:
            # Shown inline on the form only
            self.error = e.message
            return False
        self.loading = True
        try:
            await self._gateway.register(username, email, password)
        except GatewayError as e:
            return self._fail(e.message or "Failed to register.")
        finally:
            self.loading = False
        self._notifier.success("Registration successful! Please login.")
        return True

    def logout(self) -> None:
        self.profile = None
        self._session.logout()

    async def load_profile(self) -> User | None:
        try:
            self.profile = await self._gateway.profile()
        except GatewayError as e:
            logger.error("Fetching profile failed: %s", e.message)
            self._notifier.error("Failed to fetch profile data.")
            return None
        self._session.update_user(self.profile)
        return self.profile

    async def change_password(self, current: str, new: str, confirm: str) -> bool:
        self.error = None
        try:
            current, new = validate_password_change(current, new, confirm)
        except FormValidationError as e:
            return self._fail(e.message)
        self.loading = True
        try:
            await self._gateway.change_password(current, new)
        except GatewayError as e:
            return self._fail(e.message or "Failed to change password.")
        finally:
            self.loading = False
        self._notifier.success("Password changed successfully!")
        return True

    async def update_profile(self, **fields: str | None) -> User | None:
        changes = {k: v for k, v in fields.items() if v is not None}
        if not changes:
            return self.profile
        try:
            self.profile = await self._gateway.update_profile(**changes)
        except GatewayError as e:
            logger.error("Updating profile failed: %s", e.message)
            self._notifier.error(e.message or "Failed to update profile.")
            return None
        self._session.update_user(self.profile)
        self._notifier.success("Profile updated successfully!")
        return self.profile
