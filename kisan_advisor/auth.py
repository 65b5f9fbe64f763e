"""Identity boundary: sign-in/up/out against an external provider.

The provider is an adapter; :class:`AuthService` adds session-change
notifications and maps provider errors to user-facing, localized messages.
Unlike generation failures, authentication failures are raised to callers.
"""

import enum
import hashlib
import hmac
import logging
import os
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from kisan_advisor.localization import localize

logger = logging.getLogger(__name__)

EMAIL_NOT_CONFIRMED = "Email not confirmed"


class AuthUser(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str
    full_name: str = Field(default="")
    email_confirmed: bool = Field(default=False)


class AuthSession(BaseModel):
    access_token: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user: AuthUser


class AuthResponse(BaseModel):
    user: Optional[AuthUser] = Field(default=None)
    session: Optional[AuthSession] = Field(default=None)
    error: Optional[str] = Field(default=None)


class AuthEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


class AuthError(Exception):
    """Provider-reported authentication failure with its raw message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def describe_auth_error(error: AuthError, locale: str, fallback_key: str = "sign_in_failed") -> str:
    """Text to show the user for ``error`` in ``locale``."""
    if error.message == EMAIL_NOT_CONFIRMED:
        return localize("email_not_confirmed", locale)
    return error.message or localize(fallback_key, locale)


def sign_up_notice(user: AuthUser, locale: str) -> str:
    """Guidance to show after a successful sign-up; empty once the email is confirmed."""
    if user.email_confirmed:
        return ""
    return localize("email_confirmation_sent", locale)


class IdentityProvider(ABC):
    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthResponse:
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str, full_name: str) -> AuthResponse:
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...

    @abstractmethod
    async def get_session(self) -> Optional[AuthSession]:
        ...


class InMemoryIdentityProvider(IdentityProvider):
    """Process-local accounts for development and tests.

    New accounts start unconfirmed unless ``auto_confirm`` is set; call
    :meth:`confirm_email` to mimic the user clicking the confirmation link.
    """

    def __init__(self, auto_confirm: bool = False) -> None:
        self.auto_confirm = auto_confirm
        self._accounts: Dict[str, Dict[str, object]] = {}
        self._session: Optional[AuthSession] = None

    @staticmethod
    def _hash(password: str, salt: bytes) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, 100_000)

    def confirm_email(self, email: str) -> None:
        account = self._accounts[email.strip().lower()]
        account["user"].email_confirmed = True

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthResponse:
        key = email.strip().lower()
        if key in self._accounts:
            return AuthResponse(error="User already registered")
        if len(password) < 6:
            return AuthResponse(error="Password should be at least 6 characters")
        salt = os.urandom(16)
        user = AuthUser(email=key, full_name=full_name, email_confirmed=self.auto_confirm)
        self._accounts[key] = {"user": user, "salt": salt, "hash": self._hash(password, salt)}
        return AuthResponse(user=user)

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        account = self._accounts.get(email.strip().lower())
        if account is None or not hmac.compare_digest(
            account["hash"], self._hash(password, account["salt"])
        ):
            return AuthResponse(error="Invalid login credentials")
        user = account["user"]
        if not user.email_confirmed:
            return AuthResponse(error=EMAIL_NOT_CONFIRMED)
        self._session = AuthSession(user=user)
        return AuthResponse(user=user, session=self._session)

    async def sign_out(self) -> None:
        self._session = None

    async def get_session(self) -> Optional[AuthSession]:
        return self._session


AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]


class AuthService:
    """Front the identity provider and notify listeners of session changes."""

    def __init__(self, provider: IdentityProvider) -> None:
        self.provider = provider
        self._listeners: List[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("Auth listener failed while handling %s", event.value)

    async def sign_in(self, email: str, password: str) -> AuthUser:
        response = await self.provider.sign_in(email, password)
        if response.error is not None or response.user is None:
            logger.warning("Sign-in failed for %s: %s", email, response.error)
            raise AuthError(response.error or "")
        self._emit(AuthEvent.SIGNED_IN, response.session)
        return response.user

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthUser:
        # The user must confirm their email before signing in; no session starts here.
        response = await self.provider.sign_up(email, password, full_name)
        if response.error is not None or response.user is None:
            logger.warning("Sign-up failed for %s: %s", email, response.error)
            raise AuthError(response.error or "")
        return response.user

    async def sign_out(self) -> None:
        await self.provider.sign_out()
        self._emit(AuthEvent.SIGNED_OUT, None)

    async def get_session(self) -> Optional[AuthSession]:
        return await self.provider.get_session()
