#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Auth session
Explicit signed-in user context passed to every panel

The session holds the current user (or None), the access token and a
loading flag. Panels subscribe to sign-in/sign-out transitions instead of
reading a process-wide global.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from dearself.core.exceptions import AuthError

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class AuthUser:
    id: str
    email: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email}

class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[AuthEvent, Optional[AuthUser]], None]

# ===== PROVIDER =====

class AuthProvider(ABC):
    """Issues identities; implemented by each backend"""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Tuple[AuthUser, str]:
        """Returns (user, access_token); raises AuthError"""

    @abstractmethod
    def sign_up(self, email: str, password: str) -> Tuple[AuthUser, Optional[str]]:
        """Returns (user, access_token or None when confirmation is pending)"""

    @abstractmethod
    def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve a token; None when it is invalid or expired"""

    @abstractmethod
    def sign_out(self, access_token: str) -> None:
        ...

# ===== SESSION =====

class AuthSession:
    """Capability token plus a loading flag"""

    def __init__(self, provider: AuthProvider):
        self.provider = provider
        self.user: Optional[AuthUser] = None
        self.access_token: Optional[str] = None
        self.loading = False
        self._listeners: List[AuthListener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    def require_user(self) -> AuthUser:
        if self.user is None:
            raise AuthError("Not signed in")
        return self.user

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register for auth transitions; returns the unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, email: str, password: str) -> AuthUser:
        self.loading = True
        try:
            user, token = self.provider.sign_in(email, password)
        finally:
            self.loading = False
        self._set(user, token)
        logger.info(f"🔑 Signed in: {user.email}")
        return user

    def sign_up(self, email: str, password: str) -> AuthUser:
        self.loading = True
        try:
            user, token = self.provider.sign_up(email, password)
        finally:
            self.loading = False
        if token:
            self._set(user, token)
        logger.info(f"🆕 Registered: {user.email}")
        return user

    def restore(self, access_token: Optional[str]) -> Optional[AuthUser]:
        """Adopt an existing token, e.g. from a cookie"""
        if not access_token:
            return None
        self.loading = True
        try:
            user = self.provider.get_user(access_token)
        finally:
            self.loading = False
        if user is None:
            self._clear()
            return None
        self._set(user, access_token)
        return user

    def sign_out(self) -> None:
        if self.access_token:
            try:
                self.provider.sign_out(self.access_token)
            except AuthError as e:
                logger.warning(f"⚠️ Remote sign-out failed: {e}")
        self._clear()

    def _set(self, user: AuthUser, token: str) -> None:
        changed = self.user != user
        self.user = user
        self.access_token = token
        if changed:
            self._emit(AuthEvent.SIGNED_IN, user)

    def _clear(self) -> None:
        was_signed_in = self.user is not None
        self.user = None
        self.access_token = None
        if was_signed_in:
            self._emit(AuthEvent.SIGNED_OUT, None)

    def _emit(self, event: AuthEvent, user: Optional[AuthUser]) -> None:
        for listener in list(self._listeners):
            listener(event, user)
