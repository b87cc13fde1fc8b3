"""
Admin session gate.

One shared password, hashed with a fixed salt. The digest is what the login
route puts in the http-only cookie, and every admin request is checked by
comparing the cookie against the same digest.
"""

import hashlib
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from barbershop.config import Settings, get_settings
from barbershop.logger import get_logger

logger = get_logger(__name__)


class SharedSecretGate:
    def __init__(self, password: str, salt: str):
        self._salt = salt
        self._token = self.digest(password)

    def digest(self, password: Optional[str]) -> str:
        return hashlib.sha256(((password or "") + self._salt).encode("utf-8")).hexdigest()

    @property
    def token(self) -> str:
        return self._token

    def verify(self, password: Optional[str]) -> bool:
        return self.digest(password) == self._token

    def is_valid_cookie(self, cookie: Optional[str]) -> bool:
        return cookie is not None and cookie == self._token


def get_session_gate(settings: Settings = Depends(get_settings)) -> SharedSecretGate:
    return SharedSecretGate(settings.admin_password, settings.admin_salt)


def is_authenticated(request: Request, gate: SharedSecretGate, settings: Settings) -> bool:
    return gate.is_valid_cookie(request.cookies.get(settings.admin_cookie_name))


def require_admin(
    request: Request,
    gate: SharedSecretGate = Depends(get_session_gate),
    settings: Settings = Depends(get_settings),
) -> None:
    """Dependency guarding every admin data route."""
    if not is_authenticated(request, gate, settings):
        logger.warning(f"Rejected admin request without valid session: {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin login required",
        )
