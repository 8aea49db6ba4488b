"""
Auth Gate for admin paths.

HTTP Basic authentication where only the password half is checked against
a single configured admin secret. The username is accepted as-is.

Decoding never raises: any malformed header yields None and is treated
exactly like missing credentials.
"""

import base64
import binascii
import secrets
from dataclasses import dataclass
from typing import Optional

from shortlinks_app.config import Settings


@dataclass(frozen=True)
class BasicCredentials:
    username: str
    password: str


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a credential check. `reason` is set only on failure."""
    authenticated: bool
    reason: Optional[str] = None


def decode_basic_credentials(authorization: Optional[str]) -> Optional[BasicCredentials]:
    """
    Parse an `Authorization: Basic <token>` header value.
    
    The decoded token is split on the first ":" so passwords may
    contain colons.
    
    Returns:
        BasicCredentials, or None if the header is absent or malformed
    """
    if not authorization:
        return None
    
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "basic" or not token:
        return None
    
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return BasicCredentials(username=username, password=password)


class AuthGate:
    """
    Validates admin credentials.
    
    Built from explicit configuration. Raises ValueError when the admin
    password is missing or empty.
    """

    def __init__(self, admin_password: str, realm: str = "Admin Area"):
        if not admin_password:
            raise ValueError("AuthGate requires a non-empty admin password")
        self._admin_password = admin_password.encode("utf-8")
        self.realm = realm

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthGate":
        return cls(
            admin_password=settings.admin_password.get_secret_value(),
            realm=settings.auth_realm,
        )

    def authenticate(self, authorization: Optional[str]) -> AuthResult:
        """
        Check an Authorization header value.
        
        Args:
            authorization: Raw header value or None
            
        Returns:
            AuthResult with the failure reason for logging
        """
        if not authorization:
            return AuthResult(False, "missing authorization header")
        
        credentials = decode_basic_credentials(authorization)
        if credentials is None:
            return AuthResult(False, "malformed basic credentials")
        
        if not secrets.compare_digest(credentials.password.encode("utf-8"), self._admin_password):
            return AuthResult(False, "wrong password")
        return AuthResult(True)
