"""
Bearer token handling for the directory API.

Tokens are HS256 JWTs signed with the application secret key. The ``sub``
claim names the user whose session (AuthenticatedUser + UserContext) must
already be registered in the app's SessionRegistry.

Security:
- Signature and expiration verified on every request
- Tokens are never logged; failures log a truncated SHA-256 hash only
"""

import datetime
import hashlib
import logging
from typing import Any, Dict

import jwt
from flask import current_app, g, request

from directory_api.core.exceptions import UnauthorizedError
from directory_api.core.session import Session

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"


class TokenValidationError(Exception):
    """Exception raised when a bearer token fails validation."""
    pass


def issue_token(username: str, secret_key: str, lifetime_seconds: int = 3600) -> str:
    """Issue a signed bearer token for the given username.

    Args:
        username: Identifier of the user the token represents
        secret_key: HMAC signing key
        lifetime_seconds: Seconds until the token expires

    Returns:
        Encoded JWT
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    claims = {
        "sub": username,
        "iat": now,
        "exp": now + datetime.timedelta(seconds=lifetime_seconds),
    }
    return jwt.encode(claims, secret_key, algorithm=TOKEN_ALGORITHM)


def validate_token(token: str, secret_key: str) -> Dict[str, Any]:
    """Validate a bearer token and return its claims.

    Raises:
        TokenValidationError: If the token is expired, tampered with or malformed
    """
    try:
        claims = jwt.decode(
            token,
            secret_key,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenValidationError("Token has expired") from None
    except jwt.InvalidTokenError as e:
        raise TokenValidationError(f"Invalid token: {e}") from None

    if not isinstance(claims.get("sub"), str) or not claims["sub"]:
        raise TokenValidationError("Token subject is missing")
    return claims


def _token_hash(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()[:12]


def authenticate_request() -> Session:
    """Resolve the session for the current request from its bearer token.

    The session is stored as ``g.session``.

    Raises:
        UnauthorizedError: If no valid token/session accompanies the request
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header:
        raise UnauthorizedError("Authorization header missing. Provide 'Authorization: Bearer <token>'.")
    if not auth_header.startswith("Bearer "):
        raise UnauthorizedError("Authorization header must use Bearer token scheme.")

    token = auth_header[7:].strip()
    if not token:
        raise UnauthorizedError("Bearer token is empty.")

    cfg = current_app.config["APP_CONFIG"]
    try:
        claims = validate_token(token, cfg.secret_key)
    except TokenValidationError as e:
        logger.info("Rejected token | token_hash=%s | path=%s | reason=%s",
                    _token_hash(token), request.path, e)
        raise UnauthorizedError(str(e)) from None

    session = current_app.config["SESSION_REGISTRY"].get(claims["sub"])
    if session is None:
        logger.info("No session for token | token_hash=%s | path=%s", _token_hash(token), request.path)
        raise UnauthorizedError("Session is no longer valid.")

    g.session = session
    return session
