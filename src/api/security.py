"""
Bearer token authentication and role checks.

Tokens are HS256 JWTs carrying the principal id in ``sub`` and its role in
``role``. Issuing tokens for real users is the auth service's job;
``create_access_token`` exists for operator tooling and tests.
"""

from datetime import datetime, timedelta, timezone

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from src.config import get_logger, get_settings
from src.core.entities.principal import Principal, Role
from src.core.exceptions import AuthenticationError, AuthorizationError

logger = get_logger(__name__)

# auto_error=False: a missing header is reported as our own 401
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    subject: str,
    role: Role | str = Role.USER,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token for ``subject`` with the configured key and lifetime."""
    auth = get_settings().auth
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=auth.access_token_expire_minutes)
    )
    claims = {
        "sub": str(subject),
        "role": Role(role).value,
        "exp": expire,
    }
    return jwt.encode(claims, auth.secret_key, algorithm=auth.algorithm)


def decode_access_token(token: str) -> Principal:
    """Verify a token and return its principal.

    Raises:
        AuthenticationError: bad signature, expired, or missing claims
    """
    auth = get_settings().auth
    try:
        payload = jwt.decode(token, auth.secret_key, algorithms=[auth.algorithm])
    except JWTError as e:
        logger.info("token_rejected", reason=str(e))
        raise AuthenticationError() from e

    subject = payload.get("sub")
    role = payload.get("role", Role.USER.value)
    if not subject or role not in {r.value for r in Role}:
        logger.info("token_rejected", reason="missing or invalid claims")
        raise AuthenticationError()
    return Principal(id=subject, role=Role(role))


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Resolve the principal behind the request's bearer token."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return decode_access_token(credentials.credentials)


def require_roles(*roles: Role):
    """Dependency factory admitting only principals with one of ``roles``."""
    allowed = [role.value for role in roles]

    async def dependency(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if principal.role not in roles:
            raise AuthorizationError(principal.role.value, allowed)
        return principal

    return dependency


require_admin = require_roles(Role.ADMIN)
