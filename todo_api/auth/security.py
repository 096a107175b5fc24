from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from ..config import get_settings
from ..errors import AuthError, InternalError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


class TokenExpiredError(AuthError):
    code = "expired_token"
    default_message = "Not authorized, token expired"


class TokenInvalidError(AuthError):
    code = "invalid_token"
    default_message = "Not authorized, token failed"


def hash_password(password: str) -> str:
    if not password:
        raise InternalError("Refusing to hash an empty password")
    try:
        return _pwd_context.hash(password)
    except Exception as exc:
        logger.exception("Password hashing failed")
        raise InternalError("Failed to hash password") from exc


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _pwd_context.verify(password, password_hash)
    except (TypeError, ValueError):
        logger.warning("Stored password hash could not be verified")
        return False


def _require_secret() -> str:
    settings = get_settings()
    if not settings.jwt_secret:
        raise InternalError("JWT_SECRET is not configured")
    return settings.jwt_secret


def create_access_token(
    user_id: str,
    *,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    secret = _require_secret()
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    lifetime = expires_delta if expires_delta is not None else settings.token_lifetime
    payload: Dict[str, Any] = {
        "sub": user_id,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + lifetime).timestamp()),
    }
    try:
        return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)
    except JWTError as exc:
        logger.error("JWT generation error: %s", exc)
        raise InternalError("Failed to generate authentication token") from exc


def decode_access_token(token: str) -> Dict[str, Any]:
    secret = _require_secret()
    settings = get_settings()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except JWTError as exc:
        raise TokenInvalidError() from exc
    # Valid only while now < exp; jose also accepts now == exp.
    expires_at = payload.get("exp")
    if isinstance(expires_at, (int, float)) and expires_at <= datetime.now(timezone.utc).timestamp():
        raise TokenExpiredError()
    return payload


def get_user_id_from_token(token: str) -> str:
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise TokenInvalidError()
    return user_id
