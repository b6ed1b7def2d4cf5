import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import jwt, JWTError
from passlib.context import CryptContext

from config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    SECRET_KEY,
)
from enums.user_role import UserRole
from utils.exceptions import AuthError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password):
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    email: str,
    role: UserRole,
    name: str,
    expires_delta: Optional[timedelta] = None,
) -> Tuple[str, datetime]:
    """Issue a signed token for one account; returns the token and its expiry."""
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": email,
        "role": role.value,
        "name": name,
        "jti": str(uuid.uuid4()),
        "iat": issued_at,
        "exp": expire,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM), expire


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except JWTError:
        raise AuthError("Invalid or expired token")

    if not payload.get("sub") or not payload.get("role"):
        raise AuthError("Invalid token claims")
    try:
        payload["role"] = UserRole(payload["role"])
    except ValueError:
        raise AuthError("Invalid user role")
    return payload
