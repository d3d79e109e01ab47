# cashdesk/utils/auth.py

import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from pydantic import BaseModel

from cashdesk.core import config
from cashdesk.core.errors import Forbidden, InvalidToken, MissingToken
from cashdesk.models.enums import AppRole

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# auto_error=False so a missing header reaches authorize() as MissingToken
security = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    sub: str
    uid: str
    role: AppRole
    name: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Salted hash comparison; malformed stored hashes count as a mismatch."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Generate a signed JWT.
    Expect data to contain: {"sub": <external id>, "uid": <storage id>, "role": <AppRole value>, "name": <display name>}
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"iat": now, "exp": expire})
    return jwt.encode(to_encode, config.JWT_SECRET, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> Identity:
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.ALGORITHM],
            options={"require": ["exp", "sub", "role"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token has expired")
    except jwt.InvalidTokenError:
        raise InvalidToken("Invalid token")

    try:
        return Identity(
            sub=payload["sub"],
            uid=str(payload.get("uid", "")),
            role=AppRole(payload["role"]),
            name=str(payload.get("name", "")),
        )
    except (KeyError, ValueError):
        raise InvalidToken("Invalid token")


def authorize(token: Optional[str], required_role: Optional[AppRole] = None) -> Identity:
    """
    Verify a bearer token and, when required_role is given, the role it carries.
    Pure check: no database access, no side effects.
    """
    if not token:
        raise MissingToken()

    identity = decode_access_token(token)

    if required_role is not None and identity.role != required_role:
        raise Forbidden(f"{required_role.value.capitalize()} access required")

    return identity


def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[str]:
    if credentials is None:
        return None
    return credentials.credentials


def get_current_identity(token: Optional[str] = Depends(get_bearer_token)) -> Identity:
    return authorize(token)


def require_role(role: AppRole):
    def dependency(token: Optional[str] = Depends(get_bearer_token)) -> Identity:
        return authorize(token, required_role=role)

    return dependency


require_admin = require_role(AppRole.admin)
