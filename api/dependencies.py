"""API Dependencies - Authentication"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from domain.auth import User, UserInDB
from infrastructure.security import decode_access_token, get_password_hash
from api.schemas import TokenData

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)

# Development user directory standing in for the external identity provider
_fake_users_db = {
    "host": {
        "uid": "host-0001",
        "username": "host",
        "full_name": "Demo Host",
        "email": "host@example.com",
        "role": "host",
        "plain_password": "host123",
        "disabled": False,
    },
    "agent": {
        "uid": "agent-0001",
        "username": "agent",
        "full_name": "Demo Agent",
        "email": "agent@example.com",
        "role": "agent",
        "plain_password": "agent123",
        "disabled": False,
    },
}

fake_users_db = _fake_users_db

_password_hash_cache = {}

def _get_hashed_password(username: str) -> str:
    """Lazily hash passwords on first access"""
    if username not in _password_hash_cache:
        user = _fake_users_db.get(username)
        if user and "plain_password" in user:
            _password_hash_cache[username] = get_password_hash(user["plain_password"])
    return _password_hash_cache.get(username, "")

def get_user(db, username: str) -> Optional[UserInDB]:
    if username in db:
        user_dict = db[username].copy()
        if "plain_password" in user_dict:
            user_dict["hashed_password"] = _get_hashed_password(username)
            del user_dict["plain_password"]
        user_dict.pop("username", None)
        return UserInDB(**user_dict)
    return None

def resolve_token(token: Optional[str]) -> Optional[User]:
    """Map a bearer token to its user, or None when it cannot be trusted"""
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        return None

    token_data = TokenData(username=payload.get("sub"))
    if token_data.username is None:
        return None

    user = get_user(_fake_users_db, username=token_data.username)
    if user is None or user.disabled:
        return None
    return User(**user.model_dump(exclude={"hashed_password"}))

async def get_current_user(token: str = Depends(oauth2_scheme)) -> User:
    user = resolve_token(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

async def get_optional_user(token: Optional[str] = Depends(optional_oauth2_scheme)) -> Optional[User]:
    """Caller identity when a valid bearer token is present; the service decides what that allows"""
    return resolve_token(token)
