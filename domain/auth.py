"""Domain Entities - Auth"""
from pydantic import BaseModel
from typing import Optional

from domain.enums import UserRole


class User(BaseModel):
    """Authenticated caller as resolved from a bearer token"""
    uid: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[UserRole] = None
    disabled: bool = False

    class Config:
        from_attributes = True

class UserInDB(User):
    """User with hashed password for the development user directory"""
    hashed_password: str
