from typing import Optional
from datetime import datetime
from pydantic import EmailStr, Field, field_validator

from campusvault.schemas.common import CamelModel


class UserBase(CamelModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr


class UserRegister(UserBase):
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=200)
    year: int = Field(ge=1, le=4)
    branch: Optional[str] = None

    @field_validator("username", "full_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class UserLogin(CamelModel):
    username: str
    password: str


class UserInfo(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    year: int
    branch: str
    is_admin: bool = False
    created_at: Optional[datetime] = None


class Token(CamelModel):
    token: str
    user_info: UserInfo


class UserUpdate(CamelModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    year: Optional[int] = Field(default=None, ge=1, le=4)
    branch: Optional[str] = None


class PasswordChange(CamelModel):
    current_password: str
    new_password: str = Field(min_length=6, max_length=128)


class UserStats(CamelModel):
    uploads: int = 0
    downloads: int = 0
    total_downloads: int = 0
