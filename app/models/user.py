from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from app.core.clock import utc_naive_now


class UserRole(str, Enum):
    owner = "owner"
    groomer = "groomer"


class UserBase(SQLModel):
    email: str = Field(unique=True, index=True)
    name: str
    role: UserRole = Field(index=True)


class User(UserBase, table=True):
    __tablename__ = "users"
    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)


class UserCreate(SQLModel):
    email: str
    password: str
    name: str
    role: UserRole = UserRole.owner


class UserPublic(SQLModel):
    id: int
    email: str
    name: str
    role: UserRole
