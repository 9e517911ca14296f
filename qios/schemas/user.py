import uuid
from typing import Optional

from fastapi_users import schemas
from pydantic import BaseModel, EmailStr, Field


class UserRead(schemas.BaseUser[uuid.UUID]):
    username: str
    store_id: Optional[str] = None


class UserCreate(schemas.BaseUserCreate):
    username: str = Field(pattern=r"^[A-Za-z0-9_]{3,50}$")
    store_id: Optional[str] = None


class RegisterRequest(BaseModel):
    username: str = Field(pattern=r"^[A-Za-z0-9_]{3,50}$")
    email: EmailStr
    password: str = Field(min_length=8)
    store_id: Optional[str] = Field(default=None, alias="storeId")


class LoginRequest(BaseModel):
    username: str
    password: str
