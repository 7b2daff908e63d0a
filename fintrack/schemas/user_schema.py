from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserBase(BaseModel, str_strip_whitespace=True):
    full_name: str
    username: str
    email: str


class UserCreate(UserBase):
    password: str


class User(UserBase, str_strip_whitespace=True):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    username: str
    created_at: datetime
    updated_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str
