from pydantic import BaseModel


class RegisterResponse(BaseModel):
    message: str


class MessageResponse(BaseModel):
    message: str
