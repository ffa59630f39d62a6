"""Authentication related schemas."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", description="Participant name")
    password: str = Field(..., description="Shared secret")


class LoginUser(BaseModel):
    user_id: str


class LoginResponse(BaseModel):
    message: str
    user: LoginUser
