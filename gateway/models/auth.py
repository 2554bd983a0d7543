"""Auth request/response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    secret_key: str | None = Field(None, alias="secretKey")


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    expires_in: str = Field(..., alias="expiresIn")


class VerifyRequest(BaseModel):
    token: str | None = None


class VerifyResponse(BaseModel):
    valid: bool
    decoded: dict[str, Any]
