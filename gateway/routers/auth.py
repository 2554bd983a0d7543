"""Admin login and token verification endpoints."""

import hmac
import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from gateway.config import Settings, get_settings
from gateway.dependencies import get_token_codec
from gateway.errors import BadRequest, InvalidCredentials, InvalidOrExpiredToken
from gateway.models.auth import (
    LoginRequest,
    LoginResponse,
    VerifyRequest,
    VerifyResponse,
)
from gateway.services.tokens import TokenCodec

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse, response_model_by_alias=True)
async def login(
    settings: Annotated[Settings, Depends(get_settings)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    body: Annotated[LoginRequest | None, Body()] = None,
):
    """Exchange the admin secret for a short-lived bearer token."""
    secret = body.secret_key if body else None
    if not secret:
        raise BadRequest("Secret key is required.")

    if not hmac.compare_digest(
        secret.encode("utf-8"), settings.admin_secret_key.encode("utf-8")
    ):
        logger.info("Rejected login with invalid secret")
        raise InvalidCredentials()

    issued = codec.issue()
    return LoginResponse(token=issued.token, expires_in=issued.expires_in)


@router.post("/verify", response_model=VerifyResponse)
async def verify(
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    body: Annotated[VerifyRequest | None, Body()] = None,
):
    """Report whether a token is currently valid."""
    token = body.token if body else None
    if not token:
        raise BadRequest("Token is required.")

    try:
        decoded = codec.verify(token)
    except InvalidOrExpiredToken as e:
        return JSONResponse(
            status_code=e.status_code, content={"valid": False, "error": e.message}
        )
    return VerifyResponse(valid=True, decoded=decoded)
