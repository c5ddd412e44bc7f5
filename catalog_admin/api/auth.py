"""Admin authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from catalog_admin.api.dependencies import get_auth_service
from catalog_admin.api.schemas import ErrorResponse, LoginRequest, TokenResponse
from catalog_admin.application import AuthService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing credentials"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Exchange admin email and password for an access token."""
    token = await service.login(body.email, body.password)
    return TokenResponse(token=token)
