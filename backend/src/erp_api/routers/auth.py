"""Authentication router."""

from typing import Annotated

from fastapi import Depends, Request

from erp_api.dependencies import get_auth_service
from erp_api.models.domain.identity import Identity
from erp_api.models.dto.auth import IdentityResponse, LoginRequest, TokenResponse
from erp_api.security.access import GuardedRouter, get_current_identity, public
from erp_api.security.rate_limit import auth_login_limit, limiter
from erp_api.services.auth_service import AuthService

router = GuardedRouter()


@router.post("/login", response_model=TokenResponse)
@public()
@limiter.limit(auth_login_limit)
async def login(
    request: Request,
    payload: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Exchange email and password for an access token."""
    return await service.sign_in(payload.email, payload.password)


@router.get("/me", response_model=IdentityResponse)
async def me(
    identity: Annotated[Identity, Depends(get_current_identity)],
) -> IdentityResponse:
    """Return the identity carried by the caller's token."""
    return IdentityResponse(user_id=identity.subject_id, role=identity.role_name)
