"""Centralized dependency injection factories for FastAPI.

This module provides reusable service factory functions for dependency
injection, shared by the routers and the access gate.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.database import get_db
from erp_api.repositories.role_repository import RoleRepository
from erp_api.security.auth import TokenAuthenticator
from erp_api.services.auth_service import AuthService
from erp_api.services.authorization_service import PermissionResolver
from erp_api.services.permission_service import PermissionService
from erp_api.services.role_service import RoleService
from erp_api.services.user_service import UserService


# =============================================================================
# Access Gate Stages
# =============================================================================


def get_token_authenticator() -> TokenAuthenticator:
    """Get TokenAuthenticator instance."""
    return TokenAuthenticator()


def get_permission_resolver(db: AsyncSession = Depends(get_db)) -> PermissionResolver:
    """Get PermissionResolver instance."""
    return PermissionResolver(RoleRepository(db))


# =============================================================================
# Service Factories
# =============================================================================


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Get AuthService instance."""
    return AuthService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Get UserService instance."""
    return UserService(db)


def get_role_service(db: AsyncSession = Depends(get_db)) -> RoleService:
    """Get RoleService instance."""
    return RoleService(db)


def get_permission_service(db: AsyncSession = Depends(get_db)) -> PermissionService:
    """Get PermissionService instance."""
    return PermissionService(db)
