"""
FastAPI dependencies: service access and bearer authentication.
"""
from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ainews.container import Services
from ainews.models.domain import UserProfile
from ainews.services.accounts import AccountError, AccountService

logger = structlog.get_logger(__name__)

# Global instance, set during application startup
_services: Optional[Services] = None

bearer_scheme = HTTPBearer(auto_error=False)


def set_services(services: Optional[Services]):
    global _services
    _services = services


def get_services() -> Services:
    if _services is None:
        raise RuntimeError("Services not initialized")
    return _services


ServicesDep = Annotated[Services, Depends(get_services)]
CredentialsDep = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]


def get_accounts(services: ServicesDep) -> AccountService:
    return services.accounts


AccountsDep = Annotated[AccountService, Depends(get_accounts)]


async def get_optional_user(
    credentials: CredentialsDep,
    accounts: AccountsDep,
) -> Optional[UserProfile]:
    """The authenticated user, or None for a missing or invalid token."""
    if credentials is None:
        return None
    try:
        return await accounts.authenticate(credentials.credentials)
    except AccountError:
        logger.info("Token invalid, using default categories")
        return None


async def get_current_user(
    credentials: CredentialsDep,
    accounts: AccountsDep,
) -> UserProfile:
    """The authenticated user; 401 if the token is missing, invalid or expired."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await accounts.authenticate(credentials.credentials)
    except AccountError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


OptionalUserDep = Annotated[Optional[UserProfile], Depends(get_optional_user)]
CurrentUserDep = Annotated[UserProfile, Depends(get_current_user)]
