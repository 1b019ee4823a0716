"""
FastAPI routes for registration, login and user preferences.
"""

import structlog
from fastapi import APIRouter, HTTPException, status

from ainews.api.dependencies import AccountsDep, CurrentUserDep
from ainews.models.domain import (
    AuthResponse,
    CategoriesResponse,
    CategoriesUpdate,
    LoginRequest,
    RegisterRequest,
    UserProfile,
)
from ainews.services.accounts import (
    InvalidCredentialsError,
    UserExistsError,
    UserNotFoundError,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, accounts: AccountsDep):
    try:
        user, token = await accounts.register(request.email, request.password, request.categories)
    except UserExistsError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    return AuthResponse(message="User created successfully", token=token, user=user)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, accounts: AccountsDep):
    try:
        user, token = await accounts.login(request.email, request.password)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User not found")
    except InvalidCredentialsError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")

    return AuthResponse(message="Login successful", token=token, user=user)


@router.get("/user/profile", response_model=UserProfile)
async def get_profile(user: CurrentUserDep):
    return user


@router.put("/user/categories", response_model=CategoriesResponse)
async def update_categories(update: CategoriesUpdate, user: CurrentUserDep, accounts: AccountsDep):
    try:
        categories = await accounts.update_categories(user.id, update.categories)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return CategoriesResponse(message="Categories updated successfully", categories=categories)
