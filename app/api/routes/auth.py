"""Auth Routes — register and log in against the account directory."""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_account_service
from app.schemas.account import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from app.services.account_service import AccountService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest, service: AccountService = Depends(get_account_service),
):
    user = await service.register(body.name, body.email, body.password)
    return AuthResponse(
        message="User registered successfully", user=UserResponse.from_user(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest, service: AccountService = Depends(get_account_service),
):
    user = await service.authenticate(body.email, body.password)
    return AuthResponse(message="Login successful", user=UserResponse.from_user(user))
