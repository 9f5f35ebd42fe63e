from typing import Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_auth_service, get_current_caller, get_optional_caller
from ..models.users import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from ..services.auth_service import AuthService
from ..utils.security import Caller

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    payload: RegisterRequest,
    caller: Optional[Caller] = Depends(get_optional_caller),
    service: AuthService = Depends(get_auth_service),
):
    user, token = service.register(payload, caller)
    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserResponse.from_record(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    user, token = service.login(payload)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserResponse.from_record(user),
    )


@router.get("/me", response_model=UserResponse)
async def current_user(
    caller: Caller = Depends(get_current_caller),
    service: AuthService = Depends(get_auth_service),
):
    return UserResponse.from_record(service.get_user(caller.user_id))
