from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from ..models import User
from ..services.auth_service import AuthResult, AuthService
from .dependencies import get_current_user
from .schemas import AuthData, AuthResponse, LoginRequest, MeResponse, RegisterRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_auth_service(request: Request) -> AuthService:
    return AuthService(request.app.state.users)


def _auth_response(result: AuthResult, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        data=AuthData(
            id=result.user.id,
            username=result.user.username,
            email=result.user.email,
            token=result.token,
        ),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = await service.register(payload)
    return _auth_response(result, "User registered successfully")


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = await service.login(payload)
    return _auth_response(result, "Login successful")


@router.get("/me", response_model=MeResponse)
async def me(
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> MeResponse:
    return MeResponse(data=await service.get_profile(user.id))
