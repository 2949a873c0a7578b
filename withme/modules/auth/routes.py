from fastapi import APIRouter, Depends
from withme.database.supabase_client import get_supabase
from withme.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from withme.modules.auth.service import AuthService
from withme.integrations.email import EmailService, get_email_service
from withme.core.dependencies import get_current_user, get_current_token, is_admin
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    email_service: EmailService = Depends(get_email_service)
) -> AuthService:
    return AuthService(supabase, email_service)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and end the session"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def me(
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_supabase),
):
    """Current authenticated user with profile and admin flag (for frontend UI)."""
    return {
        **current_user,
        "profile": service.get_profile(current_user["id"]),
        "is_admin": is_admin(current_user, supabase),
    }
