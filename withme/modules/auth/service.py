import hashlib
import logging
import time
from supabase import Client
from withme.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from withme.integrations.email import EmailService
from fastapi import HTTPException
from typing import Dict, Any, Optional, Tuple

logger = logging.getLogger(__name__)

# token digest -> (user dict, monotonic expiry); shared by all requests in the process
_TOKEN_USERS: Dict[str, Tuple[Dict[str, Any], float]] = {}
TOKEN_CACHE_TTL = 60
TOKEN_CACHE_SIZE = 500

DUPLICATE_SIGNUP_MARKERS = ("already registered", "already exists")
BAD_LOGIN_MARKERS = ("invalid", "credentials")
BAD_TOKEN_MARKERS = ("jwt", "expired", "invalid")


def clear_auth_cache():
    _TOKEN_USERS.clear()


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _cached_user(token: str) -> Optional[Dict[str, Any]]:
    key = _token_key(token)
    entry = _TOKEN_USERS.get(key)
    if entry is None:
        return None
    user, expires_at = entry
    if time.monotonic() >= expires_at:
        _TOKEN_USERS.pop(key, None)
        return None
    return user


def _remember_user(token: str, user: Dict[str, Any]):
    now = time.monotonic()
    if len(_TOKEN_USERS) >= TOKEN_CACHE_SIZE:
        for key in [k for k, (_, expires_at) in _TOKEN_USERS.items() if expires_at <= now]:
            del _TOKEN_USERS[key]
    if len(_TOKEN_USERS) < TOKEN_CACHE_SIZE:
        _TOKEN_USERS[_token_key(token)] = (user, now + TOKEN_CACHE_TTL)


def _mentions(message: str, markers) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in markers)


def _auth_user_to_dict(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


class AuthService:
    def __init__(self, supabase: Client, email_service: Optional[EmailService] = None):
        self.supabase = supabase
        self.email_service = email_service or EmailService()

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Sign the traveler up, create their profile row and send the welcome email"""
        metadata = {"full_name": register_data.full_name} if register_data.full_name else {}
        try:
            signup = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {"data": metadata},
            })
        except Exception as e:
            if _mentions(str(e), DUPLICATE_SIGNUP_MARKERS):
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error(f"Sign up failed for {register_data.email}: {e}")
            raise HTTPException(status_code=500, detail="Registration failed")

        if not signup.user:
            raise HTTPException(status_code=400, detail="Failed to register user")

        user_id = signup.user.id
        self._ensure_profile(user_id, register_data.email, register_data.full_name)
        self.email_service.send_welcome(register_data.email, register_data.full_name)

        return RegisterResponse(
            user_id=user_id,
            email=signup.user.email or register_data.email,
            message="User registered successfully"
        )

    def _ensure_profile(self, user_id: str, email: str, name: Optional[str]):
        # A database trigger may already have created the row
        try:
            self.supabase.table("profiles").upsert(
                {"id": user_id, "email": email, "name": name},
                on_conflict="id"
            ).execute()
        except Exception as e:
            logger.warning(f"Profile upsert failed for new user {user_id}: {e}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Exchange email and password for a bearer token"""
        try:
            signin = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password,
            })
        except Exception as e:
            if _mentions(str(e), BAD_LOGIN_MARKERS):
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error(f"Login failed for {login_data.email}: {e}")
            raise HTTPException(status_code=500, detail="Login failed")

        if not signin.user or not signin.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        return TokenResponse(
            access_token=signin.session.access_token,
            user_id=signin.user.id,
            email=signin.user.email or login_data.email
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the Supabase user, cached for a minute per token"""
        cached = _cached_user(token)
        if cached is not None:
            return cached

        try:
            response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            if _mentions(str(e), BAD_TOKEN_MARKERS):
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            logger.warning(f"Token lookup failed: {e}")
            raise HTTPException(status_code=401, detail="Authentication failed")

        if not response or not response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        user = _auth_user_to_dict(response.user)
        _remember_user(token, user)
        return user

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Profile row for the user, or None when it has not been created yet"""
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def logout(self, token: str) -> bool:
        # Access tokens are stateless JWTs; this only ends the server-side client session
        try:
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
