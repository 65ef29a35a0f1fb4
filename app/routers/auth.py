"""
Authentication API endpoints.

A local signup/login gate over the user table; the session record is
shared by every client of this process, as in a single-user app.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from app.dependencies import get_session_manager
from auth.service import AuthenticationError, ValidationError
from storage import StorageError

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Request/Response Schemas
# =============================================================================

class SignupRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    success: bool
    user: Optional[dict] = None


# =============================================================================
# Routes
# =============================================================================

@router.post("/signup", response_model=AuthResponse)
async def signup(request: SignupRequest):
    """Create an account and log it in."""
    try:
        user = await get_session_manager().signup(
            name=request.name,
            email=request.email,
            password=request.password,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Signup failed", "detail": str(e), "code": "INVALID_SIGNUP"},
        )
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "Signup failed",
                "detail": "Account could not be saved",
                "code": "STORAGE_UNAVAILABLE",
            },
        )

    return AuthResponse(success=True, user=user.to_dict())


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    """Login with email/password."""
    try:
        user = await get_session_manager().login(request.email, request.password)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Login failed", "detail": str(e), "code": "INVALID_CREDENTIALS"},
        )

    return AuthResponse(success=True, user=user.to_dict())


@router.post("/logout")
async def logout():
    """Clear the session record."""
    get_session_manager().logout()
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def get_me():
    """Get the logged-in user, or null."""
    user = get_session_manager().get_current_user()
    return {"user": user.to_dict() if user else None}
