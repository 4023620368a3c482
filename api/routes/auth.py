"""
Authentication endpoints.

- POST /api/auth/login - Exchange credentials for a token
- POST /api/auth/register - Create a user (admin only)
- GET /api/auth/me - Current principal
- POST /api/auth/logout - Clear the session cookie
- PUT /api/auth/change-password - Change own password
"""

from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status

from api.auth import get_current_user, require_admin
from api.dependencies import get_credentials
from api.schemas import (
    ApiResponse,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ok,
)
from core.logging import get_logger
from services.credentials import CredentialService, user_summary


logger = get_logger(__name__)
router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=ApiResponse)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    credentials: CredentialService = Depends(get_credentials),
) -> ApiResponse:
    """
    Log in with email and password.

    The token is returned in the body for `Authorization: Bearer` use and
    also set as an HttpOnly session cookie for browser clients.
    """
    token, user = await credentials.login(body.email, body.password)

    settings = request.app.state.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.jwt_expires_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )

    return ok(
        {"token": token, "user": user_summary(user)},
        message="Login successful",
    )


@router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    admin: dict[str, Any] = Depends(require_admin),
    credentials: CredentialService = Depends(get_credentials),
) -> ApiResponse:
    user = await credentials.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
        position=body.position,
        department=body.department,
    )
    logger.info("User registered by admin", admin_id=admin["id"], user_id=user["id"])

    return ok(
        {
            "id": user["id"],
            "name": user["name"],
            "email": user["email"],
            "role": user["role"],
        },
        message="User registered successfully",
    )


@router.get("/me", response_model=ApiResponse)
async def me(user: dict[str, Any] = Depends(get_current_user)) -> ApiResponse:
    return ok(user_summary(user))


@router.post("/logout", response_model=ApiResponse)
async def logout(request: Request, response: Response) -> ApiResponse:
    # Tokens are stateless; logging out drops the browser's copy
    response.delete_cookie(request.app.state.settings.session_cookie_name)
    return ok(message="Logged out successfully")


@router.put("/change-password", response_model=ApiResponse)
async def change_password(
    body: ChangePasswordRequest,
    user: dict[str, Any] = Depends(get_current_user),
    credentials: CredentialService = Depends(get_credentials),
) -> ApiResponse:
    await credentials.change_password(user["id"], body.current_password, body.new_password)
    return ok(message="Password changed successfully")
