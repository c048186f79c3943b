"""Authentication API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from planner.auth.schemas import RegisterResponse, Token, UserLogin, UserRegister, UserResponse
from planner.auth.service import AuthService, get_auth_service
from planner.config import get_settings
from planner.dependencies import CurrentUser, get_db

router = APIRouter()


def get_service(db: Annotated[Session, Depends(get_db)]) -> AuthService:
    """Get auth service dependency."""
    return get_auth_service(db)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserRegister,
    service: Annotated[AuthService, Depends(get_service)],
) -> RegisterResponse:
    """Register a new user.

    Args:
        data: Registration data.
        service: Auth service.

    Returns:
        RegisterResponse: Confirmation message and token pair.

    Raises:
        HTTPException: If the email is already registered.
    """
    try:
        _, token = service.register(data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return RegisterResponse(message="Registration successful.", token=token)


@router.post("/login", response_model=Token)
async def login(
    data: UserLogin,
    service: Annotated[AuthService, Depends(get_service)],
    response: Response,
) -> Token:
    """Login with email and password.

    Args:
        data: Login credentials.
        service: Auth service.
        response: FastAPI response object.

    Returns:
        Token: Access and refresh tokens.

    Raises:
        HTTPException: If credentials are invalid.
    """
    user, token, message = service.login(data)

    if not user or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    response.set_cookie(
        key="access_token",
        value=token.access_token,
        httponly=True,
        secure=False,  # Set to True in production
        samesite="lax",
        max_age=get_settings().access_token_expire_minutes * 60,
        path="/",
    )
    return token


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """Clear the access token cookie."""
    response.delete_cookie("access_token", path="/")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Get the current user's profile."""
    return UserResponse.model_validate(current_user)
