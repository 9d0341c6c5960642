"""Sign-up, sign-in and session routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import AuthResponse, SignInRequest, SignUpRequest, SuccessResponse, UserProfileResponse
from ..services import (
    authenticate_user,
    clear_session_cookie,
    create_access_token,
    get_current_user,
    register_user,
    set_session_cookie,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/sign-up", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def sign_up_endpoint(
    payload: SignUpRequest,
    response: Response,
    db: Session = Depends(get_session),
) -> AuthResponse:
    user, token = register_user(db, payload)
    set_session_cookie(response, token)
    return AuthResponse(access_token=token, user_id=user.id)


@router.post("/sign-in", response_model=AuthResponse)
async def sign_in_endpoint(
    payload: SignInRequest,
    response: Response,
    db: Session = Depends(get_session),
) -> AuthResponse:
    user = authenticate_user(db, str(payload.email), payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token(user.id)
    set_session_cookie(response, token)
    return AuthResponse(access_token=token, user_id=user.id)


@router.post("/sign-out", response_model=SuccessResponse)
async def sign_out_endpoint(response: Response) -> SuccessResponse:
    clear_session_cookie(response)
    return SuccessResponse()


@router.get("/me", response_model=UserProfileResponse)
async def me_endpoint(current_user: User = Depends(get_current_user)) -> UserProfileResponse:
    return UserProfileResponse.model_validate(current_user)
