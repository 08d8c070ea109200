"""Authentication routes"""

from fastapi import APIRouter, Depends, status, Request, Response
from sqlalchemy.orm import Session

from newsroom.core.clock import as_utc
from newsroom.core.database import get_db
from newsroom.core.security import hash_session_token
from newsroom.core.tokens import generate_session_token
from newsroom.schemas.response import APIResponse
from newsroom.schemas.user import (
    AuthResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from newsroom.services.user_service import user_service
from newsroom.services.session_service import session_service
from newsroom.services.login_throttle import login_throttle
from newsroom.api.cookies import delete_session_cookie, set_session_cookie
from newsroom.api.deps import get_current_user, get_session_token
from newsroom.models.user import User

router = APIRouter()


def _start_session(db: Session, response: Response, user: User) -> AuthResponse:
    token = generate_session_token()
    session = session_service.create_session(db, token, user.id)
    set_session_cookie(response, token, session.expires_at)
    return AuthResponse(user=UserResponse.from_orm(user), expires_at=as_utc(session.expires_at))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Register a new account and log it in

    Args:
        user_data: Registration form
        response: Response carrying the session cookie
        db: Database session

    Returns:
        Created user and session expiry
    """
    user = user_service.create_user(db, user_data)
    return _start_session(db, response, user)


@router.post("/login", response_model=AuthResponse, status_code=status.HTTP_200_OK)
def login(
    credentials: UserLogin,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Login endpoint - authenticate by email or username and set the session cookie

    Args:
        credentials: Identifier and password
        request: Incoming request, for the client address
        response: Response carrying the session cookie
        db: Database session

    Returns:
        Authenticated user and session expiry
    """
    client_ip = request.client.host if request.client else "unknown"
    login_throttle.check(credentials.identifier, client_ip)

    user = user_service.authenticate_user(db, credentials.identifier, credentials.password)
    return _start_session(db, response, user)


@router.post("/logout", response_model=APIResponse, status_code=status.HTTP_200_OK)
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Logout endpoint - delete the server-side session and clear the cookie

    Succeeds whether or not the cookie names a live session.
    """
    token = get_session_token(request)
    if token:
        session_service.invalidate_session(db, hash_session_token(token))
    delete_session_cookie(response)

    return APIResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Get current user information

    Args:
        current_user: Current authenticated user

    Returns:
        User information
    """
    return UserResponse.from_orm(current_user)
