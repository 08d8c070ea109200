"""Account settings routes"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from newsroom.core.database import get_db
from newsroom.core.exceptions import ConfirmationMismatchError
from newsroom.schemas.response import APIResponse
from newsroom.schemas.user import (
    ACCOUNT_DELETE_CONFIRMATION,
    AccountDelete,
    PasswordChange,
    ProfileUpdate,
    UserResponse,
)
from newsroom.services.user_service import user_service
from newsroom.api.cookies import delete_session_cookie
from newsroom.api.deps import get_current_user
from newsroom.models.user import User

router = APIRouter()


@router.put("/profile", response_model=UserResponse)
def update_profile(
    profile: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update username, email, name, bio and profile picture

    Args:
        profile: New profile values
        current_user: Current authenticated user
        db: Database session

    Returns:
        Updated user
    """
    user = user_service.update_profile(db, current_user, profile)
    return UserResponse.from_orm(user)


@router.put("/password", response_model=APIResponse)
def change_password(
    body: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change password after re-entering the current one"""
    user_service.change_password(db, current_user, body.current_password, body.new_password)
    return APIResponse(message="Password updated successfully")


@router.delete("", response_model=APIResponse)
def delete_account(
    body: AccountDelete,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete the current account and all of its sessions

    The body must carry the typed confirmation text.
    """
    if body.confirm_text != ACCOUNT_DELETE_CONFIRMATION:
        raise ConfirmationMismatchError(ACCOUNT_DELETE_CONFIRMATION)

    user_service.delete_user(db, current_user)
    delete_session_cookie(response)
    return APIResponse(message="Account deleted")
