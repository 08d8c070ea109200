"""User service - handles registration, lookup and account settings"""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
from newsroom.models.user import User
from newsroom.schemas.user import UserRegister, ProfileUpdate
from newsroom.core.security import hash_password, verify_password
from newsroom.core.tokens import generate_id
from newsroom.core.exceptions import (
    InvalidCredentialsError,
    DuplicateEmailError,
    DuplicateUsernameError,
    ResourceAlreadyExistsError,
)
from newsroom.services.session_service import session_service
import logging

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _violated_column(exc: IntegrityError) -> Optional[str]:
    # First line only: it names the constraint, later lines may echo values.
    lines = str(exc.orig).lower().splitlines()
    first_line = lines[0] if lines else ""
    for column in ("email", "username"):
        if f"users.{column}" in first_line or f"users_{column}" in first_line:
            return column
    return None


class UserService:
    """Service for user management"""

    @staticmethod
    def _commit_unique(db: Session, username: str, email: str) -> None:
        """
        Commit relying on the username/email unique constraints.

        There is no check-then-insert: the store decides, and the violated
        column is read back from the driver message.
        """
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            column = _violated_column(exc)
            if column == "email":
                raise DuplicateEmailError(email) from exc
            if column == "username":
                raise DuplicateUsernameError(username) from exc
            raise ResourceAlreadyExistsError("User") from exc

    @staticmethod
    def create_user(db: Session, user_data: UserRegister) -> User:
        """
        Create new user

        Args:
            db: Database session
            user_data: Registration data

        Returns:
            Created user
        """
        username = user_data.username.strip()
        email = _normalize_email(user_data.email)

        user = User(
            id=generate_id(),
            username=username,
            email=email,
            full_name=user_data.full_name.strip(),
            password_hash=hash_password(user_data.password),
        )
        db.add(user)
        UserService._commit_unique(db, username, email)
        db.refresh(user)

        logger.info(f"Created user: {user.username}")
        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """Get user by username (case-sensitive)"""
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)"""
        return db.query(User).filter(func.lower(User.email) == _normalize_email(email)).first()

    @staticmethod
    def get_user_by_email_or_username(db: Session, identifier: str) -> Optional[User]:
        """Email match wins over username match"""
        user = UserService.get_user_by_email(db, identifier)
        if user:
            return user
        return UserService.get_user_by_username(db, identifier)

    @staticmethod
    def authenticate_user(db: Session, identifier: str, password: str) -> User:
        """
        Authenticate user by email or username

        Args:
            db: Database session
            identifier: Email or username
            password: Password

        Returns:
            Authenticated user

        Raises:
            InvalidCredentialsError: Unknown identifier or wrong password
        """
        user = UserService.get_user_by_email_or_username(db, identifier)

        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for identifier: {identifier}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated: {user.username}")
        return user

    @staticmethod
    def update_profile(db: Session, user: User, profile: ProfileUpdate) -> User:
        """
        Update public profile fields

        Args:
            db: Database session
            user: User to update
            profile: New profile values

        Returns:
            Updated user
        """
        username = profile.username.strip()
        email = _normalize_email(profile.email)

        user.username = username
        user.email = email
        user.full_name = profile.full_name.strip()
        user.about_me = profile.about_me
        user.profile_picture = profile.profile_picture

        UserService._commit_unique(db, username, email)
        db.refresh(user)

        logger.info(f"Updated profile for user: {user.id}")
        return user

    @staticmethod
    def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
        """
        Replace the password after checking the current one

        Raises:
            InvalidCredentialsError: Current password is wrong
        """
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        db.commit()

        logger.info(f"Password changed for user: {user.id}")

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        """
        Delete user and every session it owns

        Args:
            db: Database session
            user: User to delete
        """
        user_id = user.id
        username = user.username

        session_service.invalidate_user_sessions(db, user_id)
        db.delete(user)
        db.commit()

        logger.info(f"Deleted user: {username}")


# Singleton instance
user_service = UserService()
