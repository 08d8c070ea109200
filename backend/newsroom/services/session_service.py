"""Server-side session lifecycle: creation, sliding renewal and invalidation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import NamedTuple, Optional

from sqlalchemy.orm import Session

from newsroom.config import settings
from newsroom.core.clock import as_utc, utcnow
from newsroom.core.security import hash_session_token
from newsroom.models.session import UserSession
from newsroom.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionPolicy:
    """How long a session lives and when a validation pushes its expiry out."""

    lifetime: timedelta
    renewal_threshold: timedelta

    def __post_init__(self) -> None:
        if self.lifetime <= timedelta(0) or self.renewal_threshold <= timedelta(0):
            raise ValueError("Session lifetime and renewal threshold must be positive")
        if self.renewal_threshold > self.lifetime:
            raise ValueError("Renewal threshold cannot exceed session lifetime")

    @classmethod
    def from_settings(cls) -> "SessionPolicy":
        return cls(
            lifetime=settings.session_lifetime(),
            renewal_threshold=settings.session_renewal_threshold(),
        )


class SessionValidationResult(NamedTuple):
    session: Optional[UserSession]
    user: Optional[User]


EMPTY_RESULT = SessionValidationResult(None, None)


class SessionService:
    """Manage session rows keyed by the digest of the client's token."""

    def __init__(self, policy: Optional[SessionPolicy] = None) -> None:
        self.policy = policy or SessionPolicy.from_settings()

    def create_session(
        self,
        db: Session,
        token: str,
        user_id: str,
        *,
        now: Optional[datetime] = None,
    ) -> UserSession:
        now = as_utc(now) if now else utcnow()
        session = UserSession(
            id=hash_session_token(token),
            user_id=user_id,
            expires_at=now + self.policy.lifetime,
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        logger.info(f"Session created for user {user_id}")
        return session

    def validate_session_token(
        self,
        db: Session,
        token: str,
        *,
        now: Optional[datetime] = None,
    ) -> SessionValidationResult:
        """
        Resolve a client token to its session and owner.

        Not a pure read: an expired session is deleted, and a session inside
        the renewal window gets its expiry moved to ``now + lifetime``. Both
        writes are committed before returning.

        Args:
            db: Database session
            token: Raw token from the client
            now: Clock override, mostly for tests

        Returns:
            SessionValidationResult: ``(session, user)`` or ``(None, None)``
        """
        now = as_utc(now) if now else utcnow()
        session_id = hash_session_token(token)

        row = (
            db.query(UserSession, User)
            .join(User, UserSession.user_id == User.id)
            .filter(UserSession.id == session_id)
            .first()
        )
        if not row:
            return EMPTY_RESULT
        session, user = row
        user_id = user.id

        expires_at = as_utc(session.expires_at)
        if now >= expires_at:
            db.delete(session)
            db.commit()
            logger.info(f"Expired session removed for user {user_id}")
            return EMPTY_RESULT

        if now >= expires_at - self.policy.renewal_threshold:
            # Concurrent renewals of one session are last-write-wins.
            session.expires_at = now + self.policy.lifetime
            db.commit()
            logger.debug(f"Session renewed for user {user_id}")

        return SessionValidationResult(session, user)

    @staticmethod
    def get_session(db: Session, session_id: str) -> Optional[UserSession]:
        return db.get(UserSession, session_id)

    @staticmethod
    def invalidate_session(db: Session, session_id: str) -> None:
        """Delete one session; unknown ids are ignored."""
        deleted = db.query(UserSession).filter(UserSession.id == session_id).delete(
            synchronize_session=False
        )
        db.commit()
        if deleted:
            logger.info("Session invalidated")

    @staticmethod
    def invalidate_user_sessions(db: Session, user_id: str) -> int:
        deleted = db.query(UserSession).filter(UserSession.user_id == user_id).delete(
            synchronize_session=False
        )
        db.commit()
        logger.info(f"Invalidated {deleted} session(s) for user {user_id}")
        return deleted

    @staticmethod
    def purge_expired_sessions(db: Session, *, now: Optional[datetime] = None) -> int:
        """Delete sessions that expired without ever being presented again."""
        now = as_utc(now) if now else utcnow()
        deleted = db.query(UserSession).filter(UserSession.expires_at <= now).delete(
            synchronize_session=False
        )
        db.commit()
        logger.info(f"Purged {deleted} expired session(s)")
        return deleted


session_service = SessionService()
