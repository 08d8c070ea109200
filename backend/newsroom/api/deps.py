"""API dependencies - session cookie authentication"""

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session
from typing import Optional

from newsroom.api.cookies import delete_session_cookie, set_session_cookie
from newsroom.config import settings
from newsroom.core.database import get_db
from newsroom.core.exceptions import SessionRequiredError
from newsroom.models.user import User
from newsroom.services.session_service import (
    EMPTY_RESULT,
    SessionValidationResult,
    session_service,
)


def get_session_token(request: Request) -> Optional[str]:
    """Raw session token from the request cookie, if any"""
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def get_session_context(
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
) -> SessionValidationResult:
    """
    Validate the session cookie and keep the cookie in step with the store

    A valid session re-sends the cookie with the (possibly renewed) expiry;
    an unknown or expired one clears it. Validation itself may delete or
    renew the stored session.

    Args:
        request: Incoming request
        response: Outgoing response, for cookie headers
        db: Database session

    Returns:
        ``(session, user)`` or ``(None, None)``
    """
    token = get_session_token(request)
    if not token:
        return EMPTY_RESULT

    result = session_service.validate_session_token(db, token)
    if result.session is None:
        delete_session_cookie(response)
        # Error responses are built fresh; the handlers re-apply this state.
        request.state.session_cookie = None
        return EMPTY_RESULT

    set_session_cookie(response, token, result.session.expires_at)
    request.state.session_cookie = (token, result.session.expires_at)
    return result


def get_current_user(
    context: SessionValidationResult = Depends(get_session_context)
) -> User:
    """
    Get current authenticated user from the session cookie

    Raises:
        SessionRequiredError: If there is no valid session
    """
    if context.user is None:
        raise SessionRequiredError()
    return context.user
