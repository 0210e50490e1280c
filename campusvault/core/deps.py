from typing import Optional
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from campusvault.core.config import settings
from campusvault.core.database import get_db
from campusvault.core.exceptions import AuthError, ForbiddenError
from campusvault.core.security import decode_access_token
from campusvault.crud import user as user_crud
from campusvault.models.user import User, UserSession


oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/login", auto_error=False)


def get_session_token(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme_optional)
) -> Optional[str]:
    """Bearer header first, then the session cookie"""
    return token or request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_optional_session(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(get_session_token)
) -> Optional[UserSession]:
    """Resolve the server-side session behind a token (None when absent or invalid)"""
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    session_id = payload.get("sid")
    user_id = payload.get("sub")
    if not session_id or not user_id:
        return None

    session = user_crud.get_active_session(db, session_id)
    if session is None or session.user_id != user_id:
        return None
    return session


def get_current_user(
    session: Optional[UserSession] = Depends(get_optional_session)
) -> User:
    if session is None or session.user is None:
        raise AuthError("Unauthorized")
    return session.user


def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_admin:
        raise ForbiddenError("Admin privileges required")
    return current_user


def ensure_self_or_admin(current_user: User, user_id: str) -> None:
    """Per-user routes are limited to the user themself (admins may read anyone)"""
    if current_user.id != user_id and not current_user.is_admin:
        raise ForbiddenError("Forbidden")
