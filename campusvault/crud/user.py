"""User and session data access. Every function takes the caller's Session."""
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campusvault.core.config import settings
from campusvault.core.exceptions import DuplicateUserError
from campusvault.core.security import get_password_hash
from campusvault.models.user import User, UserSession, utcnow


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    full_name: str,
    year: int,
    branch: str,
    is_admin: bool = False,
) -> User:
    """Create a user; raises DuplicateUserError on a username or email clash"""
    if get_user_by_username(db, username):
        raise DuplicateUserError("Username already exists")
    if get_user_by_email(db, email):
        raise DuplicateUserError("Email already exists")

    user = User(
        username=username,
        email=email,
        password=get_password_hash(password),
        full_name=full_name,
        year=year,
        branch=branch,
        is_admin=is_admin,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.rollback()
        if db.query(User.id).filter(User.username == username).first():
            raise DuplicateUserError("Username already exists")
        raise DuplicateUserError("Email already exists")
    db.refresh(user)
    return user


def update_user(db: Session, user: User, **fields) -> User:
    """Apply non-None profile fields"""
    for key, value in fields.items():
        if value is not None:
            setattr(user, key, value)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


def update_user_password(db: Session, user: User, new_password: str) -> None:
    user.password = get_password_hash(new_password)
    user.updated_at = utcnow()
    db.commit()


# --- Sessions ---

def create_session(db: Session, user: User, expires_delta: Optional[timedelta] = None) -> UserSession:
    expires_delta = expires_delta or timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    session = UserSession(user_id=user.id, expires_at=utcnow() + expires_delta)
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_active_session(db: Session, session_id: str) -> Optional[UserSession]:
    return db.query(UserSession).filter(
        UserSession.id == session_id,
        UserSession.expires_at > utcnow()
    ).first()


def delete_session(db: Session, session_id: str) -> bool:
    deleted = db.query(UserSession).filter(UserSession.id == session_id).delete()
    db.commit()
    return deleted > 0


def purge_expired_sessions(db: Session) -> int:
    deleted = db.query(UserSession).filter(UserSession.expires_at <= utcnow()).delete()
    db.commit()
    return deleted
