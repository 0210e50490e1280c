from datetime import timedelta
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from campusvault.core.config import settings
from campusvault.core.database import get_db
from campusvault.core.deps import get_current_user, get_optional_session
from campusvault.core.exceptions import AuthError
from campusvault.core.security import verify_password, create_access_token
from campusvault.crud import user as user_crud
from campusvault.crud.subject import canonical_branch
from campusvault.models.user import User, UserSession
from campusvault.schemas.common import ResponseModel
from campusvault.schemas.user import UserRegister, UserLogin, UserInfo, Token

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


def start_session(db: Session, user: User, response: Response) -> Token:
    """Create a server-side session and hand its token to the client (body + cookie)"""
    expires = timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    session = user_crud.create_session(db, user, expires)
    token = create_access_token(
        data={"sub": user.id, "sid": session.id},
        expires_delta=expires
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(expires.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return Token(token=token, user_info=UserInfo.model_validate(user))


@router.post("/register", response_model=ResponseModel[Token], status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, response: Response, db: Session = Depends(get_db)):
    """Register and log in"""
    user = user_crud.create_user(
        db,
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
        full_name=user_data.full_name,
        year=user_data.year,
        branch=canonical_branch(user_data.branch),
    )
    logger.info(f"User registered: {user.username}")

    return ResponseModel(code=201, data=start_session(db, user, response), msg="Registration successful")


@router.post("/login", response_model=ResponseModel[Token])
def login(user_data: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Log in with username and password"""
    user = user_crud.get_user_by_username(db, user_data.username)
    if not user or not verify_password(user_data.password, user.password):
        logger.warning(f"Login failed for user: {user_data.username}")
        raise AuthError("Invalid username or password")

    logger.info(f"User logged in: {user.username}")
    return ResponseModel(code=200, data=start_session(db, user, response), msg="Login successful")


@router.post("/logout", response_model=ResponseModel)
def logout(
    response: Response,
    session: Optional[UserSession] = Depends(get_optional_session),
    db: Session = Depends(get_db)
):
    """Destroy the current session"""
    if session is not None:
        user_crud.delete_session(db, session.id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return ResponseModel(code=200, msg="Logged out")


@router.get("/user", response_model=ResponseModel[UserInfo])
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Current logged-in user"""
    return ResponseModel(code=200, data=UserInfo.model_validate(current_user))
