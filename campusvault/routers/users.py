import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusvault.core.database import get_db
from campusvault.core.deps import get_current_user, ensure_self_or_admin
from campusvault.core.exceptions import ForbiddenError, ValidationError
from campusvault.core.security import verify_password
from campusvault.crud import resource as resource_crud
from campusvault.crud import user as user_crud
from campusvault.crud.subject import canonical_branch
from campusvault.models.user import User
from campusvault.schemas.common import ResponseModel
from campusvault.schemas.user import UserInfo, UserUpdate, PasswordChange, UserStats


router = APIRouter(tags=["Users"])
logger = logging.getLogger(__name__)


@router.get("/stats/{user_id}", response_model=ResponseModel[UserStats])
def get_stats(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Upload / download counts of a user"""
    ensure_self_or_admin(current_user, user_id)
    return ResponseModel(code=200, data=UserStats(**resource_crud.get_user_stats(db, user_id)))


@router.put("/user/{user_id}", response_model=ResponseModel[UserInfo])
def update_profile(
    user_id: str,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update full name / year / branch"""
    if current_user.id != user_id:
        raise ForbiddenError("Forbidden")

    branch = canonical_branch(user_data.branch) if user_data.branch is not None else None
    user = user_crud.update_user(
        db,
        current_user,
        full_name=user_data.full_name,
        year=user_data.year,
        branch=branch,
    )
    return ResponseModel(code=200, data=UserInfo.model_validate(user), msg="Profile updated")


@router.put("/user/{user_id}/password", response_model=ResponseModel)
def change_password(
    user_id: str,
    password_data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Change password (current password required)"""
    if current_user.id != user_id:
        raise ForbiddenError("Forbidden")

    if not verify_password(password_data.current_password, current_user.password):
        raise ValidationError("Current password is incorrect")

    user_crud.update_user_password(db, current_user, password_data.new_password)
    logger.info(f"Password changed for user: {current_user.username}")
    return ResponseModel(code=200, msg="Password updated")
