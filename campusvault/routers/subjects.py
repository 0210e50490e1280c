from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from campusvault.core.database import get_db
from campusvault.core.deps import get_current_admin
from campusvault.core.exceptions import NotFoundError
from campusvault.crud import subject as subject_crud
from campusvault.models.user import User
from campusvault.schemas.common import ResponseModel
from campusvault.schemas.subject import SubjectCreate, SubjectUpdate, SubjectResponse


router = APIRouter(tags=["Subjects"])


@router.get("/subjects/{year}/{semester}", response_model=ResponseModel[List[SubjectResponse]])
def get_subjects(
    year: int = Path(..., ge=1, le=4),
    semester: int = Path(..., ge=1, le=2),
    branch: Optional[str] = Query(None, description="Defaults to the configured default branch"),
    db: Session = Depends(get_db)
):
    """Subjects for a year / semester / branch"""
    subjects = subject_crud.list_subjects(db, year, semester, branch)
    return ResponseModel(code=200, data=[SubjectResponse.model_validate(s) for s in subjects])


@router.get("/subjects", response_model=ResponseModel[List[SubjectResponse]])
def get_all_subjects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """All subjects (admin)"""
    subjects = subject_crud.list_all_subjects(db)
    return ResponseModel(code=200, data=[SubjectResponse.model_validate(s) for s in subjects])


@router.get("/subject/{id}", response_model=ResponseModel[SubjectResponse])
def get_subject(id: str, db: Session = Depends(get_db)):
    subject = subject_crud.get_subject(db, id)
    if not subject:
        raise NotFoundError("Subject not found")
    return ResponseModel(code=200, data=SubjectResponse.model_validate(subject))


@router.post("/subjects", response_model=ResponseModel[SubjectResponse], status_code=status.HTTP_201_CREATED)
def create_subject(
    subject_in: SubjectCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Create a subject (admin). An identical existing subject is returned instead of a duplicate."""
    subject, created = subject_crud.create_subject(db, **subject_in.model_dump())
    if not created:
        response.status_code = status.HTTP_200_OK
        return ResponseModel(code=200, data=SubjectResponse.model_validate(subject), msg="Subject already exists")
    return ResponseModel(code=201, data=SubjectResponse.model_validate(subject), msg="Subject created")


@router.put("/subjects/{id}", response_model=ResponseModel[SubjectResponse])
def update_subject(
    id: str,
    subject_in: SubjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Update name / code / icon (admin)"""
    subject = subject_crud.update_subject(db, id, **subject_in.model_dump(exclude_unset=True))
    return ResponseModel(code=200, data=SubjectResponse.model_validate(subject), msg="Subject updated")


@router.delete("/subjects/{id}", response_model=ResponseModel)
def delete_subject(
    id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Delete a subject with no resources (admin)"""
    subject_crud.delete_subject(db, id)
    return ResponseModel(code=200, msg="Subject deleted")
