"""
Router de l'écran Enseignants (administrateur).
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.dependencies import require_admin
from edulink.schemas.common import MutationResponse
from edulink.schemas.teacher import TeacherDetailResponse, TeacherResponse, TeacherUpdate
from edulink.services import teacher_service

router = APIRouter(prefix="/api/v1/teachers", tags=["Enseignants"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[TeacherResponse], summary="Lister les enseignants")
def list_teachers(db: Session = Depends(get_db)):
    return teacher_service.list_teachers(db)


@router.get("/{teacher_id}", response_model=TeacherDetailResponse, summary="Détail d'un enseignant")
def get_teacher(teacher_id: str, db: Session = Depends(get_db)):
    detail = teacher_service.get_teacher_detail(db, teacher_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Enseignant introuvable.")
    return detail


@router.put("/{teacher_id}", response_model=MutationResponse[TeacherResponse], summary="Modifier un enseignant")
def update_teacher(teacher_id: str, data: TeacherUpdate, db: Session = Depends(get_db)):
    """Un changement d'école déplace aussi le rattachement de l'enseignant."""
    try:
        result = teacher_service.update_teacher(db, teacher_id, data)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail="Enseignant introuvable.")
    teacher, notification = result
    return MutationResponse[TeacherResponse](data=teacher, notification=notification)
