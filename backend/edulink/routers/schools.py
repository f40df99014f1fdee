"""
Router des écoles et de la corbeille (administrateur).
"""

from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.dependencies import require_admin
from edulink.schemas.common import MutationResponse, Notification
from edulink.schemas.school import SchoolCreate, SchoolResponse, SchoolUpdate
from edulink.services import school_service

router = APIRouter(prefix="/api/v1/schools", tags=["Écoles"], dependencies=[Depends(require_admin)])

SCHOOL_NOT_FOUND = "École introuvable."


@router.get("", response_model=List[SchoolResponse], summary="Lister les écoles")
def list_schools(status: Literal["active", "inactive"] = "active", db: Session = Depends(get_db)):
    """status=inactive → contenu de la corbeille."""
    return school_service.list_schools(db, status)


@router.post("", response_model=MutationResponse[SchoolResponse], status_code=201, summary="Créer une école")
def create_school(data: SchoolCreate, db: Session = Depends(get_db)):
    school, notification = school_service.create_school(db, data)
    return MutationResponse[SchoolResponse](data=school, notification=notification)


@router.put("/{school_id}", response_model=MutationResponse[SchoolResponse], summary="Modifier une école")
def update_school(school_id: str, data: SchoolUpdate, db: Session = Depends(get_db)):
    result = school_service.update_school(db, school_id, data)
    if result is None:
        raise HTTPException(status_code=404, detail=SCHOOL_NOT_FOUND)
    school, notification = result
    return MutationResponse[SchoolResponse](data=school, notification=notification)


@router.delete("/{school_id}", response_model=MutationResponse[SchoolResponse],
               summary="Déplacer une école vers la corbeille")
def soft_delete_school(school_id: str, db: Session = Depends(get_db)):
    try:
        result = school_service.soft_delete_school(db, school_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail=SCHOOL_NOT_FOUND)
    school, notification = result
    return MutationResponse[SchoolResponse](data=school, notification=notification)


@router.post("/{school_id}/restore", response_model=MutationResponse[SchoolResponse],
             summary="Restaurer une école")
def restore_school(school_id: str, db: Session = Depends(get_db)):
    try:
        result = school_service.restore_school(db, school_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail=SCHOOL_NOT_FOUND)
    school, notification = result
    return MutationResponse[SchoolResponse](data=school, notification=notification)


@router.delete("/{school_id}/permanent", response_model=Notification,
               summary="Supprimer définitivement une école")
def delete_school_permanently(school_id: str, db: Session = Depends(get_db)):
    """Uniquement depuis la corbeille (école inactive)."""
    try:
        notification = school_service.delete_school_permanently(db, school_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if notification is None:
        raise HTTPException(status_code=404, detail=SCHOOL_NOT_FOUND)
    return notification
