"""
Router de l'écran Élèves : liste selon le rôle, sections filtrables, affectation à une section.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.dependencies import require_admin, require_roles
from edulink.models.user import UserProfile
from edulink.schemas.academics import SectionResponse
from edulink.schemas.common import MutationResponse
from edulink.schemas.student import SectionAssign, SectionAssignResult
from edulink.schemas.user import ProfileResponse
from edulink.services import student_service
from edulink.services.roles import Role

router = APIRouter(prefix="/api/v1/students", tags=["Élèves"])

require_students_viewer = require_roles(Role.ADMIN, Role.TEACHER, Role.PARENT)


@router.get("", response_model=List[ProfileResponse], summary="Lister les élèves de l'école")
def list_students(
    section_id: Optional[str] = None,
    profile: UserProfile = Depends(require_students_viewer),
    db: Session = Depends(get_db),
):
    """Admin : tous les élèves de l'école. Enseignant : filtre facultatif par section. Autres : aucun."""
    return student_service.list_students(db, profile, section_id)


@router.get("/sections", response_model=List[SectionResponse], summary="Sections proposées en filtre")
def list_sections(profile: UserProfile = Depends(require_students_viewer), db: Session = Depends(get_db)):
    return student_service.list_selectable_sections(db, profile)


@router.put("/{student_id}/section", response_model=MutationResponse[SectionAssignResult],
            summary="Affecter un élève à une section", dependencies=[Depends(require_admin)])
def assign_to_section(student_id: str, data: SectionAssign, db: Session = Depends(get_db)):
    """Met à jour section et niveau, puis inscrit l'élève à tous les cours de la section."""
    try:
        result = student_service.assign_to_section(db, student_id, data.section_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail="Élève introuvable.")
    assignment, notification = result
    return MutationResponse[SectionAssignResult](data=assignment, notification=notification)
