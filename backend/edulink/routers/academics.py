"""
Router de l'écran Académique : matières, niveaux, sections et cours d'une école.
Lecture pour tout utilisateur connecté, écriture réservée aux administrateurs et directeurs.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.dependencies import get_current_profile, require_manager
from edulink.schemas.academics import (
    CourseAssignment,
    GradeLevelCreate,
    GradeLevelResponse,
    SectionCreate,
    SectionResponse,
    SubjectCreate,
    SubjectResponse,
)
from edulink.schemas.common import MutationResponse, Notification
from edulink.schemas.course import CourseResponse
from edulink.schemas.user import ProfileResponse
from edulink.services import academics_service
from edulink.services.collection_joiner import school_teachers

router = APIRouter(
    prefix="/api/v1/schools/{school_id}",
    tags=["Académique"],
    dependencies=[Depends(get_current_profile)],
)


def _delete(result: Optional[Notification], not_found: str) -> Notification:
    if result is None:
        raise HTTPException(status_code=404, detail=not_found)
    return result


# --- Matières ---

@router.get("/subjects", response_model=List[SubjectResponse], summary="Lister les matières")
def list_subjects(school_id: str, db: Session = Depends(get_db)):
    return academics_service.list_subjects(db, school_id)


@router.post("/subjects", response_model=MutationResponse[SubjectResponse], status_code=201,
             summary="Créer une matière", dependencies=[Depends(require_manager)])
def create_subject(school_id: str, data: SubjectCreate, db: Session = Depends(get_db)):
    try:
        subject, notification = academics_service.create_subject(db, school_id, data)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MutationResponse[SubjectResponse](data=subject, notification=notification)


@router.delete("/subjects/{subject_id}", response_model=Notification,
               summary="Supprimer une matière", dependencies=[Depends(require_manager)])
def delete_subject(school_id: str, subject_id: str, db: Session = Depends(get_db)):
    """Bloqué si la matière est utilisée par un cours."""
    try:
        result = academics_service.delete_subject(db, school_id, subject_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _delete(result, "Matière introuvable.")


# --- Niveaux ---

@router.get("/grade-levels", response_model=List[GradeLevelResponse], summary="Lister les niveaux")
def list_grade_levels(school_id: str, db: Session = Depends(get_db)):
    return academics_service.list_grade_levels(db, school_id)


@router.post("/grade-levels", response_model=MutationResponse[GradeLevelResponse], status_code=201,
             summary="Créer un niveau", dependencies=[Depends(require_manager)])
def create_grade_level(school_id: str, data: GradeLevelCreate, db: Session = Depends(get_db)):
    try:
        level, notification = academics_service.create_grade_level(db, school_id, data)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MutationResponse[GradeLevelResponse](data=level, notification=notification)


@router.delete("/grade-levels/{grade_level_id}", response_model=Notification,
               summary="Supprimer un niveau", dependencies=[Depends(require_manager)])
def delete_grade_level(school_id: str, grade_level_id: str, db: Session = Depends(get_db)):
    """Bloqué si le niveau contient des sections."""
    try:
        result = academics_service.delete_grade_level(db, school_id, grade_level_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _delete(result, "Niveau introuvable.")


# --- Sections ---

@router.get("/sections", response_model=List[SectionResponse], summary="Lister les sections")
def list_sections(school_id: str, db: Session = Depends(get_db)):
    return academics_service.list_sections(db, school_id)


@router.post("/sections", response_model=MutationResponse[SectionResponse], status_code=201,
             summary="Créer une section", dependencies=[Depends(require_manager)])
def create_section(school_id: str, data: SectionCreate, db: Session = Depends(get_db)):
    try:
        section, notification = academics_service.create_section(db, school_id, data)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MutationResponse[SectionResponse](data=section, notification=notification)


@router.delete("/sections/{section_id}", response_model=Notification,
               summary="Supprimer une section", dependencies=[Depends(require_manager)])
def delete_section(school_id: str, section_id: str, db: Session = Depends(get_db)):
    """Bloqué si des cours sont assignés à la section."""
    try:
        result = academics_service.delete_section(db, school_id, section_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _delete(result, "Section introuvable.")


# --- Cours ---

@router.get("/courses", response_model=List[CourseResponse], summary="Lister les cours de l'école")
def list_courses(school_id: str, section_id: Optional[str] = None, db: Session = Depends(get_db)):
    return academics_service.list_school_courses(db, school_id, section_id)


@router.post("/sections/{section_id}/courses", response_model=MutationResponse[CourseResponse],
             status_code=201, summary="Assigner un cours", dependencies=[Depends(require_manager)])
def assign_course(school_id: str, section_id: str, data: CourseAssignment, db: Session = Depends(get_db)):
    """Matière et enseignant de l'école, horaire libre. Les noms sont copiés sur le cours."""
    try:
        course, notification = academics_service.assign_course(db, school_id, section_id, data)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MutationResponse[CourseResponse](data=course, notification=notification)


@router.delete("/courses/{course_id}", response_model=Notification,
               summary="Supprimer un cours", dependencies=[Depends(require_manager)])
def delete_course(school_id: str, course_id: str, db: Session = Depends(get_db)):
    return _delete(academics_service.delete_course(db, school_id, course_id), "Cours introuvable.")


# --- Enseignants rattachés ---

@router.get("/teachers", response_model=List[ProfileResponse], summary="Enseignants de l'école")
def list_school_teachers(school_id: str, db: Session = Depends(get_db)):
    """Profils résolus par lot (au plus PROFILE_BATCH_LIMIT)."""
    return school_teachers(db, school_id)
