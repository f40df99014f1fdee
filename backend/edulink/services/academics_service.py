"""
Service métier pour la structure pédagogique d'une école (écran Académique).

Entités : matières, niveaux, sections (nom du niveau dénormalisé) et cours
(assignation matière + enseignant à une section, noms dénormalisés).

Suppressions bloquées tant qu'une référence existe :
- matière utilisée par un cours
- niveau qui contient des sections
- section qui contient des cours
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.database import new_id
from edulink.models.course import Course
from edulink.models.school import GradeLevel, School, SchoolTeacher, Section, Subject
from edulink.models.user import UserProfile
from edulink.schemas.academics import (
    CourseAssignment,
    GradeLevelCreate,
    GradeLevelResponse,
    SectionCreate,
    SectionResponse,
    SubjectCreate,
    SubjectResponse,
)
from edulink.schemas.common import Notification
from edulink.schemas.course import CourseResponse
from edulink.services.course_service import to_response
from edulink.services.mutations import dispatch

logger = logging.getLogger(__name__)


def _require_school(db: Session, school_id: str) -> School:
    school = db.get(School, school_id)
    if school is None:
        raise LookupError("École introuvable.")
    return school


def _owned(db: Session, model, school_id: str, entity_id: str):
    """Entité de l'école, ou None si elle n'existe pas ou appartient à une autre école."""
    entity = db.get(model, entity_id)
    if entity is None or entity.school_id != school_id:
        return None
    return entity


def _is_referenced(db: Session, column, value: str) -> bool:
    return db.execute(select(column).where(column == value).limit(1)).first() is not None


def _add(db: Session, entity):
    def write():
        db.add(entity)
        db.flush()
        return entity
    return write


# ---------------------------------------------------------------------------
# Matières
# ---------------------------------------------------------------------------

def list_subjects(db: Session, school_id: str) -> List[SubjectResponse]:
    subjects = db.execute(
        select(Subject).where(Subject.school_id == school_id).order_by(Subject.name)
    ).scalars().all()
    return [SubjectResponse.model_validate(s) for s in subjects]


def create_subject(db: Session, school_id: str, data: SubjectCreate) -> Tuple[SubjectResponse, Notification]:
    """Lève LookupError si l'école n'existe pas."""
    _require_school(db, school_id)
    subject, notification = dispatch(
        db, _add(db, Subject(id=new_id(), school_id=school_id, name=data.name)),
        title="Matière créée",
        description=f"La matière « {data.name} » a été ajoutée.",
    )
    db.refresh(subject)
    return SubjectResponse.model_validate(subject), notification


def delete_subject(db: Session, school_id: str, subject_id: str) -> Optional[Notification]:
    subject = _owned(db, Subject, school_id, subject_id)
    if subject is None:
        return None
    if _is_referenced(db, Course.subject_id, subject_id):
        raise ValueError("Impossible de supprimer cette matière : elle est utilisée par des cours.")

    _, notification = dispatch(db, lambda: db.delete(subject), title="Matière supprimée")
    logger.info("Matière supprimée : %s (école %s)", subject_id, school_id)
    return notification


# ---------------------------------------------------------------------------
# Niveaux
# ---------------------------------------------------------------------------

def list_grade_levels(db: Session, school_id: str) -> List[GradeLevelResponse]:
    levels = db.execute(
        select(GradeLevel).where(GradeLevel.school_id == school_id).order_by(GradeLevel.name)
    ).scalars().all()
    return [GradeLevelResponse.model_validate(g) for g in levels]


def create_grade_level(
    db: Session, school_id: str, data: GradeLevelCreate,
) -> Tuple[GradeLevelResponse, Notification]:
    _require_school(db, school_id)
    level, notification = dispatch(
        db, _add(db, GradeLevel(id=new_id(), school_id=school_id, name=data.name)),
        title="Niveau créé",
        description=f"Le niveau « {data.name} » a été ajouté.",
    )
    db.refresh(level)
    return GradeLevelResponse.model_validate(level), notification


def delete_grade_level(db: Session, school_id: str, grade_level_id: str) -> Optional[Notification]:
    level = _owned(db, GradeLevel, school_id, grade_level_id)
    if level is None:
        return None
    if _is_referenced(db, Section.grade_level_id, grade_level_id):
        raise ValueError("Impossible de supprimer ce niveau : il contient des sections.")

    _, notification = dispatch(db, lambda: db.delete(level), title="Niveau supprimé")
    logger.info("Niveau supprimé : %s (école %s)", grade_level_id, school_id)
    return notification


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def list_sections(db: Session, school_id: str) -> List[SectionResponse]:
    sections = db.execute(
        select(Section)
        .where(Section.school_id == school_id)
        .order_by(Section.grade_name, Section.name)
    ).scalars().all()
    return [SectionResponse.model_validate(s) for s in sections]


def create_section(db: Session, school_id: str, data: SectionCreate) -> Tuple[SectionResponse, Notification]:
    """Le niveau doit appartenir à l'école ; son nom est copié sur la section."""
    _require_school(db, school_id)
    level = _owned(db, GradeLevel, school_id, data.grade_level_id)
    if level is None:
        raise ValueError("Niveau introuvable pour cette école.")

    section, notification = dispatch(
        db,
        _add(db, Section(
            id=new_id(),
            school_id=school_id,
            grade_level_id=level.id,
            grade_name=level.name,
            name=data.name,
        )),
        title="Section créée",
        description=f"La section « {level.name} {data.name} » a été ajoutée.",
    )
    db.refresh(section)
    return SectionResponse.model_validate(section), notification


def delete_section(db: Session, school_id: str, section_id: str) -> Optional[Notification]:
    section = _owned(db, Section, school_id, section_id)
    if section is None:
        return None
    if _is_referenced(db, Course.section_id, section_id):
        raise ValueError("Impossible de supprimer cette section : des cours y sont assignés.")

    _, notification = dispatch(db, lambda: db.delete(section), title="Section supprimée")
    logger.info("Section supprimée : %s (école %s)", section_id, school_id)
    return notification


# ---------------------------------------------------------------------------
# Cours
# ---------------------------------------------------------------------------

def list_school_courses(db: Session, school_id: str, section_id: Optional[str] = None) -> List[CourseResponse]:
    query = select(Course).where(Course.school_id == school_id)
    if section_id:
        query = query.where(Course.section_id == section_id)
    courses = db.execute(query.order_by(Course.section_name, Course.subject_name)).scalars().all()
    return [to_response(c) for c in courses]


def assign_course(
    db: Session, school_id: str, section_id: str, data: CourseAssignment,
) -> Tuple[CourseResponse, Notification]:
    """
    Crée le cours (matière, enseignant, horaire) d'une section.
    Lève ValueError si la section ou la matière n'appartient pas à l'école,
    ou si l'enseignant n'y est pas rattaché.
    """
    _require_school(db, school_id)
    section = _owned(db, Section, school_id, section_id)
    if section is None:
        raise ValueError("Section introuvable pour cette école.")
    subject = _owned(db, Subject, school_id, data.subject_id)
    if subject is None:
        raise ValueError("Matière introuvable pour cette école.")

    membership = db.get(SchoolTeacher, (school_id, data.teacher_id))
    teacher = db.get(UserProfile, data.teacher_id)
    if membership is None or teacher is None:
        raise ValueError("Cet enseignant n'est pas rattaché à l'école.")

    course = Course(
        id=new_id(),
        school_id=school_id,
        subject_id=subject.id,
        subject_name=subject.name,
        section_id=section.id,
        section_name=section.name,
        grade_name=section.grade_name,
        teacher_id=teacher.id,
        teacher_name=f"{teacher.first_name} {teacher.last_name}",
        schedule=data.schedule,
    )
    course, notification = dispatch(
        db, _add(db, course),
        title="Cours assigné",
        description=f"{subject.name} a été assigné à {teacher.first_name} {teacher.last_name}.",
    )
    db.refresh(course)
    logger.info("Cours créé : %s (section %s, enseignant %s)", course.id, section.id, teacher.id)
    return to_response(course), notification


def delete_course(db: Session, school_id: str, course_id: str) -> Optional[Notification]:
    """Supprime le cours avec ses inscriptions, présences et tâches (cascade)."""
    course = _owned(db, Course, school_id, course_id)
    if course is None:
        return None

    _, notification = dispatch(db, lambda: db.delete(course), title="Cours supprimé")
    logger.info("Cours supprimé : %s (école %s)", course_id, school_id)
    return notification
