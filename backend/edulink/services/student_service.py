"""
Service métier pour l'écran Élèves.

Visibilité (élèves de l'école de l'appelant) :
- admin        → tous
- enseignant   → tous, ou ceux d'une section (filtre facultatif)
- autres rôles → aucun

Affectation à une section (admin) : met à jour section et niveau du profil et inscrit
l'élève à chaque cours de la section (id d'inscription = id de l'élève), en une transaction.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.models.course import Course, Enrollment
from edulink.models.school import Section
from edulink.models.user import UserProfile
from edulink.schemas.academics import SectionResponse
from edulink.schemas.common import Notification
from edulink.schemas.student import SectionAssignResult
from edulink.schemas.user import ProfileResponse
from edulink.services.mutations import dispatch
from edulink.services.roles import Role, parse_role

logger = logging.getLogger(__name__)


def list_students(db: Session, viewer: UserProfile, section_id: Optional[str] = None) -> List[UserProfile]:
    role = parse_role(viewer.role)
    if role not in (Role.ADMIN, Role.TEACHER) or not viewer.school_id:
        return []

    query = select(UserProfile).where(
        UserProfile.school_id == viewer.school_id,
        UserProfile.role == Role.STUDENT.value,
    )
    if role == Role.TEACHER and section_id:
        query = query.where(UserProfile.section_id == section_id)

    return list(db.execute(
        query.order_by(UserProfile.last_name, UserProfile.first_name)
    ).scalars().all())


def list_selectable_sections(db: Session, viewer: UserProfile) -> List[SectionResponse]:
    """Sections proposées en filtre : celles des cours de l'enseignant, toutes pour les autres rôles."""
    if not viewer.school_id:
        return []

    query = select(Section).where(Section.school_id == viewer.school_id)
    if parse_role(viewer.role) == Role.TEACHER:
        teacher_sections = select(Course.section_id).where(
            Course.school_id == viewer.school_id,
            Course.teacher_id == viewer.id,
        )
        query = query.where(Section.id.in_(teacher_sections))

    sections = db.execute(query.order_by(Section.grade_name, Section.name)).scalars().all()
    return [SectionResponse.model_validate(s) for s in sections]


def assign_to_section(
    db: Session, student_id: str, section_id: str,
) -> Optional[Tuple[SectionAssignResult, Notification]]:
    """
    Affecte un élève à une section et l'inscrit à tous ses cours.
    None si l'élève est introuvable ; ValueError si la section est invalide ou sans cours.
    """
    student = db.get(UserProfile, student_id)
    if student is None or student.role != Role.STUDENT.value:
        return None

    section = db.get(Section, section_id)
    if section is None or section.school_id != student.school_id:
        raise ValueError("La section sélectionnée n'est pas valide.")

    course_ids = list(db.execute(
        select(Course.id).where(Course.section_id == section_id).order_by(Course.id)
    ).scalars().all())
    if not course_ids:
        raise ValueError("Cette section n'a aucun cours assigné. Assignez d'abord des cours.")

    def write():
        student.section_id = section.id
        student.grade_level_id = section.grade_level_id
        for course_id in course_ids:
            db.merge(Enrollment(course_id=course_id, id=student_id, student_id=student_id))
        return student

    student, notification = dispatch(
        db, write,
        title="Élève affecté",
        description=f"{student.first_name} a été inscrit aux cours de la section et mis à jour.",
        failure_title="Erreur d'affectation",
    )
    db.refresh(student)
    logger.info("Élève %s affecté à la section %s (%d cours)", student_id, section_id, len(course_ids))
    return SectionAssignResult(
        student=ProfileResponse.model_validate(student),
        enrolled_course_ids=course_ids,
    ), notification
