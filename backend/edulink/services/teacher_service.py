"""
Service métier pour l'écran Enseignants : liste avec nom d'école, détail avec cours,
modification (nom, prénom, école).
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.models.school import School, SchoolTeacher
from edulink.models.user import UserProfile
from edulink.schemas.common import Notification
from edulink.schemas.teacher import TeacherDetailResponse, TeacherResponse, TeacherUpdate
from edulink.services.course_service import get_teacher_courses
from edulink.services.mutations import dispatch
from edulink.services.roles import Role

logger = logging.getLogger(__name__)


def _school_names(db: Session) -> Dict[str, str]:
    return dict(db.execute(select(School.id, School.name)).all())


def _to_response(teacher: UserProfile, school_names: Dict[str, str]) -> TeacherResponse:
    return TeacherResponse(
        id=teacher.id,
        first_name=teacher.first_name,
        last_name=teacher.last_name,
        email=teacher.email,
        school_id=teacher.school_id,
        school_name=school_names.get(teacher.school_id),
    )


def get_teacher(db: Session, teacher_id: str) -> Optional[UserProfile]:
    """Profil enseignant, ou None si l'utilisateur n'existe pas ou n'est pas enseignant."""
    teacher = db.get(UserProfile, teacher_id)
    if teacher is None or teacher.role != Role.TEACHER.value:
        return None
    return teacher


def list_teachers(db: Session) -> List[TeacherResponse]:
    teachers = db.execute(
        select(UserProfile)
        .where(UserProfile.role == Role.TEACHER.value)
        .order_by(UserProfile.last_name, UserProfile.first_name)
    ).scalars().all()
    school_names = _school_names(db)
    return [_to_response(t, school_names) for t in teachers]


def get_teacher_detail(db: Session, teacher_id: str) -> Optional[TeacherDetailResponse]:
    teacher = get_teacher(db, teacher_id)
    if teacher is None:
        return None
    return TeacherDetailResponse(
        teacher=_to_response(teacher, _school_names(db)),
        courses=get_teacher_courses(db, teacher_id),
    )


def update_teacher(
    db: Session, teacher_id: str, data: TeacherUpdate,
) -> Optional[Tuple[TeacherResponse, Notification]]:
    """
    Met à jour le profil et, si l'école change, déplace le rattachement
    schools/{ancienne}/teachers → schools/{nouvelle}/teachers dans la même transaction.
    Lève ValueError si la nouvelle école n'existe pas ou n'est pas active.
    """
    teacher = get_teacher(db, teacher_id)
    if teacher is None:
        return None

    school = db.get(School, data.school_id)
    if school is None or school.status != "active":
        raise ValueError("École introuvable ou inactive.")

    old_school_id = teacher.school_id

    def write():
        teacher.first_name = data.first_name
        teacher.last_name = data.last_name
        teacher.school_id = data.school_id
        if old_school_id != data.school_id:
            if old_school_id:
                old_membership = db.get(SchoolTeacher, (old_school_id, teacher_id))
                if old_membership is not None:
                    db.delete(old_membership)
            db.merge(SchoolTeacher(school_id=data.school_id, teacher_id=teacher_id))
        return teacher

    teacher, notification = dispatch(
        db, write,
        title="Enseignant mis à jour",
        description=f"Les informations de {data.first_name} {data.last_name} ont été enregistrées.",
    )
    db.refresh(teacher)
    if old_school_id != data.school_id:
        logger.info("Enseignant %s déplacé de l'école %s vers %s", teacher_id, old_school_id, data.school_id)
    return _to_response(teacher, {school.id: school.name}), notification
