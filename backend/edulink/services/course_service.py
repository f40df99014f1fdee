"""
Service métier pour les cours : détail avec décision de gestion, élèves inscrits,
cours d'un enseignant ou d'un élève.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.models.course import Course, Enrollment
from edulink.models.user import UserProfile
from edulink.schemas.course import (
    CourseDetailResponse,
    CourseResponse,
    CourseStudent,
    CourseStudentsResponse,
)
from edulink.services.collection_joiner import course_students
from edulink.services.roles import can_manage_course

logger = logging.getLogger(__name__)


def course_title(subject_name: str, grade_name: Optional[str], section_name: Optional[str]) -> str:
    """Titre affiché : « Matière - Niveau Section » (niveau omis s'il est inconnu)."""
    suffix = " ".join(part for part in (grade_name, section_name) if part)
    return f"{subject_name} - {suffix}" if suffix else subject_name


def to_response(course: Course) -> CourseResponse:
    return CourseResponse(
        id=course.id,
        school_id=course.school_id,
        subject_id=course.subject_id,
        subject_name=course.subject_name,
        section_id=course.section_id,
        section_name=course.section_name,
        grade_name=course.grade_name,
        teacher_id=course.teacher_id,
        teacher_name=course.teacher_name,
        schedule=course.schedule,
        title=course_title(course.subject_name, course.grade_name, course.section_name),
    )


def get_course(db: Session, course_id: str) -> Optional[Course]:
    return db.get(Course, course_id)


def user_can_manage(profile: UserProfile, course: Course) -> bool:
    return can_manage_course(profile.role, profile.id, course.teacher_id)


def get_course_detail(db: Session, course_id: str, profile: UserProfile) -> Optional[CourseDetailResponse]:
    """Détail d'un cours et droit de gestion de l'appelant. None si le cours est introuvable."""
    course = get_course(db, course_id)
    if course is None:
        return None
    return CourseDetailResponse(course=to_response(course), can_manage=user_can_manage(profile, course))


def require_manageable_course(db: Session, course_id: str, profile: UserProfile) -> Optional[Course]:
    """
    Retourne le cours si l'appelant peut le gérer.
    None si introuvable, PermissionError si l'accès est restreint.
    """
    course = get_course(db, course_id)
    if course is None:
        return None
    if not user_can_manage(profile, course):
        raise PermissionError("Vous n'avez pas les permissions pour gérer ce cours.")
    return course


def is_enrolled(db: Session, course_id: str, student_id: str) -> bool:
    return db.execute(
        select(Enrollment.id)
        .where(Enrollment.course_id == course_id, Enrollment.student_id == student_id)
        .limit(1)
    ).scalars().first() is not None


def require_readable_course(db: Session, course_id: str, profile: UserProfile) -> Optional[Course]:
    """
    Lecture seule : gestionnaires du cours et élèves inscrits.
    None si introuvable, PermissionError sinon.
    """
    course = get_course(db, course_id)
    if course is None:
        return None
    if user_can_manage(profile, course):
        return course
    if profile.role == "student" and is_enrolled(db, course.id, profile.id):
        return course
    raise PermissionError("Vous n'êtes pas inscrit à ce cours.")


def get_course_students(db: Session, course: Course) -> CourseStudentsResponse:
    """Élèves inscrits (résolus par lot, limite comprise)."""
    students = course_students(db, course.id)
    return CourseStudentsResponse(
        course_id=course.id,
        total=len(students),
        students=[CourseStudent.model_validate(s) for s in students],
    )


def get_teacher_courses(db: Session, teacher_id: str) -> List[CourseResponse]:
    """Cours assignés à un enseignant."""
    courses = db.execute(
        select(Course)
        .where(Course.teacher_id == teacher_id)
        .order_by(Course.subject_name, Course.section_name)
    ).scalars().all()
    return [to_response(c) for c in courses]


def get_student_courses(db: Session, student_id: str) -> List[CourseResponse]:
    """Cours dans lesquels un élève est inscrit."""
    courses = db.execute(
        select(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .where(Enrollment.student_id == student_id)
        .distinct()
        .order_by(Course.subject_name)
    ).scalars().all()
    return [to_response(c) for c in courses]
