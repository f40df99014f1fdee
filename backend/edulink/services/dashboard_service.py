"""
Contenu du tableau de bord selon le rôle de l'appelant.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from edulink.models.user import UserProfile
from edulink.schemas.dashboard import DashboardResponse
from edulink.services.course_service import get_student_courses, get_teacher_courses
from edulink.services.roles import Role, parse_role


def count_students(db: Session) -> int:
    return db.execute(
        select(func.count()).select_from(UserProfile).where(UserProfile.role == Role.STUDENT.value)
    ).scalar() or 0


def get_dashboard(db: Session, profile: UserProfile) -> DashboardResponse:
    role = parse_role(profile.role)
    response = DashboardResponse(role=profile.role)

    if role in (Role.ADMIN, Role.DIRECTOR, Role.PARENT):
        response.total_students = count_students(db)
    elif role == Role.TEACHER:
        response.courses = get_teacher_courses(db, profile.id)
    elif role == Role.STUDENT:
        response.courses = get_student_courses(db, profile.id)

    return response
