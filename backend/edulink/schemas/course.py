"""
Schémas Pydantic pour les cours, leur détail et la liste des élèves inscrits.
"""

from typing import List, Optional

from pydantic import BaseModel


class CourseResponse(BaseModel):
    id: str
    school_id: Optional[str] = None
    subject_id: Optional[str] = None
    subject_name: str
    section_id: str
    section_name: str
    grade_name: Optional[str] = None
    teacher_id: str
    teacher_name: Optional[str] = None
    schedule: Optional[str] = None
    title: str

    model_config = {"from_attributes": True}


class CourseDetailResponse(BaseModel):
    """Détail d'un cours avec la décision de gestion calculée pour l'appelant."""
    course: CourseResponse
    can_manage: bool


class CourseStudent(BaseModel):
    """Ligne de la liste des élèves d'un cours."""
    id: str
    first_name: str
    last_name: str
    email: str

    model_config = {"from_attributes": True}


class CourseStudentsResponse(BaseModel):
    course_id: str
    total: int
    students: List[CourseStudent]
