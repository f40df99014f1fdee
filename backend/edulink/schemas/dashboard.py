"""
Schéma Pydantic du tableau de bord (contenu selon le rôle).
"""

from typing import List, Optional

from pydantic import BaseModel

from edulink.schemas.course import CourseResponse


class DashboardResponse(BaseModel):
    role: str
    total_students: Optional[int] = None  # admin / parent
    courses: List[CourseResponse] = []     # enseignant : cours assignés, élève : cours suivis
