"""
Schémas Pydantic pour l'écran Enseignants.
"""

from typing import List, Optional

from pydantic import BaseModel, field_validator

from edulink.schemas.course import CourseResponse


class TeacherResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    school_id: Optional[str] = None
    school_name: Optional[str] = None


class TeacherDetailResponse(BaseModel):
    teacher: TeacherResponse
    courses: List[CourseResponse]


class TeacherUpdate(BaseModel):
    first_name: str
    last_name: str
    school_id: str

    @field_validator("first_name", "last_name")
    @classmethod
    def name_length(cls, v: str) -> str:
        if len(v.strip()) < 2:
            raise ValueError("Le champ doit contenir au moins 2 caractères.")
        return v.strip()

    @field_validator("school_id")
    @classmethod
    def school_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Vous devez sélectionner une école.")
        return v
