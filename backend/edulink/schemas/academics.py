"""
Schémas Pydantic pour la structure pédagogique d'une école :
matières, niveaux, sections et assignation des cours.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


def _min_length(v: str, n: int) -> str:
    if len(v.strip()) < n:
        raise ValueError(f"Le nom doit contenir au moins {n} caractères.")
    return v.strip()


class SubjectCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        return _min_length(v, 3)


class SubjectResponse(BaseModel):
    id: str
    school_id: str
    name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GradeLevelCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        return _min_length(v, 3)


class GradeLevelResponse(BaseModel):
    id: str
    school_id: str
    name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SectionCreate(BaseModel):
    name: str
    grade_level_id: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom est requis.")
        return v.strip()

    @field_validator("grade_level_id")
    @classmethod
    def grade_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Vous devez sélectionner un niveau.")
        return v


class SectionResponse(BaseModel):
    id: str
    school_id: str
    grade_level_id: str
    grade_name: Optional[str] = None
    name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CourseAssignment(BaseModel):
    """Assignation d'une matière et d'un enseignant à une section."""
    subject_id: str
    teacher_id: str
    schedule: str

    @field_validator("subject_id")
    @classmethod
    def subject_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Vous devez sélectionner une matière.")
        return v

    @field_validator("teacher_id")
    @classmethod
    def teacher_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Vous devez sélectionner un enseignant.")
        return v

    @field_validator("schedule")
    @classmethod
    def schedule_length(cls, v: str) -> str:
        if len(v.strip()) < 3:
            raise ValueError("L'horaire doit contenir au moins 3 caractères.")
        return v.strip()
