"""
Schémas Pydantic pour l'écran Élèves (liste par école, affectation à une section).
"""

from typing import List

from pydantic import BaseModel, field_validator

from edulink.schemas.user import ProfileResponse


class SectionAssign(BaseModel):
    section_id: str

    @field_validator("section_id")
    @classmethod
    def section_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Veuillez sélectionner une section.")
        return v


class SectionAssignResult(BaseModel):
    """Élève affecté et cours dans lesquels il a été inscrit."""
    student: ProfileResponse
    enrolled_course_ids: List[str]
