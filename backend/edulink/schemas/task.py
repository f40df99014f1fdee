"""
Schémas Pydantic pour les tâches d'un cours, les remises et la notation.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, field_validator


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    due_date: datetime
    is_group_task: bool = False
    total_points: float = 100

    @field_validator("title")
    @classmethod
    def title_length(cls, v: str) -> str:
        if len(v.strip()) < 3:
            raise ValueError("Le titre doit contenir au moins 3 caractères.")
        return v.strip()

    @field_validator("total_points")
    @classmethod
    def points_positive(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Les points ne peuvent pas être négatifs.")
        return v


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    is_group_task: Optional[bool] = None
    total_points: Optional[float] = None

    @field_validator("title")
    @classmethod
    def title_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v.strip()) < 3:
            raise ValueError("Le titre doit contenir au moins 3 caractères.")
        return v.strip() if v else v

    @field_validator("total_points")
    @classmethod
    def points_positive(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("Les points ne peuvent pas être négatifs.")
        return v


class TaskResponse(BaseModel):
    id: str
    course_id: str
    title: str
    description: Optional[str] = None
    due_date: datetime
    is_group_task: bool = False
    total_points: float
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SubmissionResponse(BaseModel):
    id: str
    task_id: str
    course_id: str
    student_id: str
    submitted_at: Optional[datetime] = None
    file_url: Optional[str] = None
    status: str
    score: Optional[float] = None

    model_config = {"from_attributes": True}


class SubmissionRow(BaseModel):
    """Ligne de l'écran des remises : un élève inscrit et l'état de sa remise."""
    student_id: str
    first_name: str
    last_name: str
    submission_status: str
    grading_status: str
    score: Optional[float] = None
    submitted_at: Optional[datetime] = None
    file_url: Optional[str] = None


class TaskSubmissionsResponse(BaseModel):
    task: TaskResponse
    students: List[SubmissionRow]


class GradeUpdate(BaseModel):
    """La note est validée côté service (numérique, entre 0 et total_points)."""
    score: Union[float, str, None] = None


class GradingBuffer(BaseModel):
    """Valeur de départ du champ de note à l'ouverture de la notation."""
    student_id: str
    score: str
