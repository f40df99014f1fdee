"""
Schémas Pydantic pour les écoles (écran Écoles et corbeille).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class SchoolCreate(BaseModel):
    name: str
    address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de l'école ne peut pas être vide.")
        return v.strip()


class SchoolUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom de l'école ne peut pas être vide.")
        return v.strip() if v else v


class SchoolResponse(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    status: str
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
