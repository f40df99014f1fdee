"""
Schémas Pydantic pour les profils utilisateurs et l'écran Utilisateurs.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator

from edulink.services.roles import ASSIGNABLE_ROLES, Role


class ProfileResponse(BaseModel):
    """Profil users/{uid} tel que lu par les écrans."""
    id: str
    first_name: str
    last_name: str
    email: str
    role: str
    school_id: Optional[str] = None
    section_id: Optional[str] = None
    grade_level_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RoleUpdate(BaseModel):
    """Corps de requête de l'action « Assigner un rôle »."""
    role: Role

    @field_validator("role")
    @classmethod
    def assignable(cls, v: Role) -> Role:
        if v not in ASSIGNABLE_ROLES:
            raise ValueError(
                f"Rôle non attribuable. Valeurs acceptées : {[r.value for r in ASSIGNABLE_ROLES]}"
            )
        return v


class UserCreate(BaseModel):
    """Création d'un utilisateur par un administrateur (opération privilégiée)."""
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    role: Optional[Role] = None
    school_id: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Le mot de passe doit contenir au moins 6 caractères.")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()


class NavItemResponse(BaseModel):
    href: str
    label: str
    icon: str


class NavigationResponse(BaseModel):
    role: str
    items: List[NavItemResponse]
