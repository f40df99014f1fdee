"""
Schémas Pydantic pour l'authentification (inscription, connexion, mot de passe oublié).
"""

from pydantic import BaseModel, EmailStr, field_validator


def _check_password(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Le mot de passe doit contenir au moins 6 caractères.")
    return v


class SignupRequest(BaseModel):
    """Auto-inscription : le profil créé reçoit le rôle et l'école par défaut."""
    email: EmailStr
    password: str
    first_name: str
    last_name: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def name_length(cls, v: str) -> str:
        if len(v.strip()) < 2:
            raise ValueError("Le champ doit contenir au moins 2 caractères.")
        return v.strip()


class SignupResponse(BaseModel):
    uid: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)
