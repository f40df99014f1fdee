"""
Opérations privilégiées exécutées côté serveur (hors navigateur) :
création d'utilisateur par un administrateur et auto-inscription.

Les deux chemins exigent le compte de service (SERVICE_ACCOUNT_JSON) et construisent
le profil par défaut via la même fonction (build_default_profile).
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from edulink.config import get_service_credential, settings
from edulink.models.user import UserProfile
from edulink.schemas.auth import SignupRequest
from edulink.schemas.common import Notification
from edulink.schemas.user import ProfileResponse, UserCreate
from edulink.services import identity_service
from edulink.services.mutations import dispatch
from edulink.services.roles import Role

logger = logging.getLogger(__name__)


def build_default_profile(
    uid: str,
    email: str,
    first_name: str,
    last_name: str,
    role: Optional[Role] = None,
    school_id: Optional[str] = None,
) -> UserProfile:
    """Profil d'un nouvel utilisateur : rôle élève et école par défaut sauf indication contraire."""
    return UserProfile(
        id=uid,
        first_name=first_name,
        last_name=last_name,
        email=email.lower(),
        role=(role or Role.STUDENT).value,
        school_id=school_id or settings.DEFAULT_SCHOOL_ID,
    )


def _create_account_with_profile(
    db: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Optional[Role] = None,
    school_id: Optional[str] = None,
) -> UserProfile:
    # Lève ConfigurationError avant toute écriture si le compte de service manque
    credential = get_service_credential()

    account = identity_service.create_account(db, email, password, created_by=credential.client_email)
    profile = build_default_profile(account.uid, email, first_name, last_name, role, school_id)
    db.add(profile)
    return profile


def self_register(db: Session, data: SignupRequest) -> str:
    """
    Auto-inscription : crée le compte et le profil (rôle élève, école par défaut).
    Retourne l'uid. Lève AuthError si l'email est déjà utilisé.
    """
    profile, _ = dispatch(
        db,
        lambda: _create_account_with_profile(db, data.email, data.password, data.first_name, data.last_name),
        title="Compte créé",
    )
    logger.info("Auto-inscription : %s", profile.id)
    return profile.id


def create_user(db: Session, data: UserCreate) -> Tuple[ProfileResponse, Notification]:
    """Création d'un utilisateur par un administrateur."""
    profile, notification = dispatch(
        db,
        lambda: _create_account_with_profile(
            db, data.email, data.password, data.first_name, data.last_name, data.role, data.school_id,
        ),
        title="Utilisateur créé",
        description=f"Le compte de {data.first_name} {data.last_name} a été créé.",
    )
    db.refresh(profile)
    logger.info("Utilisateur créé par un administrateur : %s (%s)", profile.id, profile.role)
    return ProfileResponse.model_validate(profile), notification
