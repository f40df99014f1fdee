"""
Service des profils utilisateurs (users/{uid}) : lecture, liste, changement de rôle.
Chaque changement est publié sur le flux "users/{uid}" pour les vues abonnées.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.models.user import UserProfile
from edulink.schemas.common import Notification
from edulink.schemas.user import ProfileResponse
from edulink.services.change_feed import change_feed
from edulink.services.mutations import dispatch
from edulink.services.roles import Role

logger = logging.getLogger(__name__)


def profile_path(user_id: str) -> str:
    return f"users/{user_id}"


def get_profile(db: Session, user_id: str) -> Optional[UserProfile]:
    """Retourne le profil d'un utilisateur, ou None s'il n'existe pas."""
    return db.get(UserProfile, user_id)


def list_profiles(db: Session) -> List[UserProfile]:
    """Tous les profils, triés par nom puis prénom."""
    return list(db.execute(
        select(UserProfile).order_by(UserProfile.last_name, UserProfile.first_name)
    ).scalars().all())


def change_role(db: Session, user_id: str, role: Role) -> Optional[Tuple[ProfileResponse, Notification]]:
    """
    Attribue un nouveau rôle. Retourne None si le profil est introuvable.
    Le nouveau profil est publié aux abonnés après le commit.
    """
    profile = db.get(UserProfile, user_id)
    if profile is None:
        return None

    def write():
        profile.role = role.value
        return profile

    profile, notification = dispatch(
        db, write,
        title="Rôle mis à jour",
        description=f"{profile.first_name} {profile.last_name} a maintenant le rôle « {role.value} ».",
    )
    db.refresh(profile)
    response = ProfileResponse.model_validate(profile)

    logger.info("Rôle de %s changé en %s", user_id, role.value)
    change_feed.publish(profile_path(user_id), response.model_dump(mode="json"))
    return response, notification
