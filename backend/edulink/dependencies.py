"""
Dépendances FastAPI d'authentification : jeton de session → profil (users/{uid}).
"""

from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.models.user import UserProfile
from edulink.services import identity_service, profile_service
from edulink.services.roles import Role, parse_role

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_uid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Uid de l'utilisateur connecté. 401 si le jeton est absent, invalide ou expiré."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentification requise.")
    try:
        return identity_service.decode_access_token(credentials.credentials)
    except identity_service.AuthError:
        raise HTTPException(status_code=401, detail="Session invalide ou expirée.")


def get_current_profile(
    uid: str = Depends(get_current_uid),
    db: Session = Depends(get_db),
) -> UserProfile:
    """Profil de l'utilisateur connecté, relu à chaque requête."""
    profile = profile_service.get_profile(db, uid)
    if profile is None:
        raise HTTPException(status_code=403, detail="Profil utilisateur introuvable.")
    return profile


def require_roles(*roles: Role):
    """Dépendance qui refuse (403) les profils dont le rôle n'est pas dans `roles`."""
    def _dep(profile: UserProfile = Depends(get_current_profile)) -> UserProfile:
        if parse_role(profile.role) not in roles:
            raise HTTPException(status_code=403, detail="Accès restreint pour ce rôle.")
        return profile
    return _dep


require_admin = require_roles(Role.ADMIN)
require_manager = require_roles(Role.ADMIN, Role.DIRECTOR)


def get_websocket_profile(db: Session, token: Optional[str]) -> Optional[UserProfile]:
    """
    Profil d'un client WebSocket authentifié par le paramètre de requête `token`
    (les navigateurs ne transmettent pas d'en-tête Authorization à l'ouverture).
    None si le jeton est absent ou invalide, ou si le profil n'existe pas.
    """
    if not token:
        return None
    try:
        uid = identity_service.decode_access_token(token)
    except identity_service.AuthError:
        return None
    return profile_service.get_profile(db, uid)
