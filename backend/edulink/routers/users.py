"""
Router de l'écran Utilisateurs (administrateur) : liste, attribution de rôle, création,
et suivi temps réel d'un profil (WebSocket).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, WebSocket
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.dependencies import get_websocket_profile, require_admin
from edulink.schemas.common import MutationResponse
from edulink.schemas.user import ProfileResponse, RoleUpdate, UserCreate
from edulink.services import admin_service, identity_service, profile_service
from edulink.services.change_feed import stream_changes
from edulink.services.roles import Role, parse_role

router = APIRouter(prefix="/api/v1/users", tags=["Utilisateurs"])


@router.get("", response_model=List[ProfileResponse], summary="Lister les utilisateurs",
            dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    return profile_service.list_profiles(db)


@router.post("", response_model=MutationResponse[ProfileResponse], status_code=201,
             summary="Créer un utilisateur", dependencies=[Depends(require_admin)])
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    """Crée le compte et le profil via le compte de service."""
    try:
        profile, notification = admin_service.create_user(db, data)
    except identity_service.AuthError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return MutationResponse[ProfileResponse](data=profile, notification=notification)


@router.put("/{user_id}/role", response_model=MutationResponse[ProfileResponse],
            summary="Attribuer un rôle", dependencies=[Depends(require_admin)])
def change_role(user_id: str, data: RoleUpdate, db: Session = Depends(get_db)):
    result = profile_service.change_role(db, user_id, data.role)
    if result is None:
        raise HTTPException(status_code=404, detail="Utilisateur introuvable.")
    profile, notification = result
    return MutationResponse[ProfileResponse](data=profile, notification=notification)


@router.websocket("/{user_id}/watch")
async def watch_profile(websocket: WebSocket, user_id: str, token: Optional[str] = None,
                        db: Session = Depends(get_db)):
    """
    Envoie le profil puis chaque nouvelle version après un changement.
    Réservé à l'utilisateur lui-même et aux administrateurs.
    """
    viewer = get_websocket_profile(db, token)
    if viewer is None or (viewer.id != user_id and parse_role(viewer.role) != Role.ADMIN):
        await websocket.close(code=1008)
        return

    async def snapshot():
        db.expire_all()
        profile = profile_service.get_profile(db, user_id)
        return ProfileResponse.model_validate(profile).model_dump(mode="json") if profile else None

    await websocket.accept()
    await stream_changes(websocket, profile_service.profile_path(user_id), snapshot)
