"""
Router du profil connecté : profil courant et menu de navigation selon le rôle.
"""

from fastapi import APIRouter, Depends

from edulink.dependencies import get_current_profile
from edulink.models.user import UserProfile
from edulink.schemas.user import NavigationResponse, NavItemResponse, ProfileResponse
from edulink.services.roles import menu_for

router = APIRouter(prefix="/api/v1/me", tags=["Profil"])


@router.get("", response_model=ProfileResponse, summary="Profil de l'utilisateur connecté")
def get_me(profile: UserProfile = Depends(get_current_profile)):
    return profile


@router.get("/navigation", response_model=NavigationResponse, summary="Menu de navigation")
def get_navigation(profile: UserProfile = Depends(get_current_profile)):
    """Entrées visibles pour le rôle courant (rôle inconnu → menu vide)."""
    return NavigationResponse(
        role=profile.role,
        items=[NavItemResponse(href=i.href, label=i.label, icon=i.icon) for i in menu_for(profile.role)],
    )
