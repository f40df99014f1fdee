"""
Router du tableau de bord.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.dependencies import get_current_profile
from edulink.models.user import UserProfile
from edulink.schemas.dashboard import DashboardResponse
from edulink.services import dashboard_service

router = APIRouter(prefix="/api/v1/dashboard", tags=["Tableau de bord"])


@router.get("", response_model=DashboardResponse, summary="Tableau de bord selon le rôle")
def get_dashboard(profile: UserProfile = Depends(get_current_profile), db: Session = Depends(get_db)):
    """Admin/parent : nombre d'élèves. Enseignant : cours assignés. Élève : cours suivis."""
    return dashboard_service.get_dashboard(db, profile)
