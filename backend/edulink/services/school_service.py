"""
Service métier pour les écoles et la corbeille.

Suppression en deux temps :
  1. soft delete → status "inactive" + deleted_at (l'école passe dans la corbeille)
  2. depuis la corbeille : restauration, ou suppression définitive (école inactive uniquement)
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.database import new_id
from edulink.models.school import School
from edulink.schemas.common import Notification
from edulink.schemas.school import SchoolCreate, SchoolResponse, SchoolUpdate
from edulink.services.mutations import dispatch

logger = logging.getLogger(__name__)

ACTIVE = "active"
INACTIVE = "inactive"


def get_school(db: Session, school_id: str) -> Optional[School]:
    return db.get(School, school_id)


def list_schools(db: Session, status: str = ACTIVE) -> List[SchoolResponse]:
    """Écoles d'un statut donné, triées par nom (corbeille : status="inactive")."""
    schools = db.execute(
        select(School).where(School.status == status).order_by(School.name)
    ).scalars().all()
    return [SchoolResponse.model_validate(s) for s in schools]


def create_school(db: Session, data: SchoolCreate) -> Tuple[SchoolResponse, Notification]:
    school = School(id=new_id(), name=data.name, address=data.address, status=ACTIVE)

    def write():
        db.add(school)
        db.flush()
        return school

    school, notification = dispatch(
        db, write,
        title="École créée",
        description=f"L'école « {data.name} » a été ajoutée.",
    )
    db.refresh(school)
    logger.info("École créée : %s", school.id)
    return SchoolResponse.model_validate(school), notification


def update_school(
    db: Session, school_id: str, data: SchoolUpdate,
) -> Optional[Tuple[SchoolResponse, Notification]]:
    school = get_school(db, school_id)
    if school is None:
        return None

    changes = data.model_dump(exclude_unset=True)

    def write():
        for field, value in changes.items():
            setattr(school, field, value)
        return school

    school, notification = dispatch(db, write, title="École mise à jour")
    db.refresh(school)
    return SchoolResponse.model_validate(school), notification


def soft_delete_school(db: Session, school_id: str) -> Optional[Tuple[SchoolResponse, Notification]]:
    """Envoie l'école dans la corbeille. ValueError si elle y est déjà."""
    school = get_school(db, school_id)
    if school is None:
        return None
    if school.status == INACTIVE:
        raise ValueError("Cette école est déjà dans la corbeille.")

    def write():
        school.status = INACTIVE
        school.deleted_at = datetime.now()
        return school

    school, notification = dispatch(
        db, write,
        title="École déplacée vers la corbeille",
        description=f"L'école « {school.name} » peut être restaurée depuis la corbeille.",
    )
    db.refresh(school)
    logger.info("École désactivée : %s", school_id)
    return SchoolResponse.model_validate(school), notification


def restore_school(db: Session, school_id: str) -> Optional[Tuple[SchoolResponse, Notification]]:
    school = get_school(db, school_id)
    if school is None:
        return None
    if school.status != INACTIVE:
        raise ValueError("Seule une école de la corbeille peut être restaurée.")

    def write():
        school.status = ACTIVE
        school.deleted_at = None
        return school

    school, notification = dispatch(
        db, write,
        title="École restaurée",
        description=f"L'école « {school.name} » est de nouveau active.",
    )
    db.refresh(school)
    logger.info("École restaurée : %s", school_id)
    return SchoolResponse.model_validate(school), notification


def delete_school_permanently(db: Session, school_id: str) -> Optional[Notification]:
    """
    Suppression définitive (matières, niveaux, sections et rattachements suivent en cascade).
    Refusée pour une école active.
    """
    school = get_school(db, school_id)
    if school is None:
        return None
    if school.status != INACTIVE:
        raise ValueError("Impossible de supprimer définitivement une école active. Déplacez-la d'abord vers la corbeille.")

    name = school.name
    _, notification = dispatch(
        db, lambda: db.delete(school),
        title="École supprimée définitivement",
        description=f"L'école « {name} » a été supprimée.",
    )
    logger.info("École supprimée définitivement : %s", school_id)
    return notification
