"""
Jointure côté application : membres d'une portée (cours, école) → profils utilisateurs.

Deux allers-retours :
  1. Lire les documents d'appartenance de la portée et extraire les identifiants référencés
     (dédupliqués)
  2. Si la liste n'est pas vide, une seule requête IN sur les profils, limitée à
     PROFILE_BATCH_LIMIT identifiants

Limites connues (pas des erreurs) :
- au-delà de la limite, les identifiants excédentaires sont ignorés
- un profil supprimé est simplement absent du résultat
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.config import settings
from edulink.models.course import Enrollment
from edulink.models.school import SchoolTeacher
from edulink.models.user import UserProfile

logger = logging.getLogger(__name__)


class CollectionJoiner:
    """
    Résout les membres d'une portée.
    is_loading vaut True tant que l'une des deux étapes est en cours.
    """

    def __init__(
        self,
        db: Session,
        membership_model,
        scope_field: str,
        ref_field: str,
        batch_limit: Optional[int] = None,
    ):
        self.db = db
        self.membership_model = membership_model
        self.scope_field = scope_field
        self.ref_field = ref_field
        self.batch_limit = batch_limit if batch_limit is not None else settings.PROFILE_BATCH_LIMIT
        self.is_loading = False

    def member_ids(self, scope_id: str) -> List[str]:
        """Étape 1 : identifiants référencés par les documents d'appartenance, sans doublon."""
        scope_column = getattr(self.membership_model, self.scope_field)
        ref_column = getattr(self.membership_model, self.ref_field)
        ids = self.db.execute(
            select(ref_column).where(scope_column == scope_id)
        ).scalars().all()
        return list(dict.fromkeys(ids))

    def resolve_profiles(self, ids: List[str]) -> List[UserProfile]:
        """Étape 2 : profils des identifiants, dans la limite du lot. Liste vide → aucune requête."""
        if not ids:
            return []

        batch = ids[: self.batch_limit]
        if len(ids) > len(batch):
            logger.info(
                "Lot de profils tronqué : %d identifiants, %d résolus au maximum",
                len(ids), len(batch),
            )

        return list(self.db.execute(
            select(UserProfile)
            .where(UserProfile.id.in_(batch))
            .order_by(UserProfile.last_name, UserProfile.first_name)
        ).scalars().all())

    def load(self, scope_id: str) -> List[UserProfile]:
        """Enchaîne les deux étapes pour une portée."""
        self.is_loading = True
        try:
            return self.resolve_profiles(self.member_ids(scope_id))
        finally:
            self.is_loading = False


def course_students(db: Session, course_id: str) -> List[UserProfile]:
    """Profils des élèves inscrits à un cours (courses/{id}/students)."""
    return CollectionJoiner(db, Enrollment, "course_id", "student_id").load(course_id)


def school_teachers(db: Session, school_id: str) -> List[UserProfile]:
    """Profils des enseignants rattachés à une école (schools/{id}/teachers)."""
    return CollectionJoiner(db, SchoolTeacher, "school_id", "teacher_id").load(school_id)
