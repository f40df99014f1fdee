"""
Dispatcher des écritures vers la base.

Flux :
  1. Exécuter l'écriture fournie puis commit
  2. Succès → notification de confirmation
  3. Erreur SQLAlchemy → rollback, log, MutationError avec notification « destructive »

Les erreurs de permission et de connectivité remontées par la base produisent le même
message générique. Aucune nouvelle tentative : l'utilisateur doit renvoyer l'action.
"""

import logging
from typing import Callable, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from edulink.schemas.common import Notification

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_FAILURE = "L'opération n'a pas pu être enregistrée. Vérifiez vos permissions et réessayez."


class MutationError(Exception):
    """Échec d'écriture en base, porte la notification à afficher."""

    def __init__(self, notification: Notification):
        super().__init__(notification.description)
        self.notification = notification


def dispatch(
    db: Session,
    write: Callable[[], T],
    title: str,
    description: str = "",
    failure_title: str = "Erreur",
) -> Tuple[T, Notification]:
    """
    Exécute `write` dans la session puis commit.
    Retourne le résultat de `write` et la notification de succès.
    Lève MutationError si la base refuse ou échoue.
    """
    try:
        result = write()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Échec d'écriture « %s » : %s", title, exc)
        raise MutationError(
            Notification(variant="destructive", title=failure_title, description=GENERIC_FAILURE)
        ) from exc

    return result, Notification(title=title, description=description)
