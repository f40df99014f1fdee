"""
Schémas Pydantic partagés : notifications renvoyées après une écriture.
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Notification(BaseModel):
    """Message à afficher à l'utilisateur (toast) après une action."""
    variant: Literal["default", "destructive"] = "default"
    title: str
    description: str = ""


class MutationResponse(BaseModel, Generic[T]):
    """Réponse d'une écriture : le document écrit et la confirmation à afficher."""
    data: T
    notification: Notification
