"""
Schémas Pydantic pour les rappels d'échéance des tâches.
"""

from typing import List

from pydantic import BaseModel


class TaskReminderResult(BaseModel):
    """Rapport d'envoi des rappels pour une tâche."""

    task_id: str
    sent_count: int
    already_submitted_count: int
    no_email_count: int
    errors: List[str]
