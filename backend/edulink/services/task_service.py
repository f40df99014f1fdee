"""
Service métier pour les tâches d'un cours, leurs remises et la notation.

Statut de remise (fonction pure de la remise, de l'échéance et de l'instant) :
  - pas de remise, échéance passée      → did_not_submit
  - pas de remise, échéance à venir     → pending
  - remise au plus tard à l'échéance    → on_time
  - remise après l'échéance             → late
Statut de notation indépendant : graded si une note existe, sinon pending_grading.

Notation :
- note numérique obligatoire, 0 ≤ note ≤ total_points
- élève sans remise → création d'une remise « graded_without_submission »
- remise existante → seule la note est modifiée
"""

import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.database import new_id
from edulink.models.task import Submission, Task
from edulink.schemas.common import Notification
from edulink.schemas.task import (
    GradingBuffer,
    SubmissionResponse,
    SubmissionRow,
    TaskCreate,
    TaskResponse,
    TaskSubmissionsResponse,
    TaskUpdate,
)
from edulink.services.collection_joiner import course_students
from edulink.services.course_service import is_enrolled
from edulink.services.mutations import dispatch

logger = logging.getLogger(__name__)

DID_NOT_SUBMIT = "did_not_submit"
PENDING = "pending"
ON_TIME = "on_time"
LATE = "late"

GRADED = "graded"
PENDING_GRADING = "pending_grading"

GRADED_WITHOUT_SUBMISSION = "graded_without_submission"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _naive_utc(value: datetime) -> datetime:
    """Les dates sont stockées sans fuseau, en UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Dérivations pures
# ---------------------------------------------------------------------------

def submission_status(submission: Optional[Submission], due_date: datetime, now: Optional[datetime] = None) -> str:
    due = _naive_utc(due_date)
    if submission is None or submission.submitted_at is None:
        now = _naive_utc(now) if now is not None else utcnow()
        return DID_NOT_SUBMIT if now > due else PENDING
    return ON_TIME if _naive_utc(submission.submitted_at) <= due else LATE


def grading_status(submission: Optional[Submission]) -> str:
    if submission is not None and submission.score is not None:
        return GRADED
    return PENDING_GRADING


def open_grading(student_id: str, submission: Optional[Submission]) -> GradingBuffer:
    """Tampon d'édition : la note existante, ou vide."""
    if submission is None or submission.score is None:
        return GradingBuffer(student_id=student_id, score="")
    return GradingBuffer(student_id=student_id, score=f"{submission.score:g}")


def parse_score(raw, total_points: float) -> float:
    """
    Valide la saisie d'une note. Lève ValueError si elle est absente,
    non numérique ou hors de [0, total_points].
    """
    if raw is None or isinstance(raw, bool):
        raise ValueError("La note est obligatoire.")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise ValueError("La note est obligatoire.")
    try:
        score = float(raw)
    except (TypeError, ValueError):
        raise ValueError("La note doit être un nombre.")
    if not math.isfinite(score):
        raise ValueError("La note doit être un nombre.")
    if score < 0 or score > total_points:
        raise ValueError(f"La note doit être comprise entre 0 et {total_points:g}.")
    return score


# ---------------------------------------------------------------------------
# Tâches
# ---------------------------------------------------------------------------

def get_task(db: Session, course_id: str, task_id: str) -> Optional[Task]:
    task = db.get(Task, task_id)
    if task is None or task.course_id != course_id:
        return None
    return task


def list_tasks(db: Session, course_id: str) -> List[Task]:
    """Tâches d'un cours, par échéance croissante."""
    return list(db.execute(
        select(Task).where(Task.course_id == course_id).order_by(Task.due_date)
    ).scalars().all())


def create_task(db: Session, course_id: str, data: TaskCreate) -> Tuple[TaskResponse, Notification]:
    task = Task(
        id=new_id(),
        course_id=course_id,
        title=data.title,
        description=data.description,
        due_date=_naive_utc(data.due_date),
        is_group_task=data.is_group_task,
        total_points=data.total_points,
    )

    def write():
        db.add(task)
        db.flush()
        return task

    task, notification = dispatch(
        db, write,
        title="Tâche créée",
        description=f"La tâche « {data.title} » a été ajoutée.",
    )
    db.refresh(task)
    logger.info("Tâche créée : %s (cours %s)", task.id, course_id)
    return TaskResponse.model_validate(task), notification


def update_task(
    db: Session, course_id: str, task_id: str, data: TaskUpdate,
) -> Optional[Tuple[TaskResponse, Notification]]:
    """Met à jour les champs fournis. Retourne None si la tâche est introuvable."""
    task = get_task(db, course_id, task_id)
    if task is None:
        return None

    changes = data.model_dump(exclude_unset=True)
    if changes.get("due_date") is not None:
        changes["due_date"] = _naive_utc(changes["due_date"])
    if "due_date" in changes and changes["due_date"] is None:
        raise ValueError("La date d'échéance est obligatoire.")

    def write():
        for field, value in changes.items():
            setattr(task, field, value)
        # Nouvelle échéance → nouveau rappel
        if "due_date" in changes:
            task.reminder_sent_at = None
        return task

    task, notification = dispatch(db, write, title="Tâche mise à jour")
    db.refresh(task)
    return TaskResponse.model_validate(task), notification


def delete_task(db: Session, course_id: str, task_id: str) -> Optional[Notification]:
    """Supprime la tâche et ses remises. Retourne None si la tâche est introuvable."""
    task = get_task(db, course_id, task_id)
    if task is None:
        return None

    title = task.title
    _, notification = dispatch(
        db, lambda: db.delete(task),
        title="Tâche supprimée",
        description=f"La tâche « {title} » a été supprimée.",
    )
    logger.info("Tâche supprimée : %s (cours %s)", task_id, course_id)
    return notification


# ---------------------------------------------------------------------------
# Remises et notation
# ---------------------------------------------------------------------------

def get_submission(db: Session, task_id: str, student_id: str) -> Optional[Submission]:
    return db.get(Submission, (task_id, student_id))


def list_submissions(db: Session, task_id: str) -> List[Submission]:
    return list(db.execute(
        select(Submission).where(Submission.task_id == task_id)
    ).scalars().all())


def get_task_submissions(db: Session, task: Task, now: Optional[datetime] = None) -> TaskSubmissionsResponse:
    """Une ligne par élève inscrit résolu, avec l'état de sa remise et de sa notation."""
    students = course_students(db, task.course_id)
    by_student = {s.student_id: s for s in list_submissions(db, task.id)}

    rows = []
    for student in students:
        submission = by_student.get(student.id)
        rows.append(SubmissionRow(
            student_id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            submission_status=submission_status(submission, task.due_date, now),
            grading_status=grading_status(submission),
            score=submission.score if submission else None,
            submitted_at=submission.submitted_at if submission else None,
            file_url=submission.file_url if submission else None,
        ))
    return TaskSubmissionsResponse(task=TaskResponse.model_validate(task), students=rows)


def _require_enrolled(db: Session, task: Task, student_id: str) -> None:
    if not is_enrolled(db, task.course_id, student_id):
        raise LookupError("Élève non inscrit à ce cours.")


def get_grading_buffer(db: Session, task: Task, student_id: str) -> GradingBuffer:
    """Lève LookupError si l'élève n'est pas inscrit au cours de la tâche."""
    _require_enrolled(db, task, student_id)
    return open_grading(student_id, get_submission(db, task.id, student_id))


def save_grade(db: Session, task: Task, student_id: str, raw_score) -> Tuple[SubmissionResponse, Notification]:
    """
    Enregistre la note d'un élève pour une tâche.
    Lève ValueError si la note est invalide, LookupError si l'élève n'est pas
    inscrit au cours : dans les deux cas aucune écriture n'a lieu.
    """
    score = parse_score(raw_score, task.total_points)
    _require_enrolled(db, task, student_id)
    submission = get_submission(db, task.id, student_id)

    def write():
        graded_at = utcnow()
        if submission is None:
            created = Submission(
                task_id=task.id,
                id=student_id,
                course_id=task.course_id,
                student_id=student_id,
                submitted_at=None,
                status=GRADED_WITHOUT_SUBMISSION,
                score=score,
                graded_at=graded_at,
            )
            db.add(created)
            return created
        submission.score = score
        submission.graded_at = graded_at
        return submission

    saved, notification = dispatch(
        db, write,
        title="Note enregistrée",
        description=f"La note {score:g}/{task.total_points:g} a été enregistrée.",
    )
    logger.info("Note enregistrée : tâche %s, élève %s → %s", task.id, student_id, score)
    return SubmissionResponse.model_validate(saved), notification
