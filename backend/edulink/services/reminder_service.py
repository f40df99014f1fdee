"""
Rappels d'échéance des tâches, déclenchés par le planificateur.

Flux :
  1. Sélectionner les tâches dont l'échéance tombe dans les TASK_REMINDER_HOURS
     prochaines heures et dont le rappel n'a pas encore été envoyé
  2. Pour chaque tâche, résoudre les élèves inscrits (jointure par lot)
     a. Skip si l'élève a déjà une remise
     b. Skip si pas d'email
     c. Envoyer l'email (une erreur SMTP est consignée, sans interrompre le lot)
  3. Marquer la tâche (reminder_sent_at) et retourner le rapport
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.config import settings
from edulink.models.course import Course
from edulink.models.task import Submission, Task
from edulink.schemas.reminder import TaskReminderResult
from edulink.services.collection_joiner import course_students
from edulink.services.course_service import course_title
from edulink.services.email_service import send_task_reminder_email
from edulink.services.task_service import utcnow

logger = logging.getLogger(__name__)


def tasks_due_soon(db: Session, now: datetime) -> List[Task]:
    horizon = now + timedelta(hours=settings.TASK_REMINDER_HOURS)
    return list(db.execute(
        select(Task).where(
            Task.due_date > now,
            Task.due_date <= horizon,
            Task.reminder_sent_at.is_(None),
        ).order_by(Task.due_date)
    ).scalars().all())


def send_task_reminders(db: Session, task: Task) -> TaskReminderResult:
    """Envoie le rappel d'une tâche aux élèves inscrits qui n'ont rien remis."""
    result = TaskReminderResult(
        task_id=task.id,
        sent_count=0,
        already_submitted_count=0,
        no_email_count=0,
        errors=[],
    )

    course = db.get(Course, task.course_id)
    title = course_title(course.subject_name, course.grade_name, course.section_name) if course else ""
    submitted = set(db.execute(
        select(Submission.student_id).where(
            Submission.task_id == task.id,
            Submission.submitted_at.isnot(None),
        )
    ).scalars().all())

    for student in course_students(db, task.course_id):
        if student.id in submitted:
            result.already_submitted_count += 1
            continue
        if not student.email:
            result.no_email_count += 1
            continue
        try:
            send_task_reminder_email(
                to_email=student.email,
                student_name=f"{student.first_name} {student.last_name}",
                task_title=task.title,
                course_title=title,
                due_date=task.due_date,
            )
            result.sent_count += 1
        except Exception as exc:
            error_msg = f"Erreur envoi email {student.email} : {exc}"
            result.errors.append(error_msg)
            logger.error(error_msg)

    task.reminder_sent_at = utcnow()
    db.commit()
    return result


def send_due_task_reminders(db: Session, now: Optional[datetime] = None) -> List[TaskReminderResult]:
    now = now or utcnow()
    results = []
    for task in tasks_due_soon(db, now):
        result = send_task_reminders(db, task)
        logger.info(
            "Tâche %s : %d rappels envoyés, %d déjà remis, %d sans email, %d erreurs",
            task.id,
            result.sent_count,
            result.already_submitted_count,
            result.no_email_count,
            len(result.errors),
        )
        results.append(result)
    return results
