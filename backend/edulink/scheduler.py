"""
Planificateur APScheduler pour les rappels d'échéance des tâches.

Le job s'exécute toutes les heures et rappelle aux élèves inscrits les tâches
qui arrivent à échéance dans les TASK_REMINDER_HOURS prochaines heures,
une seule fois par tâche.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from edulink.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _send_task_reminders_scheduled() -> None:
    """
    Tâche planifiée : envoie les rappels des tâches bientôt dues.
    Import local pour éviter les imports circulaires.
    """
    from edulink.services.reminder_service import send_due_task_reminders

    db = SessionLocal()
    try:
        results = send_due_task_reminders(db)
        if results:
            logger.info("Rappels de tâches : %d tâche(s) traitée(s)", len(results))
    except Exception as exc:
        logger.error("Erreur lors de l'envoi automatique des rappels de tâches : %s", exc)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    scheduler.add_job(
        _send_task_reminders_scheduled,
        trigger="interval",
        hours=1,
        id="task_due_reminders",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler démarré : rappels de tâches toutes les heures.")


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
