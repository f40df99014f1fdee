"""
Service d'envoi d'emails SMTP.
Utilisé pour les liens de réinitialisation de mot de passe et les rappels de tâches.
"""

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from edulink.config import settings

logger = logging.getLogger(__name__)


def _send(msg: MIMEMultipart) -> None:
    """Connexion SMTP et envoi. Lève une exception en cas d'échec."""
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)


def _html_message(to_email: str, subject: str, html_content: str) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.attach(MIMEText(html_content, "html", "utf-8"))
    return msg


def send_password_reset_email(to_email: str, reset_link: str) -> None:
    """Envoie le lien de réinitialisation du mot de passe."""
    html_content = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: auto;">
        <h2 style="color: #1a73e8;">EduLink — Réinitialisation du mot de passe</h2>
        <p>Bonjour,</p>
        <p>
          Une demande de réinitialisation du mot de passe a été effectuée pour ce compte.
          Le lien ci-dessous est valable {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes.
        </p>
        <p style="text-align: center; margin: 24px 0;">
          <a href="{reset_link}" style="background: #1a73e8; color: #fff; padding: 10px 18px;
             text-decoration: none; border-radius: 4px;">Choisir un nouveau mot de passe</a>
        </p>
        <p>Si vous n'êtes pas à l'origine de cette demande, ignorez cet email.</p>
        <hr style="border: none; border-top: 1px solid #eee;" />
        <p style="font-size: 12px; color: #888;">
          Ce message est généré automatiquement par EduLink. Ne pas répondre à cet email.
        </p>
      </body>
    </html>
    """
    _send(_html_message(to_email, "EduLink — Réinitialisation du mot de passe", html_content))
    logger.info("Email de réinitialisation envoyé à %s", to_email)


def send_task_reminder_email(
    to_email: str,
    student_name: str,
    task_title: str,
    course_title: str,
    due_date: datetime,
) -> None:
    """Rappelle à un élève qu'une tâche non remise arrive à échéance."""
    due_text = due_date.strftime("%d/%m/%Y à %H:%M")
    html_content = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: auto;">
        <h2 style="color: #1a73e8;">EduLink — Rappel de tâche</h2>
        <p>Bonjour {student_name},</p>
        <p>
          La tâche <strong>{task_title}</strong> du cours <strong>{course_title}</strong>
          est à rendre le <strong>{due_text}</strong>, et aucune remise n'a encore été enregistrée.
        </p>
        <hr style="border: none; border-top: 1px solid #eee;" />
        <p style="font-size: 12px; color: #888;">
          Ce message est généré automatiquement par EduLink. Ne pas répondre à cet email.
        </p>
      </body>
    </html>
    """
    _send(_html_message(to_email, f"EduLink — Rappel : {task_title} ({due_text})", html_content))
    logger.info("Rappel de tâche envoyé à %s (tâche « %s »)", to_email, task_title)
