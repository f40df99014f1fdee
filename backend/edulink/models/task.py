"""
Modèles SQLAlchemy pour les tâches d'un cours et les remises des élèves.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text, func

from edulink.database import Base, new_id


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(64), primary_key=True, default=new_id)
    course_id = Column(String(64), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=False)
    is_group_task = Column(Boolean, default=False)
    total_points = Column(Float, nullable=False, default=100)
    reminder_sent_at = Column(DateTime, nullable=True)  # NULL = rappel pas encore envoyé
    created_at = Column(DateTime, server_default=func.now())


class Submission(Base):
    """Remise d'un élève : id = student_id, une seule remise par (élève, tâche)."""
    __tablename__ = "submissions"

    task_id = Column(String(64), ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True)
    id = Column(String(64), primary_key=True)
    course_id = Column(String(64), nullable=False)
    student_id = Column(String(64), nullable=False)
    submitted_at = Column(DateTime, nullable=True)  # NULL si notée sans remise
    file_url = Column(String(500), nullable=True)
    status = Column(String(40), nullable=False, default="submitted")  # submitted, graded_without_submission
    score = Column(Float, nullable=True)
    graded_at = Column(DateTime, nullable=True)
