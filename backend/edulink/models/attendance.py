"""
Modèle SQLAlchemy pour les présences d'un cours.

Unicité (élève, jour) :
- id = "{student_id}_{date}" : identifiant déterministe, pas de contrainte transactionnelle
- deux écritures concurrentes sur le même id → la dernière l'emporte
- student_name est une copie du nom au moment de l'écriture : un changement de nom
  ultérieur ne met PAS à jour les présences passées
"""

from sqlalchemy import Column, DateTime, ForeignKey, String, func

from edulink.database import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    course_id = Column(String(64), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True)
    id = Column(String(100), primary_key=True)  # "{student_id}_{YYYY-MM-DD}"
    student_id = Column(String(64), nullable=False)
    student_name = Column(String(200), nullable=False)
    date = Column(String(10), nullable=False)        # Date ISO (YYYY-MM-DD)
    status = Column(String(20), nullable=False)      # presente, ausente, tardanza
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
