"""
Modèles SQLAlchemy pour les cours et leurs inscriptions.
Les noms (matière, section, niveau, enseignant) sont dénormalisés sur le cours
au moment de l'assignation et ne sont pas resynchronisés ensuite.
"""

from sqlalchemy import Column, DateTime, ForeignKey, String, func

from edulink.database import Base, new_id


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(64), primary_key=True, default=new_id)
    school_id = Column(String(64), nullable=True)
    subject_id = Column(String(64), nullable=True)
    subject_name = Column(String(200), nullable=False)
    section_id = Column(String(64), nullable=False)
    section_name = Column(String(100), nullable=False)
    grade_name = Column(String(200), nullable=True)
    teacher_id = Column(String(64), nullable=False)
    teacher_name = Column(String(200), nullable=True)
    schedule = Column(String(200), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Enrollment(Base):
    """Inscription d'un élève à un cours (courses/{courseId}/students/{id})."""
    __tablename__ = "enrollments"

    course_id = Column(String(64), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True)
    id = Column(String(64), primary_key=True, default=new_id)
    student_id = Column(String(64), nullable=False)
    enrolled_at = Column(DateTime, server_default=func.now())
