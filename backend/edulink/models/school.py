"""
Modèles SQLAlchemy pour les écoles et leur structure pédagogique
(matières, niveaux, sections, enseignants rattachés).
"""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func

from edulink.database import Base, new_id


class School(Base):
    __tablename__ = "schools"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    address = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active, inactive (corbeille)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Subject(Base):
    """Matière enseignée dans une école."""
    __tablename__ = "subjects"

    id = Column(String(64), primary_key=True, default=new_id)
    school_id = Column(String(64), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class GradeLevel(Base):
    """Niveau scolaire (ex : « Première année »)."""
    __tablename__ = "grade_levels"

    id = Column(String(64), primary_key=True, default=new_id)
    school_id = Column(String(64), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Section(Base):
    __tablename__ = "sections"

    id = Column(String(64), primary_key=True, default=new_id)
    school_id = Column(String(64), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    grade_level_id = Column(String(64), nullable=False)
    grade_name = Column(String(200), nullable=True)  # dénormalisé depuis GradeLevel.name
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class SchoolTeacher(Base):
    """Rattachement enseignant ↔ école (schools/{id}/teachers/{uid})."""
    __tablename__ = "school_teachers"

    school_id = Column(String(64), ForeignKey("schools.id", ondelete="CASCADE"), primary_key=True)
    teacher_id = Column(String(64), primary_key=True)
    assigned_at = Column(DateTime, server_default=func.now())
