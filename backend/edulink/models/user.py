"""
Modèles SQLAlchemy pour les comptes d'authentification et les profils utilisateurs.

Le compte (accounts) appartient au fournisseur d'identité ; le profil (users/{uid})
porte le rôle et le rattachement scolaire lus par chaque écran.
"""

from sqlalchemy import Boolean, Column, DateTime, String, func

from edulink.database import Base, new_id


class Account(Base):
    """Identité de connexion (email + mot de passe haché)."""
    __tablename__ = "accounts"

    uid = Column(String(64), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    disabled = Column(Boolean, default=False)
    created_by = Column(String(255), nullable=True)  # client_email du compte de service
    created_at = Column(DateTime, server_default=func.now())
    last_login_at = Column(DateTime, nullable=True)


class UserProfile(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)  # = Account.uid
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="student")  # admin, director, teacher, student, parent
    school_id = Column(String(64), nullable=True)
    section_id = Column(String(64), nullable=True)
    grade_level_id = Column(String(64), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
