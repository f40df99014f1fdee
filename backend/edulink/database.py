"""
Configuration de la connexion à la base de données.
Chaque collection de documents (users, courses, courses/{id}/attendance, ...) est une table
dont la clé primaire reprend l'identifiant déterministe du document.
"""

import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from edulink.config import settings

engine = create_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI : fournit une session BDD et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def new_id() -> str:
    """Identifiant aléatoire d'un nouveau document (équivalent d'un ID auto-généré)."""
    return uuid.uuid4().hex
