"""
Configuration partagée pour tous les tests.
Override la dépendance get_db pour éviter toute connexion réelle à PostgreSQL,
et les dépendances d'authentification pour jouer un rôle donné.
"""

import os

os.environ["ENABLE_SCHEDULER"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

import edulink.models  # noqa: F401
from edulink.database import Base, get_db
from edulink.dependencies import get_current_profile
from edulink.main import app
from edulink.models.user import UserProfile


def make_profile(user_id="u-admin", role="admin", **kwargs) -> UserProfile:
    """Profil réel (non persisté) : ses attributs passent la validation Pydantic."""
    return UserProfile(
        id=user_id,
        first_name=kwargs.get("first_name", "Ana"),
        last_name=kwargs.get("last_name", "Pérez"),
        email=kwargs.get("email", f"{user_id}@edulink.school"),
        role=role,
        school_id=kwargs.get("school_id", "school-1"),
        section_id=kwargs.get("section_id"),
        grade_level_id=kwargs.get("grade_level_id"),
    )


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def client(mock_db):
    """Client HTTP de test avec la BDD mockée."""
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Authentifie les requêtes suivantes avec le profil retourné."""
    def _login(role="admin", user_id=None, **kwargs) -> UserProfile:
        profile = make_profile(user_id or f"u-{role}", role, **kwargs)
        app.dependency_overrides[get_current_profile] = lambda: profile
        return profile
    return _login


@pytest.fixture
def db_session():
    """Session SQLite en mémoire, pour les invariants qui comptent de vraies lignes."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()
