"""
Tests d'intégration API pour l'authentification (inscription, connexion, mot de passe oublié).
"""

from unittest.mock import patch

from edulink.config import ConfigurationError
from edulink.models.user import Account
from edulink.services.identity_service import AuthError, hash_password

SIGNUP = {"email": "ana@edulink.school", "password": "secret1", "first_name": "Ana", "last_name": "Pérez"}


# ============================================================
# POST /api/v1/auth/signup
# ============================================================

def test_signup_succes(client):
    with patch("edulink.routers.auth.admin_service.self_register") as mock:
        mock.return_value = "uid-1"
        response = client.post("/api/v1/auth/signup", json=SIGNUP)

    assert response.status_code == 201
    assert response.json() == {"uid": "uid-1"}


def test_signup_email_deja_utilise(client):
    """Email déjà utilisé → 409."""
    with patch("edulink.routers.auth.admin_service.self_register") as mock:
        mock.side_effect = AuthError("email-already-in-use", "Cet email est déjà utilisé.")
        response = client.post("/api/v1/auth/signup", json=SIGNUP)

    assert response.status_code == 409
    assert "déjà utilisé" in response.json()["detail"]


def test_signup_mot_de_passe_trop_court(client):
    response = client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "12345"})
    assert response.status_code == 422


def test_signup_email_invalide(client):
    response = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": "pas-un-email"})
    assert response.status_code == 422


def test_signup_compte_de_service_absent(client):
    """Compte de service manquant → 500 avec un message explicite."""
    with patch("edulink.routers.auth.admin_service.self_register") as mock:
        mock.side_effect = ConfigurationError("SERVICE_ACCOUNT_JSON n'est pas défini.")
        response = client.post("/api/v1/auth/signup", json=SIGNUP)

    assert response.status_code == 500
    assert "SERVICE_ACCOUNT_JSON" in response.json()["detail"]


# ============================================================
# POST /api/v1/auth/login
# ============================================================

def test_login_succes(client):
    with patch("edulink.routers.auth.identity_service.sign_in") as mock:
        mock.return_value = "jwt-token"
        response = client.post("/api/v1/auth/login", json={"email": "ana@edulink.school", "password": "secret1"})

    assert response.status_code == 200
    assert response.json() == {"access_token": "jwt-token", "token_type": "bearer"}


def test_login_mauvais_mot_de_passe(client):
    """Erreur d'identifiants → 401, message sous le champ mot de passe."""
    with patch("edulink.routers.auth.identity_service.sign_in") as mock:
        mock.side_effect = AuthError("wrong-password")
        response = client.post("/api/v1/auth/login", json={"email": "ana@edulink.school", "password": "secret1"})

    assert response.status_code == 401
    detail = response.json()["detail"]
    assert detail["field"] == "password"
    assert "identifiants" in detail["message"].lower()


def test_login_utilisateur_inconnu_meme_message(client):
    with patch("edulink.routers.auth.identity_service.sign_in") as mock:
        mock.side_effect = AuthError("user-not-found")
        response = client.post("/api/v1/auth/login", json={"email": "x@edulink.school", "password": "secret1"})

    assert response.status_code == 401
    assert response.json()["detail"]["field"] == "password"


def test_login_autre_erreur_message_generique(client):
    """Code non lié aux identifiants → 400, pas de champ."""
    with patch("edulink.routers.auth.identity_service.sign_in") as mock:
        mock.side_effect = AuthError("user-disabled")
        response = client.post("/api/v1/auth/login", json={"email": "ana@edulink.school", "password": "secret1"})

    assert response.status_code == 400
    assert response.json()["detail"]["field"] is None
    assert response.json()["detail"]["code"] == "user-disabled"


# ============================================================
# Mot de passe oublié
# ============================================================

def test_demande_reinitialisation_reponse_identique(client):
    with patch("edulink.routers.auth.identity_service.request_password_reset") as mock:
        mock.return_value = False
        response = client.post("/api/v1/auth/password-reset", json={"email": "inconnu@edulink.school"})

    assert response.status_code == 202
    mock.assert_called_once()


def test_demande_reinitialisation_echec_smtp_meme_reponse(client, mock_db):
    """Compte connu mais envoi en échec : même réponse qu'un email inconnu."""
    mock_db.execute.return_value.scalar.return_value = Account(
        uid="u-1", email="ana@edulink.school", password_hash=hash_password("secret123"), disabled=False,
    )
    with patch("edulink.services.identity_service.send_password_reset_email") as mock_send:
        mock_send.side_effect = OSError("SMTP indisponible")
        response = client.post("/api/v1/auth/password-reset", json={"email": "ana@edulink.school"})

    assert response.status_code == 202
    mock_send.assert_called_once()


def test_confirmation_reinitialisation(client):
    with patch("edulink.routers.auth.identity_service.confirm_password_reset") as mock:
        response = client.post("/api/v1/auth/password-reset/confirm",
                               json={"token": "tok", "new_password": "nouveau1"})

    assert response.status_code == 204
    mock.assert_called_once()


def test_confirmation_lien_expire(client):
    with patch("edulink.routers.auth.identity_service.confirm_password_reset") as mock:
        mock.side_effect = AuthError("expired-action-code", "Lien expiré.")
        response = client.post("/api/v1/auth/password-reset/confirm",
                               json={"token": "tok", "new_password": "nouveau1"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Lien expiré."
