"""
Router d'authentification : inscription, connexion, mot de passe oublié.
La déconnexion se fait côté client (jeton sans état, il suffit de l'oublier).
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.schemas.auth import (
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    SignupRequest,
    SignupResponse,
    TokenResponse,
)
from edulink.services import admin_service, identity_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


def _auth_http_error(error: identity_service.AuthError) -> HTTPException:
    """
    Erreurs d'identifiants → 401 avec message sous le champ mot de passe.
    Toute autre erreur → 400 avec message générique.
    """
    field, message = identity_service.describe_auth_error(error.code)
    status_code = 401 if field else 400
    return HTTPException(status_code=status_code, detail={"code": error.code, "field": field, "message": message})


@router.post("/signup", response_model=SignupResponse, status_code=201, summary="Créer un compte")
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    """Auto-inscription : compte + profil élève rattaché à l'école par défaut."""
    try:
        uid = admin_service.self_register(db, data)
    except identity_service.AuthError as e:
        if e.code == "email-already-in-use":
            raise HTTPException(status_code=409, detail=str(e))
        raise _auth_http_error(e)
    return SignupResponse(uid=uid)


@router.post("/login", response_model=TokenResponse, summary="Se connecter")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    try:
        token = identity_service.sign_in(db, data.email, data.password)
    except identity_service.AuthError as e:
        raise _auth_http_error(e)
    return TokenResponse(access_token=token)


@router.post("/password-reset", status_code=202, summary="Demander un lien de réinitialisation")
def request_password_reset(data: PasswordResetRequest, db: Session = Depends(get_db)):
    """La réponse est identique que l'email soit connu ou non, et même si l'envoi échoue."""
    identity_service.request_password_reset(db, data.email)
    return {"detail": "Si un compte existe pour cet email, un lien de réinitialisation a été envoyé."}


@router.post("/password-reset/confirm", status_code=204, summary="Choisir un nouveau mot de passe")
def confirm_password_reset(data: PasswordResetConfirm, db: Session = Depends(get_db)):
    try:
        identity_service.confirm_password_reset(db, data.token, data.new_password)
    except identity_service.AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
