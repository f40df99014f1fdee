"""
Fournisseur d'identité : comptes email/mot de passe, jetons de session, réinitialisation.

Codes d'erreur (AuthError.code) :
- invalid-credential, user-not-found, wrong-password → regroupés en un seul message
  « vérifiez vos identifiants » sur le champ mot de passe
- tous les autres codes → message générique
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.config import settings
from edulink.models.user import Account
from edulink.services.email_service import send_password_reset_email

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

CREDENTIAL_ERROR_CODES = frozenset({"invalid-credential", "user-not-found", "wrong-password"})

CREDENTIAL_ERROR_MESSAGE = "Identifiants incorrects. Vérifiez votre email et votre mot de passe."
GENERIC_AUTH_ERROR_MESSAGE = "Une erreur inattendue est survenue. Veuillez réessayer."

ACCESS_PURPOSE = "access"
RESET_PURPOSE = "password-reset"


class AuthError(Exception):
    """Erreur du fournisseur d'identité, identifiée par un code stable."""

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code


def describe_auth_error(code: str) -> Tuple[Optional[str], str]:
    """
    Traduit un code d'erreur en (champ, message) à afficher.
    Champ None → notification générique plutôt qu'un message sous un champ.
    """
    if code in CREDENTIAL_ERROR_CODES:
        return "password", CREDENTIAL_ERROR_MESSAGE
    return None, GENERIC_AUTH_ERROR_MESSAGE


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def _encode(claims: dict, minutes: int) -> str:
    to_encode = claims.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _decode(token: str, purpose: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise AuthError("invalid-token", "Jeton invalide ou expiré.") from exc
    if payload.get("purpose") != purpose or not payload.get("sub"):
        raise AuthError("invalid-token", "Jeton invalide ou expiré.")
    return payload


def create_access_token(uid: str) -> str:
    return _encode({"sub": uid, "purpose": ACCESS_PURPOSE}, settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def decode_access_token(token: str) -> str:
    """Retourne l'uid porté par un jeton de session valide. Lève AuthError sinon."""
    return _decode(token, ACCESS_PURPOSE)["sub"]


def get_account_by_email(db: Session, email: str) -> Optional[Account]:
    return db.execute(
        select(Account).where(Account.email == email.lower())
    ).scalar()


def create_account(db: Session, email: str, password: str, created_by: Optional[str] = None) -> Account:
    """
    Ajoute un compte à la session (sans commit : l'appelant commit avec le profil).
    Lève AuthError("email-already-in-use") si l'email est déjà utilisé.
    """
    if get_account_by_email(db, email) is not None:
        raise AuthError("email-already-in-use", "Cette adresse email est déjà utilisée.")

    account = Account(
        email=email.lower(),
        password_hash=hash_password(password),
        created_by=created_by,
    )
    db.add(account)
    db.flush()  # Obtenir l'uid avant la création du profil
    return account


def sign_in(db: Session, email: str, password: str) -> str:
    """Vérifie les identifiants et retourne un jeton de session."""
    account = get_account_by_email(db, email)
    if account is None:
        raise AuthError("user-not-found")
    if account.disabled:
        raise AuthError("user-disabled", "Ce compte est désactivé.")
    if not verify_password(password, account.password_hash):
        raise AuthError("wrong-password")

    account.last_login_at = datetime.now(timezone.utc).replace(tzinfo=None)
    db.commit()

    logger.info("Connexion réussie : %s", account.uid)
    return create_access_token(account.uid)


def _reset_fingerprint(account: Account) -> str:
    # Le jeton devient invalide dès que le mot de passe change (usage unique)
    return account.password_hash[-12:]


def request_password_reset(db: Session, email: str) -> bool:
    """
    Envoie un lien de réinitialisation si le compte existe.
    Retourne False pour un email inconnu (l'appelant ne doit pas le révéler).
    Un échec d'envoi est journalisé sans être remonté, pour la même raison.
    """
    account = get_account_by_email(db, email)
    if account is None:
        logger.info("Réinitialisation demandée pour un email inconnu")
        return False

    token = _encode(
        {"sub": account.uid, "purpose": RESET_PURPOSE, "fp": _reset_fingerprint(account)},
        settings.PASSWORD_RESET_EXPIRE_MINUTES,
    )
    reset_link = f"{settings.FRONTEND_URL}/reset-password?token={token}"
    try:
        send_password_reset_email(account.email, reset_link)
    except Exception as exc:
        logger.error("Erreur envoi email de réinitialisation à %s : %s", account.email, exc)
    return True


def confirm_password_reset(db: Session, token: str, new_password: str) -> None:
    """Applique le nouveau mot de passe si le jeton est valide et pas encore utilisé."""
    payload = _decode(token, RESET_PURPOSE)
    account = db.get(Account, payload["sub"])
    if account is None:
        raise AuthError("user-not-found")
    if payload.get("fp") != _reset_fingerprint(account):
        raise AuthError("invalid-token", "Ce lien a déjà été utilisé.")

    account.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Mot de passe réinitialisé : %s", account.uid)
