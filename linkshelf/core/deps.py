from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from linkshelf.core.database import get_db
from linkshelf.core.errors import AuthError
from linkshelf.core.security import authenticate
from linkshelf.models.user import User


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identité de l'appelant, établie une seule fois par get_current_user()"""
    id: int
    email: str
    name: Optional[str] = None


def get_current_user(db: Session = Depends(get_db), authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    """
    Récupère l'utilisateur depuis le JWT token.

    - pas de header Authorization -> 401
    - token invalide / expiré / user supprimé -> 403
    """
    token = None
    if authorization:
        scheme, _, value = authorization.partition(" ")
        token = value.strip() if scheme.lower() == "bearer" else None

    user_id = authenticate(token)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthError("Invalid or expired token")

    return AuthenticatedUser(id=user.id, email=user.email, name=user.name)
