from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
import bcrypt
from linkshelf.core.config import settings
from linkshelf.core.errors import AuthError

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())

def create_access_token(user_id: int, email: str) ->str:

    #crée un token d'accès JWT de 15 minutes
    payload = {
        "user_id": user_id,
        "email":email,
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_EXPIRE_MIN),
        "type":"access"
    }
    token=jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")
    return token

def create_refresh_token(user_id: int, email: str) -> str:
    #crée un token de rafraîchissement JWT au bout de 30 jours
    payload = {
        "user_id": user_id,
        "email":email,
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_REFRESH_EXPIRE_MIN),
        "type":"refresh"
    }
    token=jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")
    return token

def verify_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
        return payload
    except JWTError:
        return None

def authenticate(token: Optional[str]) -> int:
    """Retourne le user_id d'un access token, sinon AuthError"""
    if not token:
        raise AuthError("Access token is required", status_code=401)

    payload = verify_token(token)
    # un refresh token ne donne pas accès aux routes
    if payload is None or payload.get("type") != "access":
        raise AuthError("Invalid or expired token")

    user_id = payload.get("user_id")
    if not user_id:
        raise AuthError("Invalid or expired token")
    return user_id
