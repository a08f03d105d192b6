from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
from linkshelf.core.database import get_db
from linkshelf.core.deps import AuthenticatedUser, get_current_user
from linkshelf.core.errors import ConflictError, ValidationError
from linkshelf.core.security import create_access_token, create_refresh_token, verify_token
from linkshelf.models.user import User
from linkshelf.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RefreshRequest,
    TokenResponse,
    UserCreate,
)
from linkshelf.schemas.link import MessageResponse

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@router.post("/create-account", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Créer un nouvel utilisateur et le connecter directement"""

    if len(user_data.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    # Vérifie si l'email existe déjà
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise ConflictError("User already exists with this email")

    # Crée le new utilisateur
    new_user = User(email=user_data.email, name=user_data.name)
    new_user.set_password(user_data.password)

    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # même email inscrit entre le check et l'insert
        db.rollback()
        raise ConflictError("User already exists with this email")
    db.refresh(new_user)

    return {
        "message": "Account created successfully",
        "user": new_user,
        "access_token": create_access_token(new_user.id, new_user.email),
        "refresh_token": create_refresh_token(new_user.id, new_user.email),
    }

@router.post("/login", response_model=AuthResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Se connecter et recevoir les tokens"""

    # Cherche l'utilisateur avec son mail
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not user.verify_password(credentials.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {
        "message": "Login successful",
        "user": user,
        "access_token": create_access_token(user.id, user.email),
        "refresh_token": create_refresh_token(user.id, user.email),
    }

@router.post("/refresh", response_model=TokenResponse)
@router.post("/refresh-token", response_model=TokenResponse)
def refresh(
    body: Optional[RefreshRequest] = None,
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Utiliser un refresh_token pour obtenir une nouvelle paire de tokens"""

    # dans le body, sinon dans le header Authorization
    refresh_token = body.refresh_token if body else None
    if not refresh_token and authorization:
        refresh_token = authorization.replace("Bearer ", "").strip()

    if not refresh_token:
        raise HTTPException(status_code=401, detail="Refresh token is required")

    # Vérifie le refresh_token
    payload = verify_token(refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = db.query(User).filter(User.id == payload.get("user_id")).first()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    return {
        "message": "Token refreshed successfully",
        "access_token": create_access_token(user.id, user.email),
        "refresh_token": create_refresh_token(user.id, user.email),
    }

@router.post("/logout", response_model=MessageResponse)
def logout():
    # tokens stateless: le client les oublie, rien à faire côté serveur
    return {"message": "Logout successful"}

@router.get("/me", response_model=ProfileResponse)
@router.get("/profile", response_model=ProfileResponse)
def me(current_user: AuthenticatedUser = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == current_user.id).first()
    return {"user": user}
