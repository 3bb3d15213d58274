# auth/router.py
"""
Endpoints de autenticação: login, dados do usuário, troca de senha
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.schemas import Token, ChangePasswordRequest, UserMe
from auth.security import verify_password, get_password_hash, create_user_token
from auth.dependencies import get_current_active_user
from utils.rate_limit import limiter, LIMITS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Autenticação"])


@router.post("/login", response_model=Token)
@limiter.limit(LIMITS["login"])
async def login(
    request: Request,  # Necessário para rate limiting
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    Autentica o usuário e retorna um token JWT.

    - **username**: Nome de usuário
    - **password**: Senha
    """
    user = db.query(User).filter(User.username == form_data.username).first()

    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Falha de login para '{form_data.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário ou senha incorretos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuário desativado. Contate o administrador."
        )

    return Token(access_token=create_user_token(user), token_type="bearer")


@router.get("/me", response_model=UserMe)
async def get_me(current_user: User = Depends(get_current_active_user)):
    """
    Retorna os dados do usuário autenticado.
    """
    return current_user


@router.post("/change-password")
@limiter.limit(LIMITS["login"])
async def change_password(
    request: Request,  # Necessário para rate limiting
    password_request: ChangePasswordRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Altera a senha do usuário autenticado.

    - **current_password**: Senha atual
    - **new_password**: Nova senha (mínimo 4 caracteres)
    """
    if not verify_password(password_request.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Senha atual incorreta"
        )

    if password_request.current_password == password_request.new_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nova senha deve ser diferente da atual"
        )

    current_user.hashed_password = get_password_hash(password_request.new_password)
    current_user.must_change_password = False
    db.commit()

    return {"message": "Senha alterada com sucesso"}
