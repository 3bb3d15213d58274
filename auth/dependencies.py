# auth/dependencies.py
"""
Dependencies de autenticação para injeção nas rotas
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.security import decode_token

# OAuth2 scheme - define o endpoint de login
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency que retorna o usuário atual baseado no token JWT.
    Lança HTTPException 401 se token inválido.

    Uso:
        @router.get("/rota-protegida")
        def rota(user: User = Depends(get_current_user)):
            ...
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Credenciais inválidas",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    username: str = payload.get("sub")
    if username is None:
        raise credentials_exception

    user = db.query(User).filter(User.username == username).first()
    if user is None:
        raise credentials_exception

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Dependency que retorna o usuário atual apenas se estiver ativo.
    Lança HTTPException 403 se usuário desativado.
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuário desativado"
        )
    return current_user


async def require_admin(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Dependency que exige que o usuário seja administrador.

    Uso:
        @router.get("/rota-admin")
        def rota(admin: User = Depends(require_admin)):
            ...
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito a administradores"
        )
    return current_user


def verificar_acesso_empresa(user: User, empresa_id: str) -> None:
    """
    Clientes só acessam a própria empresa. Administradores acessam todas.
    Lança HTTPException 403 caso contrário.
    """
    if user.is_admin:
        return
    if not user.empresa_id or user.empresa_id != empresa_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito à própria empresa"
        )
