# users/router.py
"""
Endpoints de gestão de usuários (somente admin)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from auth.models import User, PAPEL_ADMIN, PAPEL_CLIENTE
from auth.schemas import UserCreate, UserUpdate, UserResponse
from auth.security import get_password_hash
from auth.dependencies import require_admin
from config import DEFAULT_USER_PASSWORD

router = APIRouter(prefix="/users", tags=["Usuários"])


def _obter_usuario(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Usuário não encontrado"
        )
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(
    role: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Lista os usuários do sistema, opcionalmente filtrando por papel.

    **Acesso:** Apenas administradores
    """
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return query.order_by(User.username).offset(skip).limit(limit).all()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Cria um novo usuário.

    **Acesso:** Apenas administradores

    - Se **password** não for informada, usa a senha padrão
    - Usuários **cliente** precisam de **empresa_id**
    - O usuário será forçado a trocar a senha no primeiro acesso
    """
    if db.query(User).filter(User.username == user_data.username).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Usuário '{user_data.username}' já existe"
        )

    if user_data.email and db.query(User).filter(User.email == user_data.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Email '{user_data.email}' já cadastrado"
        )

    if user_data.role == PAPEL_CLIENTE and not user_data.empresa_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Usuário cliente precisa estar vinculado a uma empresa"
        )

    password = user_data.password or DEFAULT_USER_PASSWORD

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        full_name=user_data.full_name,
        hashed_password=get_password_hash(password),
        role=user_data.role,
        empresa_id=user_data.empresa_id if user_data.role == PAPEL_CLIENTE else None,
        must_change_password=True,
        is_active=True
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    return new_user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Retorna detalhes de um usuário específico.

    **Acesso:** Apenas administradores
    """
    return _obter_usuario(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Atualiza dados de um usuário.

    **Acesso:** Apenas administradores
    """
    user = _obter_usuario(db, user_id)

    if user.id == admin.id and user_data.is_active is False:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Você não pode desativar sua própria conta"
        )

    if user.id == admin.id and user_data.role and user_data.role != PAPEL_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Você não pode remover seu próprio acesso de administrador"
        )

    if user_data.email and user_data.email != user.email:
        if db.query(User).filter(User.email == user_data.email).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Email '{user_data.email}' já cadastrado"
            )

    for field, value in user_data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    return user


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Desativa um usuário (soft delete).

    **Acesso:** Apenas administradores
    """
    user = _obter_usuario(db, user_id)

    if user.id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Você não pode desativar sua própria conta"
        )

    user.is_active = False
    db.commit()

    return {"message": f"Usuário '{user.username}' desativado com sucesso"}
