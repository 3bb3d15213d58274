# auth/schemas.py
"""
Schemas Pydantic para autenticação e usuários
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


# ==========================================
# Token e login
# ==========================================

class Token(BaseModel):
    """Token JWT retornado no login"""
    access_token: str
    token_type: str = "bearer"


class ChangePasswordRequest(BaseModel):
    """Request de troca de senha"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=4, max_length=100)


# ==========================================
# Usuários
# ==========================================

class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    full_name: str = Field(..., min_length=2, max_length=200)
    role: str = Field(default="cliente", pattern="^(admin|cliente)$")
    empresa_id: Optional[str] = None


class UserCreate(UserBase):
    """Schema para criação de usuário"""
    password: Optional[str] = None  # Se None, usa senha padrão


class UserUpdate(BaseModel):
    """Schema para atualização de usuário"""
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=2, max_length=200)
    role: Optional[str] = Field(None, pattern="^(admin|cliente)$")
    empresa_id: Optional[str] = None
    is_active: Optional[bool] = None


class UserResponse(UserBase):
    id: str
    is_active: bool
    must_change_password: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserMe(BaseModel):
    """Schema para /auth/me - dados do usuário logado"""
    id: str
    username: str
    email: Optional[str] = None
    full_name: str
    role: str
    empresa_id: Optional[str] = None
    must_change_password: bool

    class Config:
        from_attributes = True
