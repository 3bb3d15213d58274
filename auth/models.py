# auth/models.py
"""
Modelo de usuário para autenticação
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from database.connection import Base, gerar_uuid
from utils.timezone import get_utc_now

PAPEL_ADMIN = "admin"
PAPEL_CLIENTE = "cliente"


class User(Base):
    """
    Usuário do portal.

    Administradores são a equipe do escritório; clientes pertencem a uma
    empresa e só enxergam os dados dela.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=gerar_uuid)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=True)
    full_name = Column(String(200), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=PAPEL_CLIENTE, index=True)
    empresa_id = Column(String(36), ForeignKey("empresas.id", ondelete="SET NULL"), nullable=True)
    must_change_password = Column(Boolean, default=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=get_utc_now)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == PAPEL_ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
