# sistemas/empresas/models.py
"""
Modelo de empresa cliente do escritório
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON

from database.connection import Base, gerar_uuid
from utils.timezone import get_utc_now


class Empresa(Base):
    """Empresa atendida pelo escritório"""
    __tablename__ = "empresas"

    id = Column(String(36), primary_key=True, default=gerar_uuid)
    nome = Column(String(255), nullable=False)
    cnpj = Column(String(20), unique=True, nullable=True, index=True)
    razao_social = Column(String(255), nullable=True)
    nome_fantasia = Column(String(255), nullable=True)
    apelido = Column(String(255), nullable=True)
    regime_tributario = Column(String(80), nullable=True)
    grupo = Column(String(80), nullable=True)
    contato = Column(String(100), nullable=True)
    observacoes = Column(Text, nullable=True)
    ativa = Column(Boolean, default=True)

    # Referências de obrigações atribuídas (IDs ou nomes do catálogo)
    obrigacoes = Column(JSON, nullable=True)

    criado_em = Column(DateTime(timezone=True), default=get_utc_now)
    atualizado_em = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    def __repr__(self):
        return f"<Empresa(id={self.id}, nome='{self.nome}')>"
