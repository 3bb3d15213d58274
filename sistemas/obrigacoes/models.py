# sistemas/obrigacoes/models.py
"""
Modelos de dados das obrigações mensais

- Obrigacao: definição de catálogo, com a tabela de vencimento por mês
- RotinaMensal: tarefa gerada para uma empresa em uma competência
- StatusRotina: ciclo de vida da rotina
"""

from enum import Enum

from sqlalchemy import (
    Column, String, Integer, Boolean, Date, DateTime, JSON, ForeignKey, UniqueConstraint
)

from database.connection import Base, gerar_uuid
from utils.timezone import get_utc_now


# ============================================
# Enums
# ============================================

class StatusRotina(str, Enum):
    """Status da rotina mensal"""
    PENDENTE = "Pendente"
    EM_ANALISE = "Em Analise"
    CONCLUIDO = "Concluido"
    ATRASADO = "Atrasado"


# ============================================
# Modelos SQLAlchemy
# ============================================

class Obrigacao(Base):
    """Obrigação recorrente do catálogo do escritório"""
    __tablename__ = "obrigacoes"

    id = Column(String(36), primary_key=True, default=gerar_uuid)
    nome = Column(String(255), nullable=False, index=True)
    apelido = Column(String(100), nullable=True)
    departamento = Column(String(50), nullable=True)
    responsavel = Column(String(100), nullable=True)
    minutos_previstos = Column(Integer, nullable=True)

    # {"1": "20", "2": "20ª", "6": "Não há", ...} - chave é o mês sem zero à esquerda
    vencimentos_mensais = Column(JSON, nullable=True)

    dias_lembrete = Column(Integer, nullable=True)
    tipo_lembrete = Column(String(30), nullable=True)
    regra_dia_nao_util = Column(String(60), nullable=True)
    sabado_util = Column(Boolean, default=False)
    regra_competencia = Column(String(30), nullable=True)
    requer_robo = Column(Boolean, default=False)
    tem_multa = Column(Boolean, default=False)
    alerta_guia = Column(Boolean, default=True)
    ativa = Column(Boolean, default=True)

    criado_em = Column(DateTime(timezone=True), default=get_utc_now)
    atualizado_em = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    def __repr__(self):
        return f"<Obrigacao(id={self.id}, nome='{self.nome}')>"


class RotinaMensal(Base):
    """
    Uma obrigação devida por uma empresa em uma competência.

    A unicidade (empresa, obrigação, competência) é garantida pelo banco.
    """
    __tablename__ = "rotinas_mensais"
    __table_args__ = (
        UniqueConstraint(
            "empresa_id", "obrigacao_id", "competencia",
            name="uq_rotina_empresa_obrigacao_competencia"
        ),
    )

    id = Column(String(36), primary_key=True, default=gerar_uuid)
    empresa_id = Column(String(36), ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    obrigacao_id = Column(String(36), ForeignKey("obrigacoes.id", ondelete="CASCADE"), nullable=False)

    # Snapshot da obrigação no momento da geração
    nome_obrigacao = Column(String(255), nullable=True)
    departamento = Column(String(50), nullable=True)

    competencia = Column(String(7), nullable=False, index=True)  # YYYY-MM
    prazo = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=StatusRotina.PENDENTE.value)

    criado_em = Column(DateTime(timezone=True), default=get_utc_now)
    atualizado_em = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    def __repr__(self):
        return (
            f"<RotinaMensal(id={self.id}, empresa_id={self.empresa_id}, "
            f"obrigacao='{self.nome_obrigacao}', competencia='{self.competencia}')>"
        )
