# sistemas/obrigacoes/schemas.py
"""
Schemas Pydantic do catálogo de obrigações e das rotinas mensais
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


# ==========================================
# Obrigações
# ==========================================

class ObrigacaoBase(BaseModel):
    nome: str = Field(..., min_length=1, max_length=255)
    apelido: Optional[str] = None
    departamento: Optional[str] = None
    responsavel: Optional[str] = None
    minutos_previstos: Optional[int] = None
    vencimentos_mensais: Optional[Dict[str, Union[str, int]]] = None
    dias_lembrete: Optional[int] = None
    tipo_lembrete: Optional[str] = None
    regra_dia_nao_util: Optional[str] = None
    sabado_util: bool = False
    regra_competencia: Optional[str] = None
    requer_robo: bool = False
    tem_multa: bool = False
    alerta_guia: bool = True
    ativa: bool = True

    @field_validator("vencimentos_mensais")
    @classmethod
    def validar_meses(cls, valor):
        """Chaves devem ser meses de 1 a 12, sem zero à esquerda."""
        if valor is None:
            return valor
        normalizado = {}
        for chave, vencimento in valor.items():
            chave_txt = str(chave).strip()
            if not chave_txt.isdigit() or not 1 <= int(chave_txt) <= 12:
                raise ValueError(f"Mês inválido na tabela de vencimentos: '{chave}'")
            normalizado[str(int(chave_txt))] = vencimento
        return normalizado


class ObrigacaoUpsert(ObrigacaoBase):
    """Criação (sem id) ou atualização (com id) de obrigação"""
    id: Optional[str] = None


class ObrigacaoResponse(ObrigacaoBase):
    id: str
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    class Config:
        from_attributes = True


# ==========================================
# Rotinas mensais
# ==========================================

class RotinaMensalResponse(BaseModel):
    id: str
    empresa_id: str
    obrigacao_id: str
    nome_obrigacao: Optional[str] = None
    departamento: Optional[str] = None
    competencia: str
    prazo: Optional[date] = None
    status: str
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    class Config:
        from_attributes = True


class AtualizarStatusRequest(BaseModel):
    status: str = Field(..., min_length=1)


class GerarRotinasRequest(BaseModel):
    """Geração manual: uma empresa, ou todas se empresa_id for omitido"""
    empresa_id: Optional[str] = None


class ResumoGeracao(BaseModel):
    competencia: str
    empresas: int
    rotinas_criadas: int


class RotinasListResponse(BaseModel):
    rotinas: List[RotinaMensalResponse]
    total: int
