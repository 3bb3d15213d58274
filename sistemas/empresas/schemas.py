# sistemas/empresas/schemas.py
"""
Schemas Pydantic do cadastro de empresas
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class EmpresaBase(BaseModel):
    nome: Optional[str] = Field(None, max_length=255)
    cnpj: Optional[str] = Field(None, max_length=20)
    razao_social: Optional[str] = None
    nome_fantasia: Optional[str] = None
    apelido: Optional[str] = None
    regime_tributario: Optional[str] = None
    grupo: Optional[str] = None
    contato: Optional[str] = None
    observacoes: Optional[str] = None
    ativa: bool = True
    obrigacoes: List[str] = Field(default_factory=list)  # IDs ou nomes do catálogo


class EmpresaUpsert(EmpresaBase):
    """Criação (sem id) ou atualização (com id) de empresa"""
    id: Optional[str] = None


class EmpresaResponse(EmpresaBase):
    id: str
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    @field_validator("obrigacoes", mode="before")
    @classmethod
    def obrigacoes_vazias(cls, valor):
        return valor or []

    class Config:
        from_attributes = True
