# sistemas/notificacoes/schemas.py
"""
Schemas Pydantic das notificações
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class NotificacaoResponse(BaseModel):
    id: str
    usuario_id: str
    titulo: str
    mensagem: Optional[str] = None
    lida: bool
    criado_em: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificacaoUpdate(BaseModel):
    titulo: Optional[str] = Field(None, min_length=1, max_length=255)
    mensagem: Optional[str] = None


class EnviarNotificacaoRequest(BaseModel):
    usuario_ids: List[str] = Field(..., min_length=1)
    titulo: str = Field(..., min_length=1, max_length=255)
    mensagem: str = ""
