# sistemas/notificacoes/models.py
"""
Modelo de notificação interna
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey

from database.connection import Base, gerar_uuid
from utils.timezone import get_utc_now


class Notificacao(Base):
    """Mensagem destinada a um usuário do portal"""
    __tablename__ = "notificacoes"

    id = Column(String(36), primary_key=True, default=gerar_uuid)
    usuario_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    titulo = Column(String(255), nullable=False)
    mensagem = Column(Text, nullable=True)
    lida = Column(Boolean, default=False, nullable=False)
    criado_em = Column(DateTime(timezone=True), default=get_utc_now)

    def __repr__(self):
        return f"<Notificacao(id={self.id}, usuario_id={self.usuario_id}, titulo='{self.titulo}')>"
