# sistemas/notificacoes/services.py
"""
Envio de notificações internas.

notificar_usuarios() é efeito colateral de outras operações (geração de
rotinas, mudança de status), então nunca propaga erro de banco: registra
no log e segue.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from utils.logging_config import get_logger
from utils.timezone import now_utc

from .models import Notificacao

logger = get_logger(__name__)


def notificar_usuarios(
    db: Session,
    usuario_ids: Iterable[str],
    titulo: str,
    mensagem: str,
    agora: Optional[datetime] = None
) -> None:
    """
    Cria uma notificação não lida por destinatário.

    Args:
        db: Sessão SQLAlchemy
        usuario_ids: Destinatários (duplicatas não são removidas)
        titulo: Título da notificação
        mensagem: Texto da notificação
        agora: Timestamp do lote (padrão: agora em UTC)
    """
    destinatarios = [uid for uid in (usuario_ids or []) if uid]
    if not destinatarios:
        return

    criado_em = agora or now_utc()
    try:
        db.add_all([
            Notificacao(
                usuario_id=usuario_id,
                titulo=titulo,
                mensagem=mensagem,
                lida=False,
                criado_em=criado_em,
            )
            for usuario_id in destinatarios
        ])
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(
            "Falha ao gravar notificações",
            titulo=titulo,
            destinatarios=len(destinatarios),
            erro=str(e),
        )
        return

    logger.debug("Notificações enviadas", titulo=titulo, destinatarios=len(destinatarios))


def listar_notificacoes_do_usuario(
    db: Session,
    usuario_id: str,
    apenas_nao_lidas: bool = False
) -> List[Notificacao]:
    query = db.query(Notificacao).filter(Notificacao.usuario_id == usuario_id)
    if apenas_nao_lidas:
        query = query.filter(Notificacao.lida.is_(False))
    return query.order_by(Notificacao.criado_em.desc()).all()
