# sistemas/notificacoes/router.py
"""
Endpoints de notificações internas
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from auth.dependencies import get_current_active_user, require_admin
from auth.models import User
from database.connection import get_db

from .models import Notificacao
from .schemas import EnviarNotificacaoRequest, NotificacaoResponse, NotificacaoUpdate
from .services import listar_notificacoes_do_usuario, notificar_usuarios

router = APIRouter(prefix="/notificacoes", tags=["Notificações"])


def _obter_notificacao(db: Session, notificacao_id: str) -> Notificacao:
    notificacao = db.query(Notificacao).filter(Notificacao.id == notificacao_id).first()
    if not notificacao:
        raise HTTPException(status_code=404, detail="Notificação não encontrada")
    return notificacao


@router.get("", response_model=List[NotificacaoResponse])
async def listar_minhas_notificacoes(
    apenas_nao_lidas: bool = False,
    user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Lista as notificações do usuário logado, mais recentes primeiro."""
    return listar_notificacoes_do_usuario(db, user.id, apenas_nao_lidas=apenas_nao_lidas)


@router.post("/{notificacao_id}/lida", response_model=NotificacaoResponse)
async def marcar_como_lida(
    notificacao_id: str,
    user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    notificacao = _obter_notificacao(db, notificacao_id)
    if notificacao.usuario_id != user.id and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso negado a esta notificação"
        )

    notificacao.lida = True
    db.commit()
    db.refresh(notificacao)
    return notificacao


@router.put("/{notificacao_id}", response_model=NotificacaoResponse)
async def editar_notificacao(
    notificacao_id: str,
    dados: NotificacaoUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Edita título e/ou mensagem de uma notificação.

    **Acesso:** Apenas administradores
    """
    notificacao = _obter_notificacao(db, notificacao_id)
    for campo, valor in dados.model_dump(exclude_unset=True).items():
        setattr(notificacao, campo, valor)
    db.commit()
    db.refresh(notificacao)
    return notificacao


@router.delete("/{notificacao_id}")
async def excluir_notificacao(
    notificacao_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Remove uma notificação.

    **Acesso:** Apenas administradores
    """
    notificacao = _obter_notificacao(db, notificacao_id)
    db.delete(notificacao)
    db.commit()
    return {"success": True}


@router.post("/enviar")
async def enviar_notificacao(
    dados: EnviarNotificacaoRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Envia uma notificação para uma lista de usuários.

    **Acesso:** Apenas administradores
    """
    existentes = {
        uid for (uid,) in db.query(User.id).filter(User.id.in_(dados.usuario_ids)).all()
    }
    desconhecidos = [uid for uid in dados.usuario_ids if uid not in existentes]
    if desconhecidos:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Usuários não encontrados: {', '.join(desconhecidos)}"
        )

    notificar_usuarios(db, dados.usuario_ids, dados.titulo, dados.mensagem)
    return {"success": True, "destinatarios": len(dados.usuario_ids)}
