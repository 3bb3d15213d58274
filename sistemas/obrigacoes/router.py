# sistemas/obrigacoes/router.py
"""
Endpoints do catálogo de obrigações e das rotinas mensais
"""

import asyncio
from functools import partial
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session, sessionmaker

from auth.dependencies import get_current_active_user, require_admin
from auth.models import User
from database.connection import get_db, get_session_factory
from utils.rate_limit import get_user_identifier, limiter, LIMITS

from . import repositorio
from .agendador import AgendadorRotinas
from .competencia import eh_uuid
from .exceptions import RotinaNaoEncontradaError, StatusInvalidoError
from .models import Obrigacao
from .schemas import (
    AtualizarStatusRequest,
    GerarRotinasRequest,
    ObrigacaoResponse,
    ObrigacaoUpsert,
    ResumoGeracao,
    RotinaMensalResponse,
    RotinasListResponse,
)
from .services import atualizar_status_rotina

router = APIRouter(prefix="/obrigacoes", tags=["Obrigações"])
router_rotinas = APIRouter(prefix="/rotinas-mensais", tags=["Rotinas Mensais"])


# ==================================================
# CATÁLOGO DE OBRIGAÇÕES
# ==================================================

@router.get("", response_model=List[ObrigacaoResponse])
async def listar_obrigacoes(
    apenas_ativas: bool = False,
    user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Lista o catálogo de obrigações, ordenado por nome."""
    query = db.query(Obrigacao)
    if apenas_ativas:
        query = query.filter(Obrigacao.ativa.is_(True))
    return query.order_by(Obrigacao.nome).all()


@router.get("/{obrigacao_id}", response_model=ObrigacaoResponse)
async def obter_obrigacao(
    obrigacao_id: str,
    user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    obrigacao = db.query(Obrigacao).filter(Obrigacao.id == obrigacao_id).first()
    if not obrigacao:
        raise HTTPException(status_code=404, detail="Obrigação não encontrada")
    return obrigacao


@router.post("", response_model=ObrigacaoResponse)
async def salvar_obrigacao(
    dados: ObrigacaoUpsert,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Cria ou atualiza uma obrigação do catálogo.

    **Acesso:** Apenas administradores

    - Sem **id** (ou id que não é UUID): cria nova obrigação
    - Com **id** existente: atualiza todos os campos
    """
    campos = dados.model_dump(exclude={"id"})

    obrigacao = None
    obrigacao_id = dados.id.lower() if dados.id and eh_uuid(dados.id) else None
    if obrigacao_id:
        obrigacao = db.query(Obrigacao).filter(Obrigacao.id == obrigacao_id).first()

    if obrigacao:
        for campo, valor in campos.items():
            setattr(obrigacao, campo, valor)
    else:
        obrigacao = Obrigacao(**campos)
        if obrigacao_id:
            obrigacao.id = obrigacao_id
        db.add(obrigacao)

    db.commit()
    db.refresh(obrigacao)
    return obrigacao


@router.delete("/{obrigacao_id}")
async def excluir_obrigacao(
    obrigacao_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Remove uma obrigação do catálogo.

    **Acesso:** Apenas administradores
    """
    obrigacao = db.query(Obrigacao).filter(Obrigacao.id == obrigacao_id).first()
    if not obrigacao:
        raise HTTPException(status_code=404, detail="Obrigação não encontrada")

    db.delete(obrigacao)
    db.commit()
    return {"success": True}


# ==================================================
# ROTINAS MENSAIS
# ==================================================

@router_rotinas.get("", response_model=RotinasListResponse)
async def listar_rotinas(
    empresa_id: Optional[str] = None,
    competencia: Optional[str] = None,
    status_rotina: Optional[str] = Query(None, alias="status"),
    user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Lista rotinas mensais.

    Clientes veem apenas as rotinas da própria empresa, independente do
    filtro **empresa_id** informado.
    """
    if not user.is_admin:
        if not user.empresa_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Usuário sem empresa vinculada"
            )
        empresa_id = user.empresa_id

    rotinas = repositorio.listar_rotinas(
        db,
        empresa_id=empresa_id,
        competencia=competencia,
        status=status_rotina,
    )
    return RotinasListResponse(
        rotinas=[RotinaMensalResponse.model_validate(r) for r in rotinas],
        total=len(rotinas),
    )


@router_rotinas.put("/{rotina_id}/status", response_model=RotinaMensalResponse)
async def alterar_status(
    rotina_id: str,
    dados: AtualizarStatusRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Atualiza o status de uma rotina e notifica clientes e administradores.

    **Acesso:** Apenas administradores
    """
    try:
        return atualizar_status_rotina(db, rotina_id, dados.status)
    except StatusInvalidoError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RotinaNaoEncontradaError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router_rotinas.post("/gerar", response_model=ResumoGeracao)
@limiter.limit(LIMITS["rotinas"], key_func=get_user_identifier)
async def gerar_rotinas(
    request: Request,  # Necessário para rate limiting
    dados: GerarRotinasRequest,
    admin: User = Depends(require_admin),
    session_factory: sessionmaker = Depends(get_session_factory)
):
    """
    Executa a geração de rotinas da competência corrente.

    **Acesso:** Apenas administradores
    """
    agendador = AgendadorRotinas(session_factory)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None, partial(agendador.executar_ciclo, empresa_id=dados.empresa_id)
    )
