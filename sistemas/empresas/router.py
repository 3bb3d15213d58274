# sistemas/empresas/router.py
"""
Endpoints do cadastro de empresas

Salvar uma empresa agenda, em background, a geração das rotinas mensais
da competência corrente para as obrigações atribuídas a ela.
"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session, sessionmaker

from auth.dependencies import get_current_active_user, require_admin, verificar_acesso_empresa
from auth.models import User
from database.connection import get_db, get_session_factory
from sistemas.obrigacoes.competencia import eh_uuid
from sistemas.obrigacoes.services import garantir_rotinas_mensais
from utils.logging_config import get_logger

from .models import Empresa
from .schemas import EmpresaResponse, EmpresaUpsert

logger = get_logger(__name__)

router = APIRouter(prefix="/empresas", tags=["Empresas"])


def _obter_empresa(db: Session, empresa_id: str) -> Empresa:
    empresa = db.query(Empresa).filter(Empresa.id == empresa_id).first()
    if not empresa:
        raise HTTPException(status_code=404, detail="Empresa não encontrada")
    return empresa


@router.get("", response_model=List[EmpresaResponse])
async def listar_empresas(
    user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Lista empresas. Clientes recebem apenas a própria empresa.
    """
    query = db.query(Empresa)
    if not user.is_admin:
        query = query.filter(Empresa.id == user.empresa_id)
    return query.order_by(Empresa.nome).all()


@router.get("/{empresa_id}", response_model=EmpresaResponse)
async def obter_empresa(
    empresa_id: str,
    user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    verificar_acesso_empresa(user, empresa_id)
    return _obter_empresa(db, empresa_id)


@router.post("", response_model=EmpresaResponse)
async def salvar_empresa(
    dados: EmpresaUpsert,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory)
):
    """
    Cria ou atualiza uma empresa.

    **Acesso:** Apenas administradores

    - **nome** pode ser omitido se **razao_social** ou **nome_fantasia** vier preenchido
    - **obrigacoes**: IDs ou nomes do catálogo; as rotinas da competência
      corrente são geradas em background após a resposta
    """
    nome = dados.nome or dados.razao_social or dados.nome_fantasia
    if not nome:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Informe o nome, a razão social ou o nome fantasia"
        )

    empresa = None
    empresa_id = dados.id.lower() if dados.id and eh_uuid(dados.id) else None
    if empresa_id:
        empresa = db.query(Empresa).filter(Empresa.id == empresa_id).first()

    if dados.cnpj:
        duplicada = db.query(Empresa).filter(Empresa.cnpj == dados.cnpj).first()
        if duplicada and (empresa is None or duplicada.id != empresa.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"CNPJ '{dados.cnpj}' já cadastrado"
            )

    campos = dados.model_dump(exclude={"id"})
    campos["nome"] = nome

    if empresa:
        for campo, valor in campos.items():
            setattr(empresa, campo, valor)
    else:
        empresa = Empresa(**campos)
        if empresa_id:
            empresa.id = empresa_id
        db.add(empresa)

    db.commit()
    db.refresh(empresa)

    if dados.obrigacoes:
        background_tasks.add_task(
            garantir_rotinas_mensais,
            empresa.id,
            list(dados.obrigacoes),
            session_factory,
        )

    logger.info("Empresa salva", empresa_id=empresa.id, obrigacoes=len(dados.obrigacoes))
    return empresa


@router.delete("/{empresa_id}")
async def excluir_empresa(
    empresa_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Remove uma empresa.

    **Acesso:** Apenas administradores
    """
    empresa = _obter_empresa(db, empresa_id)
    db.delete(empresa)
    db.commit()
    return {"success": True}
